"""
This configuration file overrides some necessary configs
to easily develop the app.
"""

from .base import *  # noqa

INSTALLED_APPS += [  # NOQA
    "django.contrib.staticfiles",  # for API admin in local & develop
]

DEBUG = config("DEBUG", default=True, cast=bool)  # noqa

ALLOWED_HOSTS = ["*"]

INTERNAL_IPS = ["127.0.0.1"]

STATIC_ROOT = "staticfiles"

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "local-cache",
    },
}
