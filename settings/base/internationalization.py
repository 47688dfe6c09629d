"""Internationalization settings.
https://docs.djangoproject.com/en/5.1/topics/i18n/
"""

from .base import BASE_DIR, config

LANGUAGE_CODE = config("LANGUAGE_CODE", default="en")
TIME_ZONE = config("TIME_ZONE", default="Asia/Ho_Chi_Minh")
USE_I18N = True
USE_TZ = True

LOCALE_PATHS = [
    BASE_DIR / "locale",
]

LANGUAGES = [("en", "English"), ("vi", "Vietnamese")]
