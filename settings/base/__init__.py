# ruff: noqa

from .base import *
from .apps import *
from .cors import *
from .database import *
from .drf import *
from .internationalization import *
from .logging import *
from .middleware import *
from .production import *
from .sentry import *
from .static import *
from .templates import *
