"""Production settings."""

from .base import *  # noqa: F401,F403
from .base import LOGGING

DEBUG = False

SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True

STORAGES = {
    "default": {
        "BACKEND": "django.core.files.storage.FileSystemStorage",
    },
    "staticfiles": {
        "BACKEND": "whitenoise.storage.CompressedManifestStaticFilesStorage",
    },
}

# Structured logs for the log collector
LOGGING["handlers"]["console"]["formatter"] = "json"
LOGGING["loggers"]["beautycatalog"]["level"] = "INFO"
