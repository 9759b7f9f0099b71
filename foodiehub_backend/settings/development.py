# foodiehub_backend/settings/development.py
from .base import *

# -----------------------------------------------------------------------------
# Development Settings
# -----------------------------------------------------------------------------
DEBUG = True

SECRET_KEY = SECRET_KEY or "django-insecure-foodiehub-development-key"

ALLOWED_HOSTS = ["*"]

# CORS - Allow all origins in development
CORS_ALLOW_ALL_ORIGINS = True
CORS_ALLOWED_ORIGINS = []

CSRF_TRUSTED_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:8000",
    "http://127.0.0.1:8000",
]

# -----------------------------------------------------------------------------
# Security Settings (Relaxed for Development)
# -----------------------------------------------------------------------------
SECURE_SSL_REDIRECT = False
SESSION_COOKIE_SECURE = False
CSRF_COOKIE_SECURE = False
SECURE_HSTS_SECONDS = 0
SECURE_HSTS_INCLUDE_SUBDOMAINS = False
SECURE_HSTS_PRELOAD = False

X_FRAME_OPTIONS = "SAMEORIGIN"

# -----------------------------------------------------------------------------
# Email Configuration (Development)
# -----------------------------------------------------------------------------
EMAIL_BACKEND = "django.core.mail.backends.console.EmailBackend"

# -----------------------------------------------------------------------------
# Logging Configuration (Development)
# -----------------------------------------------------------------------------
LOGGING["root"]["level"] = "INFO"
LOGGING["loggers"]["django"]["level"] = "DEBUG" if os.getenv("DEBUG_DJANGO", "0") == "1" else "INFO"

LOGGING["loggers"]["django.db.backends"] = {
    "handlers": ["console"],
    "level": "DEBUG" if os.getenv("DEBUG_SQL", "0") == "1" else "INFO",
    "propagate": False,
}

# -----------------------------------------------------------------------------
# Static Files (Development)
# -----------------------------------------------------------------------------
STORAGES["staticfiles"] = {
    "BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage",
}

# -----------------------------------------------------------------------------
# DRF Configuration (Development)
# -----------------------------------------------------------------------------
REST_FRAMEWORK["DEFAULT_RENDERER_CLASSES"] = [
    "rest_framework.renderers.JSONRenderer",
    "rest_framework.renderers.BrowsableAPIRenderer",
]

for template_engine in TEMPLATES:
    template_engine["OPTIONS"]["debug"] = True
