# foodiehub_backend/settings/test.py
from .base import *

# -----------------------------------------------------------------------------
# Test Settings
# -----------------------------------------------------------------------------
DEBUG = False

SECRET_KEY = "django-insecure-foodiehub-test-key"

ALLOWED_HOSTS = ["testserver", "localhost", "127.0.0.1"]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

CHANNEL_LAYERS = {
    "default": {"BACKEND": "channels.layers.InMemoryChannelLayer"}
}

# Plain db sessions so tests never depend on a shared cache
SESSION_ENGINE = "django.contrib.sessions.backends.db"

SECURE_SSL_REDIRECT = False
SESSION_COOKIE_SECURE = False
CSRF_COOKIE_SECURE = False
SECURE_HSTS_SECONDS = 0

PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]

EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"

STORAGES["staticfiles"] = {
    "BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage",
}

LOGGING["root"]["level"] = "WARNING"
for _name in ("django", "orders", "coupons", "loyalty", "accounts"):
    LOGGING["loggers"][_name]["level"] = "WARNING"
    LOGGING["loggers"][_name]["propagate"] = True
