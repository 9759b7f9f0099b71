# foodiehub_backend/settings/__init__.py
"""
Django settings package for FoodieHub.

- development: local development with debug enabled
- production: hardened settings, Sentry error reporting
- test: fast, isolated settings used by the pytest suite

With DJANGO_SETTINGS_MODULE=foodiehub_backend.settings the module is picked
from the ENVIRONMENT variable (development by default). Pointing
DJANGO_SETTINGS_MODULE at a submodule directly skips the switch.
"""

import logging
import os
import sys

logger = logging.getLogger(__name__)

ENVIRONMENT = os.getenv("ENVIRONMENT", "development").lower()

VALID_ENVIRONMENTS = ["development", "production", "test"]
if ENVIRONMENT not in VALID_ENVIRONMENTS:
    raise ValueError(
        f"Invalid ENVIRONMENT '{ENVIRONMENT}'. "
        f"Must be one of: {', '.join(VALID_ENVIRONMENTS)}"
    )

if os.getenv("DJANGO_SETTINGS_MODULE", __name__) == __name__:
    if ENVIRONMENT == "production":
        from .production import *
    elif ENVIRONMENT == "test":
        from .test import *
    else:
        from .development import *

    ENVIRONMENT_INFO = {
        "name": ENVIRONMENT,
        "debug": DEBUG,
        "allowed_hosts": ALLOWED_HOSTS,
        "database_engine": DATABASES["default"]["ENGINE"],
        "channel_layer": CHANNEL_LAYERS["default"]["BACKEND"],
        "static_url": STATIC_URL,
    }

    def validate_settings():
        """Validate critical settings are properly configured."""
        errors = []

        if not SECRET_KEY:
            errors.append("SECRET_KEY must be set to a secure random value")

        if not DATABASES.get("default"):
            errors.append("Database configuration is missing")

        if ENVIRONMENT == "production" and not ALLOWED_HOSTS:
            errors.append("ALLOWED_HOSTS must be configured for production")

        if ENVIRONMENT == "production" and globals().get("CORS_ALLOW_ALL_ORIGINS", False):
            errors.append("CORS_ALLOW_ALL_ORIGINS should not be True in production")

        if ENVIRONMENT == "production" and DEBUG:
            errors.append("DEBUG should be False in production")

        if errors:
            error_msg = "\n".join([f"  - {error}" for error in errors])
            raise ValueError(f"Settings validation failed:\n{error_msg}")

    if "migrate" not in sys.argv and "collectstatic" not in sys.argv:
        try:
            validate_settings()
        except ValueError as e:
            if ENVIRONMENT == "production":
                raise
            logger.warning("Settings validation warning: %s", e)
