# foodiehub_backend/settings/production.py
from .base import *
import sentry_sdk
from sentry_sdk.integrations.django import DjangoIntegration

# -----------------------------------------------------------------------------
# Production Settings
# -----------------------------------------------------------------------------
DEBUG = False

if not SECRET_KEY:
    raise ValueError("DJANGO_SECRET_KEY must be set in production")

ALLOWED_HOSTS = _split_csv("DJANGO_ALLOWED_HOSTS")
if not ALLOWED_HOSTS:
    raise ValueError("DJANGO_ALLOWED_HOSTS must be set in production")

# -----------------------------------------------------------------------------
# Security Settings (Enhanced for Production)
# -----------------------------------------------------------------------------
SECURE_SSL_REDIRECT = True
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True

SECURE_HSTS_SECONDS = 31536000  # 1 year
SECURE_HSTS_INCLUDE_SUBDOMAINS = True
SECURE_HSTS_PRELOAD = True

SECURE_CONTENT_TYPE_NOSNIFF = True
X_FRAME_OPTIONS = "DENY"
SECURE_REFERRER_POLICY = "strict-origin-when-cross-origin"

# -----------------------------------------------------------------------------
# Database Configuration (Production)
# -----------------------------------------------------------------------------
if not DATABASE_URL:
    raise ValueError("DATABASE_URL is required in production")

DATABASES["default"]["CONN_MAX_AGE"] = 600  # 10 minutes
DATABASES["default"]["OPTIONS"] = {
    "sslmode": "require",
    # Points and gift coupon updates rely on row locks under read committed
    "options": "-c default_transaction_isolation=read_committed",
}

# -----------------------------------------------------------------------------
# Channels (Production)
# -----------------------------------------------------------------------------
if not REDIS_URL:
    raise ValueError("REDIS_URL must be set in production")

# -----------------------------------------------------------------------------
# Static Files (Production)
# -----------------------------------------------------------------------------
WHITENOISE_USE_FINDERS = True
WHITENOISE_AUTOREFRESH = False

# -----------------------------------------------------------------------------
# Logging Configuration (Production)
# -----------------------------------------------------------------------------
if os.getenv("USE_JSON_LOGGING", "0") == "1":
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    LOGGING["handlers"]["json_file"] = {
        "level": "INFO",
        "class": "logging.handlers.RotatingFileHandler",
        "filename": LOG_DIR / "foodiehub.json",
        "maxBytes": 1024 * 1024 * 15,  # 15MB
        "backupCount": 10,
        "formatter": "json",
        "filters": ["request_id"],
    }

    for logger_name in ["django", "orders", "coupons", "loyalty", "accounts"]:
        if logger_name in LOGGING["loggers"]:
            LOGGING["loggers"][logger_name]["handlers"].append("json_file")

# -----------------------------------------------------------------------------
# Error Monitoring (Sentry)
# -----------------------------------------------------------------------------
SENTRY_DSN = os.getenv("SENTRY_DSN")
if SENTRY_DSN:
    sentry_sdk.init(
        dsn=SENTRY_DSN,
        integrations=[
            DjangoIntegration(transaction_style="url"),
        ],
        traces_sample_rate=float(os.getenv("SENTRY_TRACES_SAMPLE_RATE", "0.1")),
        send_default_pii=False,
        environment=os.getenv("ENVIRONMENT", "production"),
        release=os.getenv("APP_VERSION", "unknown"),
    )

# -----------------------------------------------------------------------------
# CORS Configuration (Production)
# -----------------------------------------------------------------------------
CORS_ALLOW_ALL_ORIGINS = False
CORS_ALLOWED_ORIGINS = _split_csv("CORS_ALLOWED_ORIGINS")

CORS_ALLOW_HEADERS = [
    "accept",
    "accept-encoding",
    "content-type",
    "origin",
    "user-agent",
    "x-csrftoken",
    "x-requested-with",
]

# -----------------------------------------------------------------------------
# Request Size Limits (Production)
# -----------------------------------------------------------------------------
DATA_UPLOAD_MAX_MEMORY_SIZE = 2 * 1024 * 1024  # 2MB
