"""Django settings for the POS backend.

Everything deployment-specific is read from the environment; nothing is
hardcoded beyond local-development defaults.
"""
import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.getenv(name)
    if not raw:
        return default
    return [item.strip() for item in raw.split(",") if item.strip()]


SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "dev-only-insecure-key")
DEBUG = _env_bool("DJANGO_DEBUG", False)
ALLOWED_HOSTS = _env_list("DJANGO_ALLOWED_HOSTS", ["*"])

INSTALLED_APPS = [
    "corsheaders",
    "orders",
]

MIDDLEWARE = [
    "corsheaders.middleware.CorsMiddleware",
    "pos_backend.middleware.OriginAllowListMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "pos_backend.urls"
WSGI_APPLICATION = "pos_backend.wsgi.application"

# Database: sqlite for local work, any Django backend (PostgreSQL in
# production) through POS_DB_* variables.
DATABASES = {
    "default": {
        "ENGINE": os.getenv("POS_DB_ENGINE", "django.db.backends.sqlite3"),
        "NAME": os.getenv("POS_DB_NAME", str(BASE_DIR / "db.sqlite3")),
        "USER": os.getenv("POS_DB_USER", ""),
        "PASSWORD": os.getenv("POS_DB_PASSWORD", ""),
        "HOST": os.getenv("POS_DB_HOST", ""),
        "PORT": os.getenv("POS_DB_PORT", ""),
        "CONN_MAX_AGE": int(os.getenv("POS_DB_CONN_MAX_AGE", "0")),
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

LANGUAGE_CODE = "en-us"
TIME_ZONE = os.getenv("POS_TIME_ZONE", "Africa/Nairobi")
USE_I18N = False
USE_TZ = True

APPEND_SLASH = False

# ---------------------------------------------------------------------------
# Cross-origin policy
# ---------------------------------------------------------------------------
CORS_ALLOWED_ORIGINS = _env_list(
    "POS_ALLOWED_ORIGINS",
    [
        "https://aquabliss-frontend.vercel.app",  # deployed frontend
        "http://localhost:5173",                  # Vite dev
        "http://localhost:3000",                  # CRA dev
    ],
)
CORS_ALLOW_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
CORS_ALLOW_HEADERS = ["content-type"]

# ---------------------------------------------------------------------------
# Receipt layout overrides (see orders.receipts.ReceiptOptions)
# ---------------------------------------------------------------------------
POS_RECEIPT = {
    "business_name": os.getenv("POS_BUSINESS_NAME", "AQUABLISS"),
    "subtitle": os.getenv("POS_RECEIPT_SUBTITLE", "Water POS Receipt"),
    "currency": os.getenv("POS_CURRENCY", "KES"),
}

# ---------------------------------------------------------------------------
# Logging: JSON lines on stdout, optional rotating file
# ---------------------------------------------------------------------------
LOG_LEVEL = os.getenv("POS_LOG_LEVEL", "INFO").upper()
LOG_DIR = os.getenv("POS_LOG_DIR")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "json": {"()": "pos_backend.log_format.JsonFormatter"},
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "json",
        },
    },
    "root": {"handlers": ["console"], "level": LOG_LEVEL},
    "loggers": {
        "django": {"handlers": ["console"], "level": "WARNING", "propagate": False},
        "pika": {"handlers": ["console"], "level": "WARNING", "propagate": False},
    },
}

if LOG_DIR:
    os.makedirs(LOG_DIR, exist_ok=True)
    LOGGING["handlers"]["file"] = {
        "class": "logging.handlers.RotatingFileHandler",
        "filename": os.path.join(LOG_DIR, "pos_backend.log"),
        "maxBytes": 5 * 1024 * 1024,  # 5 MB per file
        "backupCount": 3,
        "formatter": "json",
    }
    LOGGING["root"]["handlers"].append("file")
