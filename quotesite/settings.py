from __future__ import annotations

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def _env_flag(name: str, default: str = "0") -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "dev-only-insecure-key-change-me")
DEBUG = _env_flag("DJANGO_DEBUG", "1")
ALLOWED_HOSTS = [h.strip() for h in os.environ.get("DJANGO_ALLOWED_HOSTS", "*").split(",") if h.strip()]

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "quotation",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "quotesite.urls"
WSGI_APPLICATION = "quotesite.wsgi.application"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.messages.context_processors.messages",
                "quotation.context_processors.company",
            ],
        },
    },
]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.environ.get("QUOTATION_DB_PATH", str(BASE_DIR / "quotation.sqlite3")),
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

LANGUAGE_CODE = "en-in"
TIME_ZONE = os.environ.get("TIME_ZONE", "Asia/Kolkata")
USE_I18N = True
USE_TZ = True

# Mounted below a prefix such as /NewQuotation behind a reverse proxy.
_base_path = os.environ.get("APP_BASE_PATH", "").strip().strip("/")
FORCE_SCRIPT_NAME = f"/{_base_path}" if _base_path else None

STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

QUOTATION_CONFIG_DIR = Path(
    os.environ.get("QUOTATION_CONFIG_DIR", str(BASE_DIR / "quotation" / "config"))
)
QUOTATION_LOGO_PATH = Path(
    os.environ.get("QUOTATION_LOGO_PATH", str(BASE_DIR / "quotation" / "static" / "quotation" / "logo.png"))
)

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "simple"},
    },
    "loggers": {
        "quotation": {
            "handlers": ["console"],
            "level": os.environ.get("QUOTATION_LOG_LEVEL", "INFO"),
            "propagate": False,
        },
    },
}
