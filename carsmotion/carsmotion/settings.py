"""
Django settings for the carsmotion back office.

Everything deployment-specific is read from the environment so the same
module serves local development (SQLite), the hosted Postgres database and
the test suite.
"""
import os
from decimal import Decimal
from pathlib import Path

from celery.schedules import crontab

BASE_DIR = Path(__file__).resolve().parent.parent


def env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "dev-only-insecure-key")
DEBUG = env_bool("DJANGO_DEBUG", True)
ALLOWED_HOSTS = [
    h for h in os.environ.get("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1").split(",") if h
]

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "fleet_core.apps.FleetCoreConfig",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "carsmotion.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

# ---------- Database ----------
# Hosted Postgres when POSTGRES_DB is set, local SQLite file otherwise
if os.environ.get("POSTGRES_DB"):
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.postgresql",
            "NAME": os.environ["POSTGRES_DB"],
            "USER": os.environ.get("POSTGRES_USER", "postgres"),
            "PASSWORD": os.environ.get("POSTGRES_PASSWORD", ""),
            "HOST": os.environ.get("POSTGRES_HOST", "localhost"),
            "PORT": os.environ.get("POSTGRES_PORT", "5432"),
        }
    }
else:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": BASE_DIR / "db.sqlite3",
        }
    }

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

LANGUAGE_CODE = "fr-fr"
TIME_ZONE = os.environ.get("TIME_ZONE", "Europe/Paris")
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"

# ---------- Logging ----------
FLEET_LOG_LEVEL = os.environ.get("FLEET_LOG_LEVEL", "INFO")

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
        "fleet_core": {"handlers": ["console"], "level": FLEET_LOG_LEVEL},
    },
}

# ---------- Celery ----------
CELERY_BROKER_URL = os.environ.get("CELERY_BROKER_URL", "redis://localhost:6379/0")
CELERY_TIMEZONE = TIME_ZONE
CELERY_TASK_ALWAYS_EAGER = env_bool("CELERY_TASK_ALWAYS_EAGER", False)
CELERY_BEAT_SCHEDULE = {
    # loan payments + insurance fees, idempotent per (vehicle, month)
    "generate-monthly-vehicle-expenses": {
        "task": "fleet_core.tasks.generate_monthly_vehicle_expenses_task",
        "schedule": crontab(minute=0, hour=6, day_of_month=1),
    },
    # flip vehicles whose future-dated confirmed reservation started today
    "reconcile-vehicle-statuses": {
        "task": "fleet_core.tasks.reconcile_vehicle_statuses_task",
        "schedule": crontab(minute=5, hour=0),
    },
}

# ---------- Fleet back office ----------
FLEET_TAX_RATE = Decimal(os.environ.get("FLEET_TAX_RATE", "0.20"))
FLEET_INVOICE_PREFIX = os.environ.get("FLEET_INVOICE_PREFIX", "FACT")
FLEET_INVOICE_DUE_DAYS = int(os.environ.get("FLEET_INVOICE_DUE_DAYS", "14"))
FLEET_MAINTENANCE_THRESHOLDS = {
    "service": {"days": 180, "km": 10000},
    "inspection": {"days": 365, "km": 15000},
}
