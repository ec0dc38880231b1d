"""
Django settings for taskflow_project.

All deployment-specific values are read from the environment.
Scheduler values are validated by deadlines.cron before any job
is registered.
"""

import os
from pathlib import Path


BASE_DIR = Path(__file__).resolve().parent.parent


def env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def env_int(name, default):
    value = os.environ.get(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


# ============================================================
# CORE
# ============================================================

SECRET_KEY = os.environ.get(
    "DJANGO_SECRET_KEY",
    "django-insecure-taskflow-development-key",
)

DEBUG = env_bool("DJANGO_DEBUG", False)

ALLOWED_HOSTS = [
    host.strip()
    for host in os.environ.get("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1").split(",")
    if host.strip()
]

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",

    "accounts",
    "projects",
    "notifications",
    "deadlines",
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

ROOT_URLCONF = "taskflow_project.urls"

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

WSGI_APPLICATION = "taskflow_project.wsgi.application"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.environ.get("DJANGO_DB_PATH", str(BASE_DIR / "db.sqlite3")),
    }
}

AUTH_USER_MODEL = "accounts.User"

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

LANGUAGE_CODE = "en-us"
TIME_ZONE = os.environ.get("DJANGO_TIME_ZONE", "UTC")
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"


# ============================================================
# EMAIL (SMTP)
# ============================================================

EMAIL_BACKEND = os.environ.get(
    "EMAIL_BACKEND",
    "django.core.mail.backends.smtp.EmailBackend",
)
EMAIL_HOST = os.environ.get("EMAIL_HOST", "smtp.gmail.com")
EMAIL_PORT = env_int("EMAIL_PORT", 587)
EMAIL_USE_TLS = env_bool("EMAIL_USE_TLS", True)
EMAIL_HOST_USER = os.environ.get("EMAIL_USER", "")
EMAIL_HOST_PASSWORD = os.environ.get("EMAIL_PASS", "")
EMAIL_TIMEOUT = env_int("EMAIL_TIMEOUT", 10)
DEFAULT_FROM_EMAIL = os.environ.get(
    "EMAIL_FROM",
    EMAIL_HOST_USER or "noreply@taskflow.local",
)

NOTIFICATIONS_EMAIL_ENABLED = env_bool("ENABLE_EMAIL_NOTIFICATIONS", True)


# ============================================================
# SCHEDULER (APScheduler)
# ============================================================

# Dev / prod toggle: the scheduler only runs in the serving process
ENABLE_SCHEDULER = env_bool("ENABLE_SCHEDULER", False)

DEADLINE_NOTIFICATIONS = {
    "enabled": env_bool("DEADLINE_NOTIFICATIONS_ENABLED", True),
    "schedule": os.environ.get("DEADLINE_NOTIFICATIONS_SCHEDULE", "0 9 * * *"),
    "timezone": os.environ.get("DEADLINE_NOTIFICATIONS_TIMEZONE", "UTC"),
}

OVERDUE_CHECKS = {
    "enabled": env_bool("OVERDUE_CHECKS_ENABLED", False),
    "schedule": os.environ.get("OVERDUE_CHECKS_SCHEDULE", "0 */6 * * *"),
    "timezone": os.environ.get("OVERDUE_CHECKS_TIMEZONE", "UTC"),
}

CRON_GENERAL = {
    "max_retries": env_int("CRON_MAX_RETRIES", 3),
    "retry_delay_ms": env_int("CRON_RETRY_DELAY", 5000),
    "log_level": os.environ.get("CRON_LOG_LEVEL", "INFO").upper(),
}

DEADLINES_REVIEWER_RESOLVER = os.environ.get(
    "DEADLINES_REVIEWER_RESOLVER",
    "deadlines.services.reviewers.RoleBasedReviewerResolver",
)


# ============================================================
# LOGGING
# ============================================================

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "[{asctime}] {levelname} {name}: {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": os.environ.get("DJANGO_LOG_LEVEL", "INFO").upper(),
    },
    "loggers": {
        "deadlines": {
            "handlers": ["console"],
            "level": CRON_GENERAL["log_level"],
            "propagate": False,
        },
        "apscheduler": {
            "handlers": ["console"],
            "level": "WARNING",
            "propagate": False,
        },
    },
}
