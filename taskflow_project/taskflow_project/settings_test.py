"""
Test settings.

Usage:
    pytest --ds=taskflow_project.settings_test
"""

from .settings import *  # noqa: F401, F403


DEBUG = False
TESTING = True

PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"
NOTIFICATIONS_EMAIL_ENABLED = True

ENABLE_SCHEDULER = False

CRON_GENERAL = {
    "max_retries": 2,
    "retry_delay_ms": 0,
    "log_level": "INFO",
}
