"""
Scheduler job configuration.

Reads the DEADLINE_NOTIFICATIONS / OVERDUE_CHECKS / CRON_GENERAL
settings and validates them before anything is scheduled.
"""

from dataclasses import dataclass
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from apscheduler.triggers.cron import CronTrigger
from django.conf import settings

from deadlines.exceptions import ConfigurationError


DEADLINE_NOTIFICATIONS_JOB = "deadline_notifications"
OVERDUE_CHECKS_JOB = "overdue_checks"

JOB_SETTINGS = {
    DEADLINE_NOTIFICATIONS_JOB: "DEADLINE_NOTIFICATIONS",
    OVERDUE_CHECKS_JOB: "OVERDUE_CHECKS",
}

JOB_DEFAULTS = {
    DEADLINE_NOTIFICATIONS_JOB: {"enabled": True, "schedule": "0 9 * * *", "timezone": "UTC"},
    OVERDUE_CHECKS_JOB: {"enabled": False, "schedule": "0 */6 * * *", "timezone": "UTC"},
}


@dataclass(frozen=True)
class JobConfig:
    name: str
    enabled: bool
    schedule: str
    timezone: str

    def trigger(self):
        return CronTrigger.from_crontab(self.schedule, timezone=ZoneInfo(self.timezone))

    def as_dict(self):
        return {
            "enabled": self.enabled,
            "schedule": self.schedule,
            "timezone": self.timezone,
        }


@dataclass(frozen=True)
class GeneralConfig:
    max_retries: int = 3
    retry_delay_ms: int = 5000
    log_level: str = "INFO"

    def as_dict(self):
        return {
            "maxRetries": self.max_retries,
            "retryDelay": self.retry_delay_ms,
            "logLevel": self.log_level,
        }


def job_config(name):
    values = dict(JOB_DEFAULTS[name])
    values.update(getattr(settings, JOB_SETTINGS[name], {}) or {})
    return JobConfig(
        name=name,
        enabled=bool(values["enabled"]),
        schedule=str(values["schedule"]).strip(),
        timezone=str(values["timezone"]).strip(),
    )


def general_config():
    values = getattr(settings, "CRON_GENERAL", {}) or {}
    return GeneralConfig(
        max_retries=int(values.get("max_retries", 3)),
        retry_delay_ms=int(values.get("retry_delay_ms", 5000)),
        log_level=str(values.get("log_level", "INFO")),
    )


def all_job_configs():
    return [job_config(name) for name in JOB_SETTINGS]


# ============================================================
# VALIDATION
# ============================================================

def validate_timezone(value):
    try:
        ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        return False
    return True


def validate_schedule(value):
    if len(value.split()) != 5:
        return False
    try:
        CronTrigger.from_crontab(value)
    except ValueError:
        return False
    return True


def collect_errors(configs=None, general=None):
    configs = configs if configs is not None else all_job_configs()
    general = general if general is not None else general_config()
    errors = []

    for config in configs:
        if not validate_schedule(config.schedule):
            errors.append(f"Invalid {config.name} schedule format: {config.schedule!r}")
        if not validate_timezone(config.timezone):
            errors.append(f"Invalid {config.name} timezone: {config.timezone!r}")

    if general.max_retries < 0:
        errors.append("CRON_MAX_RETRIES must not be negative")
    if general.retry_delay_ms < 0:
        errors.append("CRON_RETRY_DELAY must not be negative")

    return errors


def validate_cron_config(configs=None, general=None):
    """Raise ConfigurationError listing every problem found."""
    errors = collect_errors(configs, general)
    if errors:
        raise ConfigurationError(errors)
