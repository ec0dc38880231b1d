import logging
import time

from apscheduler.schedulers.background import BackgroundScheduler
from django.conf import settings
from django.core.management import call_command
from django.utils import timezone

from deadlines.cron import (
    DEADLINE_NOTIFICATIONS_JOB,
    OVERDUE_CHECKS_JOB,
    all_job_configs,
    general_config,
    validate_cron_config,
)
from deadlines.exceptions import ConfigurationError
from deadlines.thresholds import ThresholdKind


logger = logging.getLogger(__name__)


# ============================================================
# JOBS
# Wrappers that call the management command; all business
# logic stays out of the scheduler.
# ============================================================

def run_with_retries(func, *, max_retries, retry_delay_ms, label):
    """
    Call ``func`` and retry an outright failure up to ``max_retries``
    times, sleeping ``retry_delay_ms`` between attempts.
    Returns True when an attempt succeeded.
    """
    attempts = max_retries + 1

    for attempt in range(1, attempts + 1):
        try:
            func()
            return True
        except Exception:
            logger.exception("%s failed (attempt %s/%s)", label, attempt, attempts)
            if attempt < attempts and retry_delay_ms:
                time.sleep(retry_delay_ms / 1000)

    logger.error("%s gave up after %s attempts; will run again at the next tick", label, attempts)
    return False


def run_deadline_notifications():
    now = timezone.now()
    logger.info(f"Running scheduled deadline notifications at {now:%Y-%m-%d %H:%M:%S}")

    general = general_config()
    return run_with_retries(
        lambda: call_command("send_deadline_reminders"),
        max_retries=general.max_retries,
        retry_delay_ms=general.retry_delay_ms,
        label="Deadline notifications",
    )


def run_overdue_checks():
    now = timezone.now()
    logger.info(f"Running scheduled overdue checks at {now:%Y-%m-%d %H:%M:%S}")

    general = general_config()
    return run_with_retries(
        lambda: call_command("send_deadline_reminders", overdue_only=True),
        max_retries=general.max_retries,
        retry_delay_ms=general.retry_delay_ms,
        label="Overdue checks",
    )


JOB_FUNCTIONS = {
    DEADLINE_NOTIFICATIONS_JOB: run_deadline_notifications,
    OVERDUE_CHECKS_JOB: run_overdue_checks,
}


# ============================================================
# SCHEDULER SERVICE
# ============================================================

class DeadlineScheduler:
    """
    Injectable wrapper around APScheduler's BackgroundScheduler.

    - start(): validates configuration, registers enabled jobs
    - stop(): shuts the scheduler down
    - status(): running flag, job configuration and next run times

    Multi-instance deployments need a distributed lock around start();
    single-process deployments rely on max_instances=1.
    """

    def __init__(self, scheduler_factory=BackgroundScheduler, jobs=None):
        self._scheduler_factory = scheduler_factory
        self._jobs = dict(jobs or JOB_FUNCTIONS)
        self._scheduler = None
        self.last_error = None

    @property
    def running(self):
        return self._scheduler is not None and self._scheduler.running

    def start(self):
        """
        Start the scheduler. Returns False (and logs) when the
        configuration is invalid or it is already running.
        """
        if self.running:
            logger.info("APScheduler already running, skipping initialization")
            return False

        configs = all_job_configs()

        try:
            validate_cron_config(configs, general_config())
        except ConfigurationError as exc:
            self.last_error = exc
            logger.error("Invalid cron configuration, scheduler not started: %s", exc)
            return False

        logger.info("Starting APScheduler...")

        self._scheduler = self._scheduler_factory(timezone=settings.TIME_ZONE)

        for config in configs:
            if not config.enabled:
                logger.info("%s are disabled", config.name.replace("_", " ").capitalize())
                continue

            self._scheduler.add_job(
                self._jobs[config.name],
                trigger=config.trigger(),
                id=config.name,
                replace_existing=True,
                max_instances=1,      # Prevent overlapping runs
                coalesce=True,        # Merge missed runs if server was down
            )

            logger.info(
                "%s scheduled for %s (%s)",
                config.name, config.schedule, config.timezone,
            )

        self._scheduler.start()
        self.last_error = None
        logger.info("APScheduler started")
        return True

    def stop(self, wait=False):
        if not self.running:
            return False

        self._scheduler.shutdown(wait=wait)
        self._scheduler = None
        logger.info("APScheduler stopped")
        return True

    def status(self):
        jobs = {}
        for config in all_job_configs():
            entry = config.as_dict()
            entry["nextRunTime"] = None

            if self.running:
                job = self._scheduler.get_job(config.name)
                if job is not None and job.next_run_time is not None:
                    entry["nextRunTime"] = job.next_run_time.isoformat()

            if config.name == DEADLINE_NOTIFICATIONS_JOB:
                entry["thresholds"] = [
                    kind.value for kind in ThresholdKind
                    if kind != ThresholdKind.OVERDUE
                ]

            jobs[config.name] = entry

        return {
            "running": self.running,
            "jobs": jobs,
            "general": general_config().as_dict(),
            "lastError": str(self.last_error) if self.last_error else None,
        }


# ============================================================
# PROCESS-WIDE INSTANCE
# ============================================================

scheduler = DeadlineScheduler()


def start_scheduler():
    """
    Start the process-wide scheduler safely.

    - Respects ENABLE_SCHEDULER setting
    - Prevents double start (Django autoreload, imports)
    """
    if not getattr(settings, "ENABLE_SCHEDULER", False):
        logger.info("APScheduler disabled via settings (ENABLE_SCHEDULER=False)")
        return False

    return scheduler.start()
