from datetime import timedelta
from io import StringIO

import pytest
from django.core.management import CommandError, call_command
from django.utils import timezone

from deadlines import scheduler as scheduler_module
from deadlines.cron import (
    DEADLINE_NOTIFICATIONS_JOB,
    OVERDUE_CHECKS_JOB,
    all_job_configs,
    collect_errors,
    general_config,
    job_config,
    validate_cron_config,
    validate_schedule,
    validate_timezone,
)
from deadlines.exceptions import ConfigurationError
from deadlines.scheduler import DeadlineScheduler, run_with_retries, start_scheduler
from notifications.models import Notification


# ============================================================
# FAKE APSCHEDULER
# ============================================================

class FakeJob:
    def __init__(self, next_run_time=None):
        self.next_run_time = next_run_time


class FakeScheduler:
    def __init__(self, **kwargs):
        self.options = kwargs
        self.jobs = {}
        self.running = False

    def add_job(self, func, **kwargs):
        self.jobs[kwargs["id"]] = (func, kwargs)

    def get_job(self, job_id):
        if job_id in self.jobs:
            return FakeJob()
        return None

    def start(self):
        self.running = True

    def shutdown(self, wait=True):
        self.running = False


# ============================================================
# CONFIG
# ============================================================

class TestCronConfig:

    @pytest.mark.parametrize("value", ["0 9 * * *", "0 */6 * * *", "30 8 * * 1-5"])
    def test_valid_schedules(self, value):
        assert validate_schedule(value)

    @pytest.mark.parametrize("value", ["0 9 * *", "61 9 * * *", "every day", "0 9 * * * *"])
    def test_invalid_schedules(self, value):
        assert not validate_schedule(value)

    def test_timezones(self):
        assert validate_timezone("UTC")
        assert validate_timezone("America/New_York")
        assert not validate_timezone("Mars/Olympus_Mons")

    def test_defaults(self, settings):
        del settings.OVERDUE_CHECKS

        config = job_config(OVERDUE_CHECKS_JOB)

        assert config.enabled is False
        assert config.schedule == "0 */6 * * *"
        assert config.timezone == "UTC"

    def test_settings_override_defaults(self, settings):
        settings.DEADLINE_NOTIFICATIONS = {"schedule": "15 7 * * *"}

        config = job_config(DEADLINE_NOTIFICATIONS_JOB)

        assert config.schedule == "15 7 * * *"
        assert config.enabled is True

    def test_invalid_config_reports_every_problem(self, settings):
        settings.DEADLINE_NOTIFICATIONS = {"schedule": "nope", "timezone": "Nowhere/City"}

        with pytest.raises(ConfigurationError) as excinfo:
            validate_cron_config()

        assert len(excinfo.value.errors) == 2
        assert "deadline_notifications schedule" in str(excinfo.value)

    def test_negative_retries(self, settings):
        settings.CRON_GENERAL = {"max_retries": -1, "retry_delay_ms": 0}

        assert collect_errors() == ["CRON_MAX_RETRIES must not be negative"]

    def test_general_as_dict(self, settings):
        settings.CRON_GENERAL = {"max_retries": 3, "retry_delay_ms": 5000, "log_level": "INFO"}

        assert general_config().as_dict() == {
            "maxRetries": 3,
            "retryDelay": 5000,
            "logLevel": "INFO",
        }


# ============================================================
# RETRIES
# ============================================================

class TestRetries:

    def test_retries_until_success(self):
        calls = []

        def flaky():
            calls.append(1)
            if len(calls) < 3:
                raise RuntimeError("database is locked")

        assert run_with_retries(flaky, max_retries=2, retry_delay_ms=0, label="test")
        assert len(calls) == 3

    def test_gives_up(self):
        calls = []

        def broken():
            calls.append(1)
            raise RuntimeError("down")

        assert not run_with_retries(broken, max_retries=2, retry_delay_ms=0, label="test")
        assert len(calls) == 3


# ============================================================
# SCHEDULER SERVICE
# ============================================================

class TestDeadlineScheduler:

    def test_start_registers_enabled_jobs(self, settings):
        settings.OVERDUE_CHECKS = {"enabled": False}
        service = DeadlineScheduler(scheduler_factory=FakeScheduler)

        assert service.start() is True
        assert service.running

        jobs = service._scheduler.jobs
        assert list(jobs) == [DEADLINE_NOTIFICATIONS_JOB]
        _, options = jobs[DEADLINE_NOTIFICATIONS_JOB]
        assert options["max_instances"] == 1
        assert options["coalesce"] is True

    def test_start_twice_is_a_no_op(self):
        service = DeadlineScheduler(scheduler_factory=FakeScheduler)

        assert service.start() is True
        assert service.start() is False

    def test_both_jobs(self, settings):
        settings.OVERDUE_CHECKS = {"enabled": True}
        service = DeadlineScheduler(scheduler_factory=FakeScheduler)

        service.start()

        assert set(service._scheduler.jobs) == {DEADLINE_NOTIFICATIONS_JOB, OVERDUE_CHECKS_JOB}

    def test_invalid_config_does_not_start(self, settings):
        settings.DEADLINE_NOTIFICATIONS = {"schedule": "bad"}
        service = DeadlineScheduler(scheduler_factory=FakeScheduler)

        assert service.start() is False
        assert not service.running
        assert "Invalid deadline_notifications schedule" in service.status()["lastError"]

    def test_status_and_stop(self):
        service = DeadlineScheduler(scheduler_factory=FakeScheduler)
        service.start()

        status = service.status()
        assert status["running"] is True
        assert set(status["jobs"]) == {c.name for c in all_job_configs()}
        assert status["jobs"][DEADLINE_NOTIFICATIONS_JOB]["schedule"] == "0 9 * * *"
        assert status["jobs"][DEADLINE_NOTIFICATIONS_JOB]["thresholds"] == ["7_days", "3_days", "1_day"]
        assert "thresholds" not in status["jobs"][OVERDUE_CHECKS_JOB]

        assert service.stop() is True
        assert service.status()["running"] is False
        assert service.stop() is False

    def test_start_scheduler_respects_setting(self, settings, monkeypatch):
        settings.ENABLE_SCHEDULER = False
        monkeypatch.setattr(
            scheduler_module,
            "scheduler",
            DeadlineScheduler(scheduler_factory=FakeScheduler),
        )

        assert start_scheduler() is False
        assert not scheduler_module.scheduler.running


# ============================================================
# MANAGEMENT COMMAND
# ============================================================

@pytest.mark.django_db
class TestSendDeadlineReminders:

    def test_command_runs_a_scan(self, now, member, task_factory):
        task_factory(assignee=member, deadline=now - timedelta(days=2))
        out = StringIO()

        call_command("send_deadline_reminders", now=now.isoformat(), stdout=out)

        assert "1 notifications sent, 0 errors" in out.getvalue()
        assert Notification.objects.count() == 1

    def test_overdue_only(self, now, member, task_factory):
        task_factory(assignee=member, deadline=now + timedelta(days=1))
        out = StringIO()

        call_command("send_deadline_reminders", now=now.isoformat(), overdue_only=True, stdout=out)

        assert "0 notifications sent" in out.getvalue()

    def test_bad_timestamp(self):
        with pytest.raises(CommandError):
            call_command("send_deadline_reminders", now="yesterday", stdout=StringIO())

    def test_scheduled_job_calls_command(self, member, task_factory):
        task_factory(assignee=member, deadline=timezone.now() - timedelta(days=1))

        assert scheduler_module.run_deadline_notifications() is True
        assert Notification.objects.count() == 1
