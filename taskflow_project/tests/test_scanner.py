from datetime import timedelta

import pytest
from django.db import IntegrityError, OperationalError, transaction

from deadlines.services import ledger, scanner
from deadlines.services.scanner import scan_deadlines, sweep_overdue
from deadlines.thresholds import ThresholdKind
from notifications.models import Notification
from projects.models import DeadlineLedgerEntry


pytestmark = pytest.mark.django_db


# ============================================================
# OVERDUE + IDEMPOTENCE
# ============================================================

class TestOverdueTask:

    def test_overdue_task_notifies_assignee_once(self, now, member, task_factory):
        task = task_factory(
            title="Write report",
            assignee=member,
            deadline=now - timedelta(days=2),
            status="in_progress",
        )

        result = scan_deadlines(now=now)

        assert result.sent == 1
        assert result.success

        entries = ledger.entries_for(task)
        assert [(e.threshold, e.recipient) for e in entries] == [
            (ThresholdKind.OVERDUE, member),
        ]

        notification = Notification.objects.get(recipient=member)
        assert notification.type == Notification.Type.DEADLINE_OVERDUE
        assert notification.priority == Notification.Priority.HIGH
        assert notification.title == "Task Overdue"
        assert notification.message == 'Task "Write report" is overdue by 2 days'
        assert notification.task == task
        assert notification.related_data["days"] == 2

    def test_second_scan_sends_nothing(self, now, member, task_factory):
        task_factory(assignee=member, deadline=now - timedelta(days=2))

        scan_deadlines(now=now)
        second = scan_deadlines(now=now + timedelta(hours=1))

        assert second.sent == 0
        assert Notification.objects.count() == 1
        assert DeadlineLedgerEntry.objects.count() == 1

    def test_same_now_is_idempotent(self, now, member, task_factory):
        task_factory(assignee=member, deadline=now + timedelta(days=3))

        first = scan_deadlines(now=now)
        entries = list(DeadlineLedgerEntry.objects.values_list("threshold", "recipient"))
        second = scan_deadlines(now=now)

        assert first.sent == 1
        assert second.sent == 0
        assert list(DeadlineLedgerEntry.objects.values_list("threshold", "recipient")) == entries


# ============================================================
# APPROACHING THRESHOLDS
# ============================================================

class TestApproaching:

    def test_each_threshold_fires_once(self, now, member, task_factory):
        task = task_factory(assignee=member, deadline=now + timedelta(days=7))

        scan_deadlines(now=now)
        scan_deadlines(now=now + timedelta(days=4))
        scan_deadlines(now=now + timedelta(days=6, hours=1))
        scan_deadlines(now=now + timedelta(days=6, hours=2))

        thresholds = [entry.threshold for entry in ledger.entries_for(task)]
        assert thresholds == [
            ThresholdKind.SEVEN_DAYS,
            ThresholdKind.THREE_DAYS,
            ThresholdKind.ONE_DAY,
        ]

    def test_message_counts_days_left(self, now, member, task_factory):
        task_factory(title="Slides", assignee=member, deadline=now + timedelta(days=3))

        scan_deadlines(now=now)

        notification = Notification.objects.get()
        assert notification.title == "Deadline Approaching"
        assert notification.message == 'Task "Slides" is due in 3 days'
        assert notification.type == Notification.Type.DEADLINE_APPROACHING
        assert notification.priority == Notification.Priority.MEDIUM

    def test_gap_days_send_nothing(self, now, member, task_factory):
        task_factory(assignee=member, deadline=now + timedelta(days=5))

        assert scan_deadlines(now=now).sent == 0

    def test_project_notifies_every_member(self, now, user_factory, project_factory):
        a, b = user_factory(), user_factory()
        project = project_factory(members=[a, b], deadline=now + timedelta(days=1))

        result = scan_deadlines(now=now)

        assert result.sent == 2
        assert set(Notification.objects.values_list("recipient", flat=True)) == {a.pk, b.pk}
        assert all(n.project == project for n in Notification.objects.all())


# ============================================================
# SKIPS
# ============================================================

class TestSkipped:

    def test_terminal_items_are_ignored(self, now, member, task_factory, project_factory):
        task_factory(assignee=member, deadline=now - timedelta(days=1), status="done")
        project_factory(members=[member], deadline=now - timedelta(days=1), status="completed")

        assert scan_deadlines(now=now).sent == 0

    def test_unassigned_task_has_no_recipients(self, now, task_factory):
        task_factory(deadline=now - timedelta(days=1))

        assert scan_deadlines(now=now).sent == 0
        assert not DeadlineLedgerEntry.objects.exists()

    def test_inactive_assignee_is_skipped(self, now, user_factory, task_factory):
        task_factory(assignee=user_factory(is_active=False), deadline=now - timedelta(days=1))

        assert scan_deadlines(now=now).sent == 0


# ============================================================
# FAILURE ISOLATION
# ============================================================

def test_one_failing_item_does_not_abort_the_scan(now, member, task_factory, monkeypatch):
    bad = task_factory(assignee=member, deadline=now - timedelta(days=2))
    good = task_factory(assignee=member, deadline=now - timedelta(days=1))

    real_dispatch = scanner.dispatch_notification

    def flaky_dispatch(**kwargs):
        if kwargs["related_item"].pk == bad.pk:
            raise RuntimeError("store unavailable")
        return real_dispatch(**kwargs)

    monkeypatch.setattr(scanner, "dispatch_notification", flaky_dispatch)

    result = scan_deadlines(now=now)

    assert result.sent == 1
    assert result.errors == [f"Task {bad.pk} → user {member.pk}: store unavailable"]
    assert not result.success

    # Failed claim is rolled back so the next scan retries it
    assert not ledger.has_fired(bad, ThresholdKind.OVERDUE, member)
    assert ledger.has_fired(good, ThresholdKind.OVERDUE, member)


def test_one_failing_recipient_does_not_skip_the_others(now, user_factory, project_factory, monkeypatch):
    a, b, c = user_factory(), user_factory(), user_factory()
    project = project_factory(members=[a, b, c], deadline=now + timedelta(days=7))

    real_dispatch = scanner.dispatch_notification

    def flaky_dispatch(**kwargs):
        if kwargs["recipient"] == b:
            raise RuntimeError("boom")
        return real_dispatch(**kwargs)

    monkeypatch.setattr(scanner, "dispatch_notification", flaky_dispatch)

    result = scan_deadlines(now=now)

    assert result.sent == 2
    assert result.errors == [f"Project {project.pk} → user {b.pk}: boom"]
    assert set(Notification.objects.values_list("recipient", flat=True)) == {a.pk, c.pk}
    assert not ledger.has_fired(project, ThresholdKind.SEVEN_DAYS, b)

    # Same bucket on the retry: only the member who missed out is notified
    monkeypatch.setattr(scanner, "dispatch_notification", real_dispatch)
    retry = scan_deadlines(now=now + timedelta(hours=1))

    assert retry.sent == 1
    assert Notification.objects.filter(recipient=b).count() == 1


# ============================================================
# EMAIL DELIVERY
# ============================================================

class TestEmailDelivery:

    def test_email_goes_out_after_commit(self, now, member, task_factory, mailoutbox,
                                         django_capture_on_commit_callbacks):
        task_factory(assignee=member, deadline=now - timedelta(days=1))

        with django_capture_on_commit_callbacks(execute=True):
            scan_deadlines(now=now)

        assert len(mailoutbox) == 1
        assert Notification.objects.get().email_sent is True

    def test_failed_delivery_record_does_not_resend(self, now, member, task_factory, mailoutbox,
                                                    monkeypatch, django_capture_on_commit_callbacks):
        task_factory(assignee=member, deadline=now - timedelta(days=2))
        failures = []

        def locked(notification):
            failures.append(notification.pk)
            raise OperationalError("database is locked")

        monkeypatch.setattr(Notification, "mark_email_sent", locked)

        with django_capture_on_commit_callbacks(execute=True):
            first = scan_deadlines(now=now)
        with django_capture_on_commit_callbacks(execute=True):
            second = scan_deadlines(now=now + timedelta(hours=6))

        assert first.sent == 1
        assert first.success
        assert second.sent == 0
        assert len(failures) == 1
        assert len(mailoutbox) == 1
        assert Notification.objects.count() == 1
        assert Notification.objects.get().email_sent is False


# ============================================================
# LEDGER
# ============================================================

class TestLedger:

    def test_claim_is_insert_if_absent(self, now, member, task_factory):
        task = task_factory(assignee=member)

        _, first = ledger.claim(task, ThresholdKind.ONE_DAY, member, sent_at=now)
        _, second = ledger.claim(task, ThresholdKind.ONE_DAY, member, sent_at=now)

        assert first is True
        assert second is False
        assert DeadlineLedgerEntry.objects.count() == 1

    def test_duplicate_key_is_rejected_by_the_database(self, member, task_factory):
        task = task_factory(assignee=member)
        DeadlineLedgerEntry.objects.create(task=task, threshold="overdue", recipient=member)

        with pytest.raises(IntegrityError), transaction.atomic():
            DeadlineLedgerEntry.objects.create(task=task, threshold="overdue", recipient=member)

    def test_task_and_project_keys_do_not_collide(self, member, task_factory, project_factory):
        project = project_factory(members=[member])
        task = task_factory(assignee=member, project=project)

        assert ledger.claim(task, ThresholdKind.OVERDUE, member)[1]
        assert ledger.claim(project, ThresholdKind.OVERDUE, member)[1]


# ============================================================
# OVERDUE SWEEP
# ============================================================

def test_sweep_only_sends_overdue(now, member, task_factory):
    task_factory(assignee=member, deadline=now + timedelta(days=3))
    late = task_factory(assignee=member, deadline=now - timedelta(hours=3))

    result = sweep_overdue(now=now)

    assert result.sent == 1
    assert Notification.objects.get().task == late
