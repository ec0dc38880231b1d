"""
deadlines/services/scanner.py

Periodic deadline scan over every open Task and Project.

For each item with a deadline:
- compute the threshold bucket (7_days, 3_days, 1_day, overdue)
- for every recipient, claim the ledger key and notify only if the
  claim is new

Idempotent: a second scan with the same ``now`` sends nothing.
A failing item or recipient is recorded in ``errors`` and never aborts
the scan.
"""

import logging
import time
from dataclasses import dataclass, field
from datetime import timedelta

from django.db import transaction
from django.utils import timezone

from deadlines.services import ledger
from deadlines.thresholds import (
    SCAN_WINDOW_DAYS,
    ThresholdKind,
    days_until,
    priority_for,
    threshold_for,
)
from notifications.models import Notification
from notifications.services.dispatch import dispatch_notification
from projects.models import Project, Task


logger = logging.getLogger(__name__)


@dataclass
class ScanResult:
    sent: int = 0
    errors: list = field(default_factory=list)
    duration_ms: int = 0

    @property
    def success(self):
        return not self.errors


# ============================================================
# MESSAGE CONTENT
# ============================================================

def _day_word(count):
    return "day" if count == 1 else "days"


def build_message(item, threshold, now):
    """
    Return (title, message, type, days) for a threshold notification.
    """
    kind = item.item_type.capitalize()

    if threshold == ThresholdKind.OVERDUE:
        days = max(item.overdue_days(now), 1)
        return (
            f"{kind} Overdue",
            f'{kind} "{item.display_title}" is overdue by {days} {_day_word(days)}',
            Notification.Type.DEADLINE_OVERDUE,
            days,
        )

    days = max(days_until(item.deadline, now), 1)
    return (
        "Deadline Approaching",
        f'{kind} "{item.display_title}" is due in {days} {_day_word(days)}',
        Notification.Type.DEADLINE_APPROACHING,
        days,
    )


# ============================================================
# PER ITEM
# ============================================================

def notify_item(item, now, thresholds=None, errors=None):
    """
    Send the notifications ``item`` is due at ``now``.
    Returns the number of notifications sent.

    A recipient whose claim or dispatch fails is logged and, when an
    ``errors`` list is given, recorded there; the remaining recipients
    are still notified.
    """
    if not item.deadline or item.is_terminal:
        return 0

    threshold = threshold_for(item.deadline, now)
    if threshold is None:
        return 0

    if thresholds is not None and threshold not in thresholds:
        return 0

    title, message, notification_type, days = build_message(item, threshold, now)
    sent = 0

    for recipient in item.notification_recipients():
        try:
            # Claim and notify together: a failed dispatch releases the claim
            with transaction.atomic():
                _, created = ledger.claim(item, threshold, recipient, sent_at=now)
                if not created:
                    continue

                dispatch_notification(
                    recipient=recipient,
                    title=title,
                    message=message,
                    type=notification_type,
                    related_item=item,
                    priority=priority_for(threshold),
                    related_data={"days": days, "threshold": threshold.value},
                )
        except Exception as exc:
            logger.exception(
                "Deadline notification failed for %s %s, user %s",
                item.item_type, item.pk, recipient.pk,
            )
            if errors is not None:
                errors.append(
                    f"{item.item_type.capitalize()} {item.pk} → user {recipient.pk}: {exc}"
                )
            continue

        sent += 1
        logger.debug(
            "Sent %s notification for %s %s to user %s",
            threshold, item.item_type, item.pk, recipient.pk,
        )

    return sent


# ============================================================
# SCAN
# ============================================================

def candidate_items(now):
    """
    Open items whose deadline is overdue or inside the look-ahead window.
    """
    horizon = now + timedelta(days=SCAN_WINDOW_DAYS)

    tasks = (
        Task.open_items()
        .filter(deadline__isnull=False, deadline__lte=horizon)
        .select_related("assignee", "project")
        .order_by("deadline", "pk")
    )

    projects = (
        Project.open_items()
        .filter(deadline__isnull=False, deadline__lte=horizon)
        .order_by("deadline", "pk")
    )

    yield from tasks
    yield from projects


def scan_deadlines(now=None, thresholds=None):
    """
    Run one deadline scan.

    ``thresholds`` optionally restricts the buckets considered
    (the overdue sweep passes {ThresholdKind.OVERDUE}).
    """
    started = time.monotonic()
    now = now or timezone.now()
    result = ScanResult()

    if thresholds is not None:
        thresholds = {ThresholdKind(t) for t in thresholds}

    logger.info("Starting deadline scan at %s", now.isoformat())

    for item in candidate_items(now):
        try:
            result.sent += notify_item(
                item, now, thresholds=thresholds, errors=result.errors,
            )
        except Exception as exc:
            logger.exception(
                "Deadline scan failed for %s %s", item.item_type, item.pk
            )
            result.errors.append(f"{item.item_type.capitalize()} {item.pk}: {exc}")

    result.duration_ms = int((time.monotonic() - started) * 1000)

    logger.info(
        "Deadline scan completed in %sms: %s notifications sent",
        result.duration_ms, result.sent,
    )
    if result.errors:
        logger.warning("%s errors occurred during the deadline scan", len(result.errors))

    return result


def sweep_overdue(now=None):
    """Lighter pass that only emits overdue notifications."""
    return scan_deadlines(now=now, thresholds={ThresholdKind.OVERDUE})
