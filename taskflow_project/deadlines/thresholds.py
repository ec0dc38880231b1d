"""
Deadline threshold buckets.

A threshold is the day-distance class of a deadline that triggers
a notification. The set is closed: every ledger entry, dedup key
and notification priority is derived from ThresholdKind.
"""

import math

from django.db import models


DAY_SECONDS = 24 * 60 * 60


class ThresholdKind(models.TextChoices):
    SEVEN_DAYS = "7_days", "7 days left"
    THREE_DAYS = "3_days", "3 days left"
    ONE_DAY = "1_day", "1 day left"
    OVERDUE = "overdue", "Overdue"


# Days remaining → bucket. 0 (due right now) folds into the 1 day window.
APPROACHING_THRESHOLDS = {
    7: ThresholdKind.SEVEN_DAYS,
    3: ThresholdKind.THREE_DAYS,
    1: ThresholdKind.ONE_DAY,
    0: ThresholdKind.ONE_DAY,
}

HIGH_PRIORITY_THRESHOLDS = frozenset({
    ThresholdKind.OVERDUE.value,
    ThresholdKind.ONE_DAY.value,
})

# Largest look-ahead the scanner has to load
SCAN_WINDOW_DAYS = max(APPROACHING_THRESHOLDS)


def days_until(deadline, now):
    """Whole days left until ``deadline``, rounded up."""
    return math.ceil((deadline - now).total_seconds() / DAY_SECONDS)


def threshold_for(deadline, now):
    """
    Map a deadline to its ThresholdKind, or None when no
    notification is due at ``now``.
    """
    if deadline < now:
        return ThresholdKind.OVERDUE
    return APPROACHING_THRESHOLDS.get(days_until(deadline, now))


def priority_for(threshold):
    if threshold in HIGH_PRIORITY_THRESHOLDS:
        return "high"
    return "medium"
