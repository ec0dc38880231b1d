from datetime import timedelta

import pytest

from deadlines.thresholds import (
    ThresholdKind,
    days_until,
    priority_for,
    threshold_for,
)


@pytest.mark.parametrize(
    "offset, expected",
    [
        (timedelta(days=7), ThresholdKind.SEVEN_DAYS),
        (timedelta(days=6, hours=1), ThresholdKind.SEVEN_DAYS),
        (timedelta(days=3), ThresholdKind.THREE_DAYS),
        (timedelta(days=2, hours=12), ThresholdKind.THREE_DAYS),
        (timedelta(days=1), ThresholdKind.ONE_DAY),
        (timedelta(hours=2), ThresholdKind.ONE_DAY),
        (timedelta(0), ThresholdKind.ONE_DAY),
        (timedelta(minutes=-1), ThresholdKind.OVERDUE),
        (timedelta(days=-3), ThresholdKind.OVERDUE),
    ],
)
def test_threshold_buckets(now, offset, expected):
    assert threshold_for(now + offset, now) == expected


@pytest.mark.parametrize(
    "offset",
    [timedelta(days=5), timedelta(days=2), timedelta(days=8), timedelta(days=30)],
)
def test_days_between_buckets_send_nothing(now, offset):
    assert threshold_for(now + offset, now) is None


def test_days_until_rounds_up(now):
    assert days_until(now + timedelta(hours=1), now) == 1
    assert days_until(now + timedelta(days=3), now) == 3
    assert days_until(now + timedelta(days=3, seconds=1), now) == 4


def test_priority():
    assert priority_for(ThresholdKind.OVERDUE) == "high"
    assert priority_for(ThresholdKind.ONE_DAY) == "high"
    assert priority_for(ThresholdKind.THREE_DAYS) == "medium"
    assert priority_for(ThresholdKind.SEVEN_DAYS) == "medium"
