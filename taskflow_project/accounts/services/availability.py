"""
Availability checks consulted before assigning work with a deadline.

A user is assignable on a day when that weekday is available in
their weekly schedule and no vacation period covers the day.
"""

from datetime import datetime, time

from django.utils import timezone

from accounts.models import WorkDay


DEFAULT_START = time(9, 0)
DEFAULT_END = time(17, 0)

WEEKDAYS = [choice.value for choice in WorkDay.Weekday]
DEFAULT_WORK_DAYS = frozenset(WEEKDAYS[:5])


def default_schedule():
    """weekday -> (start, end, available) for a user without WorkDay rows."""
    return {
        day: (DEFAULT_START, DEFAULT_END, day in DEFAULT_WORK_DAYS)
        for day in WEEKDAYS
    }


def weekly_schedule(user):
    schedule = default_schedule()
    for row in user.work_days.all():
        schedule[row.weekday] = (row.start_time, row.end_time, row.available)
    return schedule


def _as_date(value):
    if isinstance(value, datetime):
        return timezone.localdate(value) if timezone.is_aware(value) else value.date()
    return value


def weekday_name(value):
    return WEEKDAYS[_as_date(value).weekday()]


# ============================================================
# CHECKS
# ============================================================

def is_work_day(user, value):
    weekday = weekday_name(value)
    row = user.work_days.filter(weekday=weekday).first()
    if row is None:
        return weekday in DEFAULT_WORK_DAYS
    return row.available


def is_on_vacation(user, value):
    day = _as_date(value)
    return user.vacation_periods.filter(
        start_date__lte=day,
        end_date__gte=day,
    ).exists()


def can_assign(user, deadline):
    if deadline is None:
        return True
    return is_work_day(user, deadline) and not is_on_vacation(user, deadline)


def unavailable_tasks(user, tasks):
    """Titles of the tasks whose deadline the user cannot take."""
    return [
        task.title
        for task in tasks
        if task.deadline and not can_assign(user, task.deadline)
    ]
