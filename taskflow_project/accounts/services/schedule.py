"""
Weekly schedule and vacation operations for a single user.
"""

import logging

from django.contrib.auth import get_user_model
from django.db import transaction

from accounts.models import VacationPeriod, WorkDay
from accounts.services.availability import (
    DEFAULT_END,
    DEFAULT_START,
    WEEKDAYS,
    weekly_schedule,
)
from deadlines.exceptions import ValidationError
from notifications.models import Notification
from notifications.services.dispatch import dispatch_to_many


logger = logging.getLogger(__name__)


def get_schedule(user):
    schedule = weekly_schedule(user)
    return {
        "workDays": [day for day in WEEKDAYS if schedule[day][2]],
        "startTime": (user.preferred_start_time or DEFAULT_START).strftime("%H:%M"),
        "endTime": (user.preferred_end_time or DEFAULT_END).strftime("%H:%M"),
        "timezone": user.timezone or "UTC",
    }


@transaction.atomic
def update_schedule(*, user, work_days, start_time, end_time, timezone=None):
    """
    Replace the user's weekly pattern: every weekday gets the same
    hours, available only when listed in ``work_days``.
    """
    unknown = sorted(set(work_days) - set(WEEKDAYS))
    if unknown:
        raise ValidationError(f"Unknown weekday(s): {', '.join(unknown)}")

    if start_time is None or end_time is None:
        raise ValidationError("startTime and endTime are required.")

    if end_time <= start_time:
        raise ValidationError("endTime must be after startTime.")

    for day in WEEKDAYS:
        WorkDay.objects.update_or_create(
            user=user,
            weekday=day,
            defaults={
                "start_time": start_time,
                "end_time": end_time,
                "available": day in work_days,
            },
        )

    user.preferred_start_time = start_time
    user.preferred_end_time = end_time
    fields = ["preferred_start_time", "preferred_end_time"]
    if timezone:
        user.timezone = timezone
        fields.append("timezone")
    user.save(update_fields=fields)

    return get_schedule(user)


def request_vacation(*, user, start_date, end_date, reason=""):
    """
    Record a vacation period and notify every manager / admin.
    """
    vacation = VacationPeriod(
        user=user,
        start_date=start_date,
        end_date=end_date,
        reason=reason or "",
    )
    vacation.full_clean()
    vacation.save()

    User = get_user_model()
    managers = (
        User.objects
        .filter(is_active=True, role__in=User.REVIEWER_ROLES)
        .exclude(pk=user.pk)
        .order_by("pk")
    )

    dispatch_to_many(
        managers,
        title="Vacation Request",
        message=(
            f"{user.display_name} has requested vacation from "
            f"{start_date:%Y-%m-%d} to {end_date:%Y-%m-%d}"
        ),
        type=Notification.Type.VACATION_REQUEST,
        related_data={
            "employee_name": user.display_name,
            "start_date": start_date.isoformat(),
            "end_date": end_date.isoformat(),
            "reason": vacation.reason,
        },
    )

    logger.info(
        "Vacation %s-%s recorded for user %s",
        start_date, end_date, user.pk,
    )
    return vacation
