"""
Outbound email for notifications (Django mail framework / SMTP).

The subject and body are selected by Notification.type.
Any delivery failure surfaces as ExternalServiceError; callers
decide whether it matters (the dispatcher never lets it).
"""

import logging

from django.conf import settings
from django.core.mail import send_mail

from deadlines.exceptions import ExternalServiceError
from notifications.models import Notification


logger = logging.getLogger(__name__)

SIGNATURE = "— Taskflow Deadlines"


def _plural(count, word="day"):
    return word if count == 1 else f"{word}s"


# ============================================================
# TEMPLATES (KEYED BY NOTIFICATION TYPE)
# ============================================================

def _task_assignment(user, notification):
    data = notification.related_data
    subject = f"New Task Assigned: {notification.related_title or 'Task'}"
    body = (
        f"Hi {user.display_name},\n\n"
        f"You have been assigned a new task in the "
        f"“{notification.related_project_name or 'General'}” project.\n\n"
        f"Task: {notification.related_title}\n"
        f"Deadline: {data.get('deadline') or 'No deadline set'}\n\n"
        f"Please log in to view the details or update its status.\n\n"
        f"{SIGNATURE}"
    )
    return subject, body


def _deadline_approaching(user, notification):
    days_left = notification.related_data.get("days", 1)
    item_type = notification.related_type or "task"
    subject = f"Deadline Reminder: {notification.related_title}"
    body = (
        f"Hello {user.display_name},\n\n"
        f"This is a reminder that your {item_type} "
        f"“{notification.related_title}” is due in "
        f"{days_left} {_plural(days_left)}.\n\n"
        f"Please complete this {item_type} on time or request an extension "
        f"if needed.\n\n"
        f"{SIGNATURE}"
    )
    return subject, body


def _deadline_overdue(user, notification):
    overdue_days = notification.related_data.get("days", 1)
    item_type = notification.related_type or "task"
    subject = f"URGENT: {item_type.capitalize()} Overdue - {notification.related_title}"
    body = (
        f"Hello {user.display_name},\n\n"
        f"Your {item_type} “{notification.related_title}” is overdue by "
        f"{overdue_days} {_plural(overdue_days)}.\n\n"
        f"Please complete this {item_type} immediately or request an extension.\n\n"
        f"{SIGNATURE}"
    )
    return subject, body


def _vacation_request(user, notification):
    data = notification.related_data
    employee = data.get("employee_name", "An employee")
    subject = f"Vacation Request from {employee}"
    body = (
        f"Hello {user.display_name},\n\n"
        f"{employee} has submitted a vacation request.\n\n"
        f"Start date: {data.get('start_date')}\n"
        f"End date: {data.get('end_date')}\n\n"
        f"{SIGNATURE}"
    )
    return subject, body


def _general(user, notification):
    subject = notification.title or "Notification"
    body = (
        f"Hello {user.display_name},\n\n"
        f"{notification.message}\n\n"
        f"{SIGNATURE}"
    )
    return subject, body


EMAIL_TEMPLATES = {
    Notification.Type.TASK_ASSIGNMENT: _task_assignment,
    Notification.Type.DEADLINE_APPROACHING: _deadline_approaching,
    Notification.Type.DEADLINE_OVERDUE: _deadline_overdue,
    Notification.Type.VACATION_REQUEST: _vacation_request,
}


def render_notification_email(user, notification):
    """Return (subject, body) for a notification."""
    template = EMAIL_TEMPLATES.get(notification.type, _general)
    return template(user, notification)


# ============================================================
# SEND
# ============================================================

def email_enabled():
    return getattr(settings, "NOTIFICATIONS_EMAIL_ENABLED", True)


def send_notification_email(user, notification):
    """
    Send one notification by email.

    Returns False when email is skipped (disabled or no address),
    True on success. Raises ExternalServiceError on delivery failure.
    """
    if not email_enabled():
        logger.info("Email notifications are disabled; skipping notification %s", notification.pk)
        return False

    if not user.email:
        logger.info("User %s has no email address; skipping notification %s", user.pk, notification.pk)
        return False

    subject, body = render_notification_email(user, notification)

    try:
        send_mail(
            subject=subject,
            message=body,
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[user.email],
            fail_silently=False,
        )
    except Exception as exc:
        raise ExternalServiceError(
            f"Failed to email notification {notification.pk} to user {user.pk}: {exc}"
        ) from exc

    return True
