"""
Notification dispatcher.

Persists the in-app notification first, then emails it once the
surrounding transaction commits. An email failure, or a failure to
record the delivery, is logged and leaves email_sent=False; it never
fails the notification or the operation that triggered it.
"""

import logging

from django.db import DatabaseError, transaction

from deadlines.exceptions import ExternalServiceError, NotFoundError
from notifications.models import Notification
from notifications.services.email import send_notification_email


logger = logging.getLogger(__name__)


def related_item_fields(item):
    """Loose reference + display fields for a Task or Project."""
    if item is None:
        return {}

    fields = {
        "related_type": item.item_type,
        "related_title": item.display_title,
        item.item_type: item,
    }

    project = item if item.item_type == "project" else item.project
    if project is not None:
        fields["related_project_name"] = project.name

    return fields


def dispatch_notification(
    *,
    recipient,
    title,
    message,
    type=Notification.Type.GENERAL,
    related_item=None,
    priority=Notification.Priority.MEDIUM,
    related_data=None,
):
    """
    Create a notification for ``recipient`` and best-effort email it.

    ``related_item`` is a Task or Project (or None).
    ``related_data`` carries extra display context used by the
    email templates (days left, dates, names).
    """
    notification = Notification.objects.create(
        recipient=recipient,
        title=title,
        message=message,
        type=type,
        priority=priority,
        related_data=related_data or {},
        **related_item_fields(related_item),
    )

    transaction.on_commit(lambda: deliver_email(notification))

    return notification


def deliver_email(notification):
    """
    Email a stored notification. Returns True when the email went out.
    """
    try:
        sent = send_notification_email(notification.recipient, notification)
    except ExternalServiceError as exc:
        logger.warning("Email delivery failed (notification kept): %s", exc)
        return False

    if not sent:
        return False

    try:
        notification.mark_email_sent()
    except DatabaseError:
        logger.exception(
            "Email sent but delivery not recorded for notification %s",
            notification.pk,
        )

    return True


def dispatch_to_many(recipients, **kwargs):
    """Dispatch the same notification to several users."""
    return [
        dispatch_notification(recipient=recipient, **kwargs)
        for recipient in recipients
    ]


def mark_as_read(notification_id):
    try:
        notification = Notification.objects.get(pk=notification_id)
    except Notification.DoesNotExist:
        raise NotFoundError("Notification not found")

    notification.mark_as_read()
    return notification


def recent_notifications(user, limit=50):
    return list(
        Notification.objects
        .filter(recipient=user)
        .order_by("-created_at")[:limit]
    )

