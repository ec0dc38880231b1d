"""
deadlines/services/extensions.py

Deadline extension workflow: pending → approved | rejected.

- A request never touches the item's deadline.
- Review is a compare-and-swap on status == pending; exactly one
  reviewer transition succeeds.
- Only an approved request replaces the item's deadline.
"""

import logging

from django.db import transaction
from django.utils import timezone

from deadlines.exceptions import ConflictError, NotFoundError, ValidationError
from deadlines.services.reviewers import resolve_reviewers
from notifications.models import Notification
from notifications.services.dispatch import dispatch_notification
from projects.models import ExtensionRequest, Project, Task


logger = logging.getLogger(__name__)

DECISIONS = {
    ExtensionRequest.Status.APPROVED.value,
    ExtensionRequest.Status.REJECTED.value,
}


# ============================================================
# REQUEST
# ============================================================

def request_extension(*, item, requester, new_deadline, reason=""):
    """
    Append a pending extension request to ``item`` and notify
    its reviewers. The current deadline is left untouched.
    """
    if new_deadline is None:
        raise ValidationError("A new deadline is required.")

    if timezone.is_naive(new_deadline):
        new_deadline = timezone.make_aware(new_deadline)

    extension = ExtensionRequest.objects.create(
        requested_by=requester,
        new_deadline=new_deadline,
        reason=reason or "",
        **ExtensionRequest.owner_filter(item),
    )

    logger.info(
        "Extension request %s created for %s %s by user %s",
        extension.pk, item.item_type, item.pk, requester.pk,
    )

    if item.item_type == "project":
        title = "Project Deadline Extension Request"
        priority = Notification.Priority.HIGH
    else:
        title = "Deadline Extension Request"
        priority = Notification.Priority.MEDIUM

    message = (
        f'{item.item_type.capitalize()} "{item.display_title}" extension '
        f"requested by {requester.display_name}"
    )

    for reviewer in resolve_reviewers(item, requester):
        dispatch_notification(
            recipient=reviewer,
            title=title,
            message=message,
            type=Notification.Type.DEADLINE_EXTENSION,
            related_item=item,
            priority=priority,
            related_data={
                "extension_id": extension.pk,
                "new_deadline": new_deadline.isoformat(),
            },
        )

    return extension


# ============================================================
# REVIEW
# ============================================================

def review_extension(*, item, request_id, decision, reviewer):
    """
    Move a pending request to approved/rejected.

    Raises:
    - ValidationError: decision is not approved/rejected
    - NotFoundError: no such request on this item
    - ConflictError: the request was already reviewed
    """
    if not isinstance(decision, str) or decision not in DECISIONS:
        raise ValidationError(f"Invalid extension decision: {decision!r}")

    owned = ExtensionRequest.objects.filter(
        pk=request_id,
        **ExtensionRequest.owner_filter(item),
    )

    now = timezone.now()

    with transaction.atomic():
        updated = owned.filter(status=ExtensionRequest.Status.PENDING).update(
            status=decision,
            reviewed_by=reviewer,
            reviewed_at=now,
        )

        if not updated:
            if not owned.exists():
                raise NotFoundError(
                    f"Extension request {request_id} not found on "
                    f"{item.item_type} {item.pk}"
                )
            raise ConflictError(
                f"Extension request {request_id} has already been reviewed"
            )

        extension = owned.select_related("requested_by").get()

        if decision == ExtensionRequest.Status.APPROVED:
            type(item).objects.filter(pk=item.pk).update(
                deadline=extension.new_deadline,
            )
            item.deadline = extension.new_deadline

    logger.info(
        "Extension request %s on %s %s %s by user %s",
        extension.pk, item.item_type, item.pk, decision, reviewer.pk,
    )

    dispatch_notification(
        recipient=extension.requested_by,
        title=f"Deadline Extension {decision.capitalize()}",
        message=(
            f"Your deadline extension request for {item.item_type} "
            f'"{item.display_title}" was {decision}'
        ),
        type=Notification.Type.DEADLINE_EXTENSION_REVIEW,
        related_item=item,
        priority=(
            Notification.Priority.LOW
            if decision == ExtensionRequest.Status.APPROVED
            else Notification.Priority.MEDIUM
        ),
        related_data={"extension_id": extension.pk, "decision": str(decision)},
    )

    return extension


# ============================================================
# LOOKUPS
# ============================================================

ITEM_MODELS = {
    "task": Task,
    "project": Project,
}


def get_work_item(item_type, item_id):
    model = ITEM_MODELS.get(item_type)
    if model is None:
        raise ValidationError(f"Invalid item type: {item_type!r}")

    try:
        return model.objects.get(pk=item_id)
    except model.DoesNotExist:
        raise NotFoundError(f"{item_type.capitalize()} not found")


def extensions_for(item):
    return list(
        ExtensionRequest.objects
        .filter(**ExtensionRequest.owner_filter(item))
        .order_by("requested_at", "pk")
    )
