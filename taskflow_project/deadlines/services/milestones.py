"""
Project milestones.

Completion is one-way: the first completion stamps completed_at and
notifies the members; repeating it changes nothing.
"""

import logging

from django.utils import timezone

from deadlines.exceptions import NotFoundError, ValidationError
from notifications.models import Notification
from notifications.services.dispatch import dispatch_to_many
from projects.models import Milestone


logger = logging.getLogger(__name__)


def add_milestone(*, project, title, description="", due_date=None):
    if not title:
        raise ValidationError("A milestone title is required.")

    if due_date is None:
        raise ValidationError("A milestone due date is required.")

    if timezone.is_naive(due_date):
        due_date = timezone.make_aware(due_date)

    milestone = Milestone.objects.create(
        project=project,
        title=title,
        description=description or "",
        due_date=due_date,
    )

    logger.info("Milestone %s added to project %s", milestone.pk, project.pk)

    dispatch_to_many(
        project.notification_recipients(),
        title="New Milestone Added",
        message=f'New milestone "{title}" added to project "{project.name}"',
        type=Notification.Type.MILESTONE,
        related_item=project,
        priority=Notification.Priority.MEDIUM,
        related_data={"milestone_id": milestone.pk},
    )

    return milestone


def complete_milestone(*, project, milestone_id, now=None):
    """
    Mark a milestone completed. Idempotent: an already completed
    milestone keeps its original completed_at and no one is notified.
    """
    now = now or timezone.now()

    milestones = Milestone.objects.filter(pk=milestone_id, project=project)

    updated = milestones.filter(completed=False).update(
        completed=True,
        completed_at=now,
    )

    try:
        milestone = milestones.get()
    except Milestone.DoesNotExist:
        raise NotFoundError(f"Milestone {milestone_id} not found on project {project.pk}")

    if not updated:
        logger.info("Milestone %s was already completed", milestone.pk)
        return milestone

    logger.info("Milestone %s completed on project %s", milestone.pk, project.pk)

    dispatch_to_many(
        project.notification_recipients(),
        title="Milestone Completed",
        message=f'Milestone "{milestone.title}" completed in project "{project.name}"',
        type=Notification.Type.MILESTONE_COMPLETE,
        related_item=project,
        priority=Notification.Priority.LOW,
        related_data={"milestone_id": milestone.pk},
    )

    return milestone
