"""
Task assignment gated by the assignee's availability.

Every task with a deadline is checked before anything is written;
one unavailable deadline rejects the whole batch.
"""

import logging

from django.db import transaction

from accounts.services.availability import unavailable_tasks
from deadlines.exceptions import AssignmentUnavailableError, NotFoundError, ValidationError
from notifications.models import Notification
from notifications.services.dispatch import dispatch_notification
from projects.models import Task


logger = logging.getLogger(__name__)


def _load_tasks(task_ids):
    ids = []
    for task_id in task_ids:
        try:
            ids.append(int(task_id))
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid task id: {task_id!r}")

    tasks = {
        task.pk: task
        for task in Task.objects.select_related("project").filter(pk__in=ids)
    }

    missing = [task_id for task_id in ids if task_id not in tasks]
    if missing:
        raise NotFoundError(
            "Task(s) not found: " + ", ".join(str(pk) for pk in missing)
        )

    # Preserve caller order, drop duplicates
    return [tasks[pk] for pk in dict.fromkeys(ids)]


def _notify_assignee(task, assignee, assigned_by=None):
    message = f"You have been assigned a new task: {task.title}"
    if assigned_by is not None:
        message += f" (assigned by {assigned_by.display_name})"

    dispatch_notification(
        recipient=assignee,
        title="New Task Assigned",
        message=message,
        type=Notification.Type.TASK_ASSIGNMENT,
        related_item=task,
        priority=Notification.Priority.MEDIUM,
        related_data={
            "deadline": task.deadline.strftime("%Y-%m-%d") if task.deadline else None,
        },
    )


def bulk_assign_tasks(*, task_ids, assignee, assigned_by=None):
    """
    Assign every task in ``task_ids`` to ``assignee``.

    Raises AssignmentUnavailableError listing the task titles whose
    deadline falls on a non-work day or vacation; nothing is saved.
    """
    if not task_ids:
        raise ValidationError("At least one task id is required.")

    tasks = _load_tasks(task_ids)

    blocked = unavailable_tasks(assignee, tasks)
    if blocked:
        logger.info(
            "Assignment to user %s rejected for %d task(s)",
            assignee.pk, len(blocked),
        )
        raise AssignmentUnavailableError(blocked)

    with transaction.atomic():
        Task.objects.filter(pk__in=[task.pk for task in tasks]).update(assignee=assignee)

    for task in tasks:
        task.assignee = assignee
        _notify_assignee(task, assignee, assigned_by)

    logger.info("Assigned %d task(s) to user %s", len(tasks), assignee.pk)
    return tasks


def assign_task(*, task_id, assignee, assigned_by=None):
    return bulk_assign_tasks(
        task_ids=[task_id],
        assignee=assignee,
        assigned_by=assigned_by,
    )[0]
