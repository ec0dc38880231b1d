"""
Read-side deadline queries (overdue, upcoming, stats, calendar).
No side effects.
"""

from datetime import timedelta

from django.db.models import Q
from django.utils import timezone

from projects.models import Milestone, Project, Task


def tasks_for_user(user_id=None):
    qs = Task.objects.select_related("assignee", "project")
    if user_id:
        qs = qs.filter(
            Q(assignee_id=user_id) |
            Q(project__members__id=user_id)
        ).distinct()
    return qs


def projects_for_user(user_id=None):
    qs = Project.objects.all()
    if user_id:
        qs = qs.filter(members__id=user_id).distinct()
    return qs


def overdue_items(user_id=None, now=None):
    now = now or timezone.now()

    tasks = (
        tasks_for_user(user_id)
        .filter(deadline__lt=now)
        .exclude(status__in=Task.TERMINAL_STATUSES)
    )
    projects = (
        projects_for_user(user_id)
        .filter(deadline__lt=now)
        .exclude(status__in=Project.TERMINAL_STATUSES)
    )

    return list(tasks), list(projects)


def upcoming_items(user_id=None, days=7, now=None):
    now = now or timezone.now()
    until = now + timedelta(days=days)

    tasks = (
        tasks_for_user(user_id)
        .filter(deadline__gte=now, deadline__lte=until)
        .exclude(status__in=Task.TERMINAL_STATUSES)
    )
    projects = (
        projects_for_user(user_id)
        .filter(deadline__gte=now, deadline__lte=until)
        .exclude(status__in=Project.TERMINAL_STATUSES)
    )

    return list(tasks), list(projects)


def _counts(qs, terminal_statuses, now, until):
    open_qs = qs.exclude(status__in=terminal_statuses)
    total = qs.count()
    overdue = open_qs.filter(deadline__lt=now).count()
    upcoming = open_qs.filter(deadline__gte=now, deadline__lte=until).count()
    return {
        "total": total,
        "overdue": overdue,
        "upcoming": upcoming,
        "onTime": total - overdue,
    }


def deadline_stats(user_id=None, now=None):
    now = now or timezone.now()
    next_week = now + timedelta(days=7)

    return {
        "tasks": _counts(tasks_for_user(user_id), Task.TERMINAL_STATUSES, now, next_week),
        "projects": _counts(projects_for_user(user_id), Project.TERMINAL_STATUSES, now, next_week),
    }


def calendar_entries(user_id=None, start=None, end=None, now=None):
    """
    Tasks, projects and milestones with a date inside [start, end].
    """
    now = now or timezone.now()

    tasks = tasks_for_user(user_id).filter(deadline__gte=start, deadline__lte=end)
    projects = projects_for_user(user_id).filter(deadline__gte=start, deadline__lte=end)

    milestones = (
        Milestone.objects
        .filter(
            project__in=projects_for_user(user_id),
            due_date__gte=start,
            due_date__lte=end,
        )
        .select_related("project")
    )

    return {
        "tasks": [
            {
                "id": task.pk,
                "title": task.title,
                "date": task.deadline,
                "type": "task",
                "status": task.status,
                "isOverdue": task.is_overdue(now),
                "assignedTo": task.assignee.display_name if task.assignee else None,
                "projectName": task.project.name if task.project else None,
            }
            for task in tasks
        ],
        "projects": [
            {
                "id": project.pk,
                "title": project.name,
                "date": project.deadline,
                "type": "project",
                "status": project.status,
                "isOverdue": project.is_overdue(now),
            }
            for project in projects
        ],
        "milestones": [
            {
                "id": milestone.pk,
                "title": milestone.title,
                "date": milestone.due_date,
                "type": "milestone",
                "projectId": milestone.project_id,
                "projectName": milestone.project.name,
                "completed": milestone.completed,
            }
            for milestone in milestones
        ],
    }
