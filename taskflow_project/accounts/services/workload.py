"""
Read-side workload aggregation. Recomputed on every call.
"""

from django.contrib.auth import get_user_model
from django.db.models import Sum

from accounts.services.availability import weekly_schedule
from deadlines.exceptions import NotFoundError
from projects.models import Project, Task


HEALTHY = "healthy"
MODERATE = "moderate"
OVERLOADED = "overloaded"


def utilization_bucket(percent):
    if percent < 50:
        return HEALTHY
    if percent <= 80:
        return MODERATE
    return OVERLOADED


def _hours(tasks):
    return tasks.aggregate(total=Sum("estimated_hours"))["total"] or 0


def user_workload(user):
    open_tasks = Task.open_items().filter(assignee=user)
    total_hours = _hours(open_tasks)

    if user.max_hours_per_week:
        utilization = round(total_hours / user.max_hours_per_week * 100)
    else:
        utilization = 0

    return {
        "userId": user.pk,
        "userName": user.display_name,
        "totalTasks": open_tasks.count(),
        "totalHours": total_hours,
        "maxHours": user.max_hours_per_week,
        "utilization": utilization,
        "status": utilization_bucket(utilization),
    }


def workload_distribution():
    User = get_user_model()
    return [
        user_workload(user)
        for user in User.objects.filter(is_active=True).order_by("pk")
    ]


def team_availability(project_id=None, start=None, end=None):
    """
    Per-user assigned work and remaining weekly capacity.
    The date range applies only when both ends are given.
    """
    if project_id:
        try:
            project = Project.objects.get(pk=project_id)
        except Project.DoesNotExist:
            raise NotFoundError("Project not found")
        users = project.members.all()
    else:
        users = get_user_model().objects.filter(is_active=True)

    rows = []
    for user in users.order_by("pk"):
        tasks = Task.objects.filter(assignee=user)
        if start and end:
            tasks = tasks.filter(deadline__gte=start, deadline__lte=end)

        total_hours = _hours(tasks)
        available_hours = user.max_hours_per_week - user.current_workload

        schedule = weekly_schedule(user)
        rows.append({
            "user": {
                "id": user.pk,
                "name": user.display_name,
                "email": user.email,
            },
            "workSchedule": {
                day: {
                    "start": start_time.strftime("%H:%M"),
                    "end": end_time.strftime("%H:%M"),
                    "available": available,
                }
                for day, (start_time, end_time, available) in schedule.items()
            },
            "currentWorkload": user.current_workload,
            "maxHoursPerWeek": user.max_hours_per_week,
            "availableHours": available_hours,
            "assignedTasks": tasks.count(),
            "totalAssignedHours": total_hours,
            "isOverloaded": total_hours > available_hours,
        })

    return rows
