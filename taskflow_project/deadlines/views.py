from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods

from deadlines.http import (
    get_user_or_404,
    json_body,
    json_errors,
    parse_int,
    parse_moment,
)
from deadlines.scheduler import scheduler
from deadlines.serializers import (
    extension_data,
    milestone_data,
    project_data,
    task_data,
    work_item_data,
)
from deadlines.services import queries
from deadlines.services.extensions import (
    get_work_item,
    request_extension,
    review_extension,
)
from deadlines.services.milestones import add_milestone, complete_milestone


# ============================================================
# READ SIDE
# ============================================================

@require_GET
@json_errors
def overdue_items(request):
    now = timezone.now()
    tasks, projects = queries.overdue_items(
        user_id=parse_int(request.GET.get("userId"), "userId"),
        now=now,
    )

    return JsonResponse({
        "overdueTasks": [task_data(t, now) for t in tasks],
        "overdueProjects": [project_data(p, now) for p in projects],
        "totalOverdue": len(tasks) + len(projects),
    })


@require_GET
@json_errors
def upcoming_deadlines(request):
    now = timezone.now()
    tasks, projects = queries.upcoming_items(
        user_id=parse_int(request.GET.get("userId"), "userId"),
        days=parse_int(request.GET.get("days"), "days", default=7),
        now=now,
    )

    return JsonResponse({
        "upcomingTasks": [task_data(t, now) for t in tasks],
        "upcomingProjects": [project_data(p, now) for p in projects],
        "totalUpcoming": len(tasks) + len(projects),
    })


@require_GET
@json_errors
def deadline_stats(request):
    return JsonResponse(
        queries.deadline_stats(
            user_id=parse_int(request.GET.get("userId"), "userId"),
        )
    )


@require_GET
@json_errors
def calendar_data(request):
    return JsonResponse(
        queries.calendar_entries(
            user_id=parse_int(request.GET.get("userId"), "userId"),
            start=parse_moment(request.GET.get("startDate"), "startDate"),
            end=parse_moment(request.GET.get("endDate"), "endDate"),
        )
    )


# ============================================================
# EXTENSION REQUESTS
# ============================================================

def _request_extension(request, item_type, item_id):
    item = get_work_item(item_type, item_id)
    data = json_body(request)

    extension = request_extension(
        item=item,
        requester=get_user_or_404(data.get("userId")),
        new_deadline=parse_moment(data.get("newDeadline"), "newDeadline"),
        reason=data.get("reason", ""),
    )

    return JsonResponse(
        {
            "message": "Extension request submitted successfully",
            "extension": extension_data(extension),
            "item": work_item_data(item),
        },
        status=201,
    )


@csrf_exempt
@require_http_methods(["POST"])
@json_errors
def request_task_extension(request, task_id):
    return _request_extension(request, "task", task_id)


@csrf_exempt
@require_http_methods(["POST"])
@json_errors
def request_project_extension(request, project_id):
    return _request_extension(request, "project", project_id)


@csrf_exempt
@require_http_methods(["PUT"])
@json_errors
def review_extension_request(request, item_type, item_id, extension_id):
    item = get_work_item(item_type, item_id)
    data = json_body(request)

    extension = review_extension(
        item=item,
        request_id=extension_id,
        decision=data.get("status"),
        reviewer=get_user_or_404(data.get("reviewerId")),
    )

    return JsonResponse({
        "message": f"Extension {extension.status} successfully",
        "extension": extension_data(extension),
        "item": work_item_data(item),
    })


# ============================================================
# MILESTONES
# ============================================================

@csrf_exempt
@require_http_methods(["POST"])
@json_errors
def create_milestone(request, project_id):
    project = get_work_item("project", project_id)
    data = json_body(request)

    milestone = add_milestone(
        project=project,
        title=data.get("title"),
        description=data.get("description", ""),
        due_date=parse_moment(data.get("dueDate"), "dueDate", required=False),
    )

    return JsonResponse(
        {
            "message": "Milestone added successfully",
            "milestone": milestone_data(milestone),
        },
        status=201,
    )


@csrf_exempt
@require_http_methods(["PUT"])
@json_errors
def finish_milestone(request, project_id, milestone_id):
    project = get_work_item("project", project_id)
    milestone = complete_milestone(project=project, milestone_id=milestone_id)

    return JsonResponse({
        "message": "Milestone completed successfully",
        "milestone": milestone_data(milestone),
    })


# ============================================================
# SCHEDULER STATUS
# ============================================================

@require_GET
def cron_status(request):
    return JsonResponse({
        "success": True,
        "data": scheduler.status(),
        "timestamp": timezone.now(),
    })
