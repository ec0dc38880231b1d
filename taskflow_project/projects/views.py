from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from deadlines.http import BadRequest, get_user_or_404, json_body, json_errors
from deadlines.serializers import task_data
from projects.services.assignment import assign_task, bulk_assign_tasks


def _assigned_by(data):
    if data.get("assignedBy") in (None, ""):
        return None
    return get_user_or_404(data["assignedBy"])


@csrf_exempt
@require_http_methods(["POST"])
@json_errors
def bulk_assign(request):
    data = json_body(request)

    task_ids = data.get("taskIds")
    if not isinstance(task_ids, list) or not task_ids:
        raise BadRequest("taskIds must be a non-empty list.")
    if data.get("assignedTo") in (None, ""):
        raise BadRequest("Assigned user is required")

    tasks = bulk_assign_tasks(
        task_ids=task_ids,
        assignee=get_user_or_404(data["assignedTo"]),
        assigned_by=_assigned_by(data),
    )

    return JsonResponse({
        "message": f"Successfully assigned {len(tasks)} tasks",
        "tasks": [task_data(task) for task in tasks],
    })


@csrf_exempt
@require_http_methods(["POST"])
@json_errors
def assign(request, task_id):
    data = json_body(request)
    if data.get("assignedTo") in (None, ""):
        raise BadRequest("Assigned user is required")

    task = assign_task(
        task_id=task_id,
        assignee=get_user_or_404(data["assignedTo"]),
        assigned_by=_assigned_by(data),
    )

    return JsonResponse({
        "message": "Task assigned successfully",
        "task": task_data(task),
    })
