from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods

from accounts.services.availability import can_assign, is_on_vacation, is_work_day
from accounts.services.schedule import get_schedule, request_vacation, update_schedule
from accounts.services.workload import team_availability, workload_distribution
from deadlines.http import (
    BadRequest,
    get_user_or_404,
    json_body,
    json_errors,
    parse_clock,
    parse_day,
    parse_int,
    parse_moment,
)


# ============================================================
# PER-USER SCHEDULE
# ============================================================

@csrf_exempt
@require_http_methods(["GET", "PUT"])
@json_errors
def user_schedule(request, user_id):
    user = get_user_or_404(user_id)

    if request.method == "GET":
        return JsonResponse(get_schedule(user))

    data = json_body(request)
    work_days = data.get("workDays")
    if not isinstance(work_days, list):
        raise BadRequest("workDays must be a list of weekday names.")

    schedule = update_schedule(
        user=user,
        work_days=[str(day).lower() for day in work_days],
        start_time=parse_clock(data.get("startTime"), "startTime"),
        end_time=parse_clock(data.get("endTime"), "endTime"),
        timezone=data.get("timezone"),
    )
    return JsonResponse(schedule)


@csrf_exempt
@require_http_methods(["POST"])
@json_errors
def user_vacation(request, user_id):
    user = get_user_or_404(user_id)
    data = json_body(request)

    vacation = request_vacation(
        user=user,
        start_date=parse_day(data.get("startDate"), "startDate"),
        end_date=parse_day(data.get("endDate"), "endDate"),
        reason=data.get("reason", ""),
    )

    return JsonResponse(
        {
            "id": vacation.pk,
            "startDate": vacation.start_date,
            "endDate": vacation.end_date,
            "reason": vacation.reason,
        },
        status=201,
    )


@require_GET
@json_errors
def user_availability(request, user_id):
    user = get_user_or_404(user_id)
    day = parse_day(request.GET.get("date"), "date")

    return JsonResponse({
        "date": day,
        "isWorkDay": is_work_day(user, day),
        "isOnVacation": is_on_vacation(user, day),
        "canAssign": can_assign(user, day),
    })


# ============================================================
# TEAM
# ============================================================

@require_GET
@json_errors
def team_availability_view(request):
    rows = team_availability(
        project_id=parse_int(request.GET.get("projectId"), "projectId"),
        start=parse_moment(request.GET.get("startDate"), "startDate", required=False),
        end=parse_moment(request.GET.get("endDate"), "endDate", required=False),
    )
    return JsonResponse(rows, safe=False)


@require_GET
def team_workload(request):
    return JsonResponse(workload_distribution(), safe=False)
