from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods

from deadlines.http import BadRequest, get_user_or_404, json_errors, parse_int
from deadlines.serializers import notification_data
from notifications.models import Notification
from notifications.services.dispatch import mark_as_read, recent_notifications


@require_GET
@json_errors
def user_notifications(request, user_id):
    user = get_user_or_404(user_id)
    limit = parse_int(request.GET.get("limit"), "limit", default=50)
    if limit < 1:
        raise BadRequest("limit must be a positive integer.")

    notifications = recent_notifications(user, limit=limit)

    return JsonResponse({
        "notifications": [notification_data(n) for n in notifications],
        "unreadCount": Notification.objects.filter(recipient=user, is_read=False).count(),
    })


@csrf_exempt
@require_http_methods(["PUT"])
@json_errors
def read_notification(request, notification_id):
    notification = mark_as_read(notification_id)
    return JsonResponse(notification_data(notification))


@csrf_exempt
@require_http_methods(["PUT"])
@json_errors
def read_all_notifications(request, user_id):
    user = get_user_or_404(user_id)
    updated = Notification.mark_all_as_read(user, type=request.GET.get("type"))

    return JsonResponse({
        "message": "All notifications marked as read",
        "updated": updated,
    })
