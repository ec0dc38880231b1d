"""
JSON request / response helpers shared by the API views.
"""

import functools
import json
from datetime import datetime, time

from django.contrib.auth import get_user_model
from django.http import JsonResponse
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime, parse_time

from deadlines.exceptions import (
    AssignmentUnavailableError,
    ConflictError,
    NotFoundError,
    ValidationError,
)


class BadRequest(ValidationError):
    pass


def error_response(message, status, **extra):
    return JsonResponse({"error": message, **extra}, status=status)


def _validation_message(exc):
    return "; ".join(exc.messages) if hasattr(exc, "messages") else str(exc)


def json_errors(view):
    """
    Translate service-layer errors into JSON responses:
    ValidationError → 400, NotFoundError → 404, ConflictError → 409.
    """

    @functools.wraps(view)
    def wrapper(request, *args, **kwargs):
        try:
            return view(request, *args, **kwargs)
        except AssignmentUnavailableError as exc:
            return error_response(
                _validation_message(exc),
                400,
                unavailableTasks=exc.unavailable_tasks,
            )
        except ValidationError as exc:
            return error_response(_validation_message(exc), 400)
        except NotFoundError as exc:
            return error_response(str(exc), 404)
        except ConflictError as exc:
            return error_response(str(exc), 409)

    return wrapper


# ============================================================
# PARSING
# ============================================================

def _parse(parser, value):
    try:
        return parser(str(value))
    except ValueError:
        return None


def json_body(request):
    if not request.body:
        return {}
    try:
        data = json.loads(request.body)
    except (TypeError, ValueError):
        raise BadRequest("Request body must be valid JSON.")
    if not isinstance(data, dict):
        raise BadRequest("Request body must be a JSON object.")
    return data


def parse_moment(value, field, required=True):
    """
    Parse an ISO date or datetime string into an aware datetime.
    A bare date means the start of that day in the current timezone.
    """
    if value in (None, ""):
        if required:
            raise BadRequest(f"{field} is required.")
        return None

    moment = _parse(parse_datetime, value)
    if moment is None:
        day = _parse(parse_date, value)
        if day is None:
            raise BadRequest(f"{field} must be an ISO date or datetime.")
        moment = datetime.combine(day, time.min)

    if timezone.is_naive(moment):
        moment = timezone.make_aware(moment)
    return moment


def parse_day(value, field, required=True):
    if value in (None, ""):
        if required:
            raise BadRequest(f"{field} is required.")
        return None

    moment = _parse(parse_datetime, value)
    if moment is not None:
        return timezone.localdate(moment) if timezone.is_aware(moment) else moment.date()

    day = _parse(parse_date, value)
    if day is None:
        raise BadRequest(f"{field} must be an ISO date.")
    return day


def parse_clock(value, field):
    if value in (None, ""):
        raise BadRequest(f"{field} is required.")
    clock = _parse(parse_time, value)
    if clock is None:
        raise BadRequest(f"{field} must be a HH:MM time.")
    return clock


def parse_int(value, field, default=None):
    if value in (None, ""):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise BadRequest(f"{field} must be an integer.")


def get_user_or_404(user_id):
    User = get_user_model()
    try:
        return User.objects.get(pk=user_id)
    except (User.DoesNotExist, ValueError, TypeError):
        raise NotFoundError("User not found")
