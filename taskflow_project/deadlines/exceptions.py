"""
Error taxonomy shared by the deadline, schedule and notification services.

Views translate these into JSON error responses (see deadlines.http).
"""

from django.core.exceptions import (
    ImproperlyConfigured,
    ObjectDoesNotExist,
    ValidationError,
)


__all__ = [
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "ExternalServiceError",
    "ConfigurationError",
    "AssignmentUnavailableError",
]


class NotFoundError(ObjectDoesNotExist):
    """Unknown item, extension request, milestone or user id."""


class ConflictError(Exception):
    """A compare-and-swap transition lost: the record already left its state."""


class ExternalServiceError(Exception):
    """An out-of-band collaborator (SMTP) failed. Never fatal."""


class ConfigurationError(ImproperlyConfigured):
    """Invalid scheduler configuration, reported before any job starts."""

    def __init__(self, errors):
        if isinstance(errors, str):
            errors = [errors]
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class AssignmentUnavailableError(ValidationError):
    """
    The assignee is not available on the deadline of one or more tasks.
    ``unavailable_tasks`` lists the offending task titles.
    """

    def __init__(self, unavailable_tasks):
        self.unavailable_tasks = list(unavailable_tasks)
        super().__init__(
            "Cannot assign: user is unavailable (vacation or not a work day) "
            "for the following task(s): " + ", ".join(self.unavailable_tasks)
        )
