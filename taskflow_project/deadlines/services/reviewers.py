"""
Who reviews a deadline extension request.

The strategy is pluggable through the DEADLINES_REVIEWER_RESOLVER
setting (dotted path to a class with a ``resolve(item, requester)``
method returning a list of users).
"""

from django.conf import settings
from django.contrib.auth import get_user_model
from django.utils.module_loading import import_string


class RoleBasedReviewerResolver:
    """
    - Project: every member except the requester.
    - Task: members of the task's project with a manager/admin role,
      falling back to every active manager/admin.
    The requester never reviews their own request.
    """

    def resolve(self, item, requester):
        if item.item_type == "project":
            reviewers = item.members.filter(is_active=True)
        else:
            reviewers = self._task_reviewers(item, requester)

        return list(
            reviewers
            .exclude(pk=requester.pk)
            .order_by("pk")
        )

    def _task_reviewers(self, task, requester):
        User = get_user_model()

        if task.project_id:
            project_reviewers = task.project.members.filter(
                is_active=True,
                role__in=User.REVIEWER_ROLES,
            ).exclude(pk=requester.pk)
            if project_reviewers.exists():
                return project_reviewers

        return User.objects.filter(is_active=True, role__in=User.REVIEWER_ROLES)


def get_reviewer_resolver():
    path = getattr(
        settings,
        "DEADLINES_REVIEWER_RESOLVER",
        "deadlines.services.reviewers.RoleBasedReviewerResolver",
    )
    return import_string(path)()


def resolve_reviewers(item, requester):
    return get_reviewer_resolver().resolve(item, requester)
