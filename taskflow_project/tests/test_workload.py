from datetime import timedelta

import pytest

from accounts.services.workload import (
    team_availability,
    user_workload,
    utilization_bucket,
    workload_distribution,
)
from deadlines.exceptions import NotFoundError


@pytest.mark.parametrize(
    "percent, bucket",
    [(0, "healthy"), (49, "healthy"), (50, "moderate"), (80, "moderate"), (81, "overloaded"), (150, "overloaded")],
)
def test_utilization_bucket(percent, bucket):
    assert utilization_bucket(percent) == bucket


@pytest.mark.django_db
class TestUserWorkload:

    def test_only_open_tasks_count(self, member, task_factory):
        task_factory(assignee=member, estimated_hours=10)
        task_factory(assignee=member, estimated_hours=10)
        task_factory(assignee=member, estimated_hours=30, status="done")

        workload = user_workload(member)

        assert workload["totalTasks"] == 2
        assert workload["totalHours"] == 20
        assert workload["utilization"] == 50
        assert workload["status"] == "moderate"

    def test_zero_capacity_reports_zero(self, user_factory, task_factory):
        user = user_factory(max_hours_per_week=0)
        task_factory(assignee=user, estimated_hours=5)

        assert user_workload(user)["utilization"] == 0

    def test_distribution_covers_active_users(self, user_factory):
        active = user_factory()
        user_factory(is_active=False)

        assert [row["userId"] for row in workload_distribution()] == [active.pk]


@pytest.mark.django_db
class TestTeamAvailability:

    def test_project_members_with_range(self, now, user_factory, project_factory, task_factory):
        a, b = user_factory(current_workload=10), user_factory()
        project = project_factory(members=[a, b])
        task_factory(assignee=a, estimated_hours=8, deadline=now + timedelta(days=1))
        task_factory(assignee=a, estimated_hours=8, deadline=now + timedelta(days=30))

        rows = team_availability(
            project_id=project.pk,
            start=now,
            end=now + timedelta(days=7),
        )

        first = rows[0]
        assert first["user"]["id"] == a.pk
        assert first["assignedTasks"] == 1
        assert first["totalAssignedHours"] == 8
        assert first["availableHours"] == 30
        assert first["isOverloaded"] is False
        assert first["workSchedule"]["saturday"]["available"] is False

    def test_overloaded(self, user_factory, task_factory):
        user = user_factory(max_hours_per_week=10)
        task_factory(assignee=user, estimated_hours=12)

        assert team_availability()[0]["isOverloaded"] is True

    def test_unknown_project(self):
        with pytest.raises(NotFoundError):
            team_availability(project_id=9999)
