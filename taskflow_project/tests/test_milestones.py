from datetime import timedelta

import pytest

from deadlines.exceptions import NotFoundError, ValidationError
from deadlines.services.milestones import add_milestone, complete_milestone
from notifications.models import Notification


pytestmark = pytest.mark.django_db


@pytest.fixture
def project(user_factory, project_factory):
    return project_factory(name="Website", members=[user_factory(), user_factory()])


def test_add_milestone_notifies_members(now, project):
    milestone = add_milestone(
        project=project,
        title="Beta",
        due_date=now + timedelta(days=14),
    )

    assert milestone.completed is False
    assert list(project.milestones.all()) == [milestone]

    notifications = Notification.objects.filter(type=Notification.Type.MILESTONE)
    assert notifications.count() == 2
    assert notifications.first().message == 'New milestone "Beta" added to project "Website"'


@pytest.mark.parametrize("title, due", [("Beta", None), ("", "set")])
def test_add_milestone_requires_title_and_due_date(now, project, title, due):
    with pytest.raises(ValidationError):
        add_milestone(project=project, title=title, due_date=now if due else None)


def test_completion_is_monotonic(now, project, milestone_factory):
    milestone = milestone_factory(project=project)

    first = complete_milestone(project=project, milestone_id=milestone.pk, now=now)
    second = complete_milestone(
        project=project,
        milestone_id=milestone.pk,
        now=now + timedelta(days=1),
    )

    assert first.completed is True
    assert first.completed_at == now
    assert second.completed_at == now

    completed = Notification.objects.filter(type=Notification.Type.MILESTONE_COMPLETE)
    assert completed.count() == 2
    assert completed.first().priority == Notification.Priority.LOW


def test_unknown_milestone(project, milestone_factory):
    other = milestone_factory()

    with pytest.raises(NotFoundError):
        complete_milestone(project=project, milestone_id=9999)

    with pytest.raises(NotFoundError):
        complete_milestone(project=project, milestone_id=other.pk)
