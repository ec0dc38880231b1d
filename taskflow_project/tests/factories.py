"""
factory_boy factories for the taskflow models.
"""

import factory
from django.utils import timezone
from factory.django import DjangoModelFactory


class UserFactory(DjangoModelFactory):

    class Meta:
        model = "accounts.User"
        django_get_or_create = ("username",)

    username = factory.Sequence(lambda n: f"user{n}")
    email = factory.LazyAttribute(lambda o: f"{o.username}@example.com")
    first_name = factory.Sequence(lambda n: f"First{n}")
    last_name = "Tester"
    role = "member"
    is_active = True


class ManagerFactory(UserFactory):
    role = "manager"


class AdminUserFactory(UserFactory):
    role = "admin"


class ProjectFactory(DjangoModelFactory):

    class Meta:
        model = "projects.Project"
        skip_postgeneration_save = True

    name = factory.Sequence(lambda n: f"Project {n}")
    status = "in_progress"

    @factory.post_generation
    def members(self, create, extracted, **kwargs):
        if create and extracted:
            self.members.add(*extracted)


class TaskFactory(DjangoModelFactory):

    class Meta:
        model = "projects.Task"

    title = factory.Sequence(lambda n: f"Task {n}")
    status = "in_progress"
    estimated_hours = 4


class MilestoneFactory(DjangoModelFactory):

    class Meta:
        model = "projects.Milestone"

    project = factory.SubFactory(ProjectFactory)
    title = factory.Sequence(lambda n: f"Milestone {n}")
    due_date = factory.LazyFunction(timezone.now)
