"""
Shared pytest fixtures.

Tests run against taskflow_project.settings_test (in-memory SQLite,
locmem email backend, scheduler disabled).
"""

from datetime import datetime, timezone as dt_timezone

import pytest

from tests.factories import (
    AdminUserFactory,
    ManagerFactory,
    MilestoneFactory,
    ProjectFactory,
    TaskFactory,
    UserFactory,
)


# Tuesday
NOW = datetime(2026, 3, 10, 12, 0, tzinfo=dt_timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def user_factory(db):
    return UserFactory


@pytest.fixture
def manager_factory(db):
    return ManagerFactory


@pytest.fixture
def admin_factory(db):
    return AdminUserFactory


@pytest.fixture
def project_factory(db):
    return ProjectFactory


@pytest.fixture
def task_factory(db):
    return TaskFactory


@pytest.fixture
def milestone_factory(db):
    return MilestoneFactory


@pytest.fixture
def member(user_factory):
    return user_factory()


@pytest.fixture
def manager(manager_factory):
    return manager_factory()
