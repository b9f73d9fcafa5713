"""Shared fixtures: one user per role and a client-owned project."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from atelier.domain.entities import Brief, Project, User, UserRole


def make_user(role: UserRole, name: str = "Test User", **kwargs) -> User:
    email = kwargs.pop("email", f"{name.lower().replace(' ', '.')}@example.com")
    return User(name=name, email=email, password="not-a-hash", role=role, **kwargs)


@pytest.fixture
def superadmin() -> User:
    return make_user(UserRole.SUPERADMIN, "Anjola", id="superadmin-1")


@pytest.fixture
def worker() -> User:
    return make_user(UserRole.WORKER, "Site Worker", id="worker-1")


@pytest.fixture
def client_user() -> User:
    return make_user(UserRole.CLIENT, "Demo Client", id="client-1")


@pytest.fixture
def other_client() -> User:
    return make_user(UserRole.CLIENT, "Other Client", id="client-2")


@pytest.fixture
def project(client_user: User) -> Project:
    return Project(
        id="proj-1",
        client_id=client_user.id,
        title="Minimalist Lakehouse",
        brief=Brief(
            project_title="Minimalist Lakehouse",
            project_location="Epe, Lagos",
            project_type="Residential",
            budget=Decimal("45000000"),
            timeline="12 Months",
            submitted_at=datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc),
        ),
        created_at=datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc),
    )
