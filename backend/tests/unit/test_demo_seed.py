"""Unit tests for the YAML demo-data loader."""

from decimal import Decimal

import pytest

from atelier.config import get_settings
from atelier.domain.entities import ProjectStatus, ProposalStatus, UserRole
from atelier.infrastructure.memory import InMemoryStore
from atelier.infrastructure.security.passwords import verify_password
from atelier.infrastructure.seed.demo_seed import load_seed_file, seed_demo_data


@pytest.fixture
def document() -> dict:
    return load_seed_file(get_settings().seed_file)


def test_missing_seed_file_yields_empty_document(tmp_path):
    assert load_seed_file(tmp_path / "absent.yaml") == {}


@pytest.mark.asyncio
async def test_seed_loads_demo_accounts_and_project(document):
    store = InMemoryStore().entity_store()
    assert await seed_demo_data(store, document) == (2, 1)

    admin = await store.users.get_by_email("anjola@atelieranj.com")
    assert admin.role is UserRole.SUPERADMIN
    assert verify_password("password123", admin.password)

    client = await store.users.get_by_email("client@example.com")
    project = await store.projects.get_by_id("proj-demo-1")
    assert client.project_ids == [project.id]
    assert project.status is ProjectStatus.PROPOSAL_SENT
    assert project.proposal.status is ProposalStatus.SENT
    assert project.invoice_amount == Decimal("15000000")


@pytest.mark.asyncio
async def test_seed_is_idempotent(document):
    store = InMemoryStore().entity_store()
    await seed_demo_data(store, document)
    assert await seed_demo_data(store, document) == (0, 0)
    assert len(await store.users.get_all()) == 2
