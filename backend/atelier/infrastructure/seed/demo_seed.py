"""Demo data loader: seeds accounts and projects from a YAML file.

Idempotent: users are matched by e-mail and projects by id, so running it
on every startup only inserts what is missing.
"""

import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path
from typing import Any

import yaml

from atelier.application.interfaces import EntityStore
from atelier.domain.entities import (
    Brief,
    PaymentStatus,
    Project,
    ProjectStatus,
    Proposal,
    ProposalStatus,
    User,
    UserRole,
)
from atelier.infrastructure.security.passwords import hash_password

logger = logging.getLogger(__name__)


def load_seed_file(path: str | Path) -> dict[str, Any]:
    """Parse the seed YAML; a missing file yields an empty document."""
    seed_path = Path(path)
    if not seed_path.exists():
        logger.warning("Seed file %s not found, skipping demo data", seed_path)
        return {}
    with seed_path.open(encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


async def seed_demo_data(store: EntityStore, document: dict[str, Any]) -> tuple[int, int]:
    """Insert missing users and projects. Returns (users_added, projects_added)."""
    now = datetime.now(timezone.utc)
    users_added = 0
    projects_added = 0

    for raw in document.get("users", []):
        if await store.users.get_by_email(raw["email"]) is not None:
            continue
        await store.users.create(User(
            id=raw["id"],
            name=raw["name"],
            email=raw["email"],
            password=hash_password(str(raw["password"])),
            phone=str(raw.get("phone", "")),
            role=UserRole(raw.get("role", UserRole.CLIENT.value)),
            company=raw.get("company"),
        ))
        users_added += 1

    for raw in document.get("projects", []):
        if await store.projects.get_by_id(raw["id"]) is not None:
            continue
        project = _build_project(raw, now)
        await store.projects.create(project)
        owner = await store.users.get_by_id(project.client_id)
        if owner is not None:
            owner.add_project(project.id)
            await store.users.update(owner)
        projects_added += 1

    if users_added or projects_added:
        logger.info("Seeded %d user(s) and %d project(s)", users_added, projects_added)
    return users_added, projects_added


def _build_project(raw: dict[str, Any], now: datetime) -> Project:
    brief_data = raw.get("brief") or {}
    brief = Brief(
        project_title=brief_data.get("project_title", raw["title"]),
        project_location=brief_data.get("project_location", ""),
        project_type=brief_data.get("project_type", ""),
        budget=Decimal(str(brief_data.get("budget", 0))),
        timeline=brief_data.get("timeline", ""),
        requirements=brief_data.get("requirements", ""),
        inspiration_images=list(brief_data.get("inspiration_images", [])),
        submitted_at=now,
    )

    proposal = None
    invoice_amount = None
    proposal_data = raw.get("proposal")
    if proposal_data:
        invoice_amount = Decimal(str(proposal_data["amount"]))
        proposal = Proposal(
            id=proposal_data["id"],
            project_id=raw["id"],
            file_ref=proposal_data.get("file_ref", ""),
            amount=invoice_amount,
            created_by_id=proposal_data["created_by_id"],
            valid_until=now + timedelta(days=int(proposal_data.get("valid_days", 7))),
            status=ProposalStatus(proposal_data.get("status", ProposalStatus.SENT.value)),
            sent_at=now,
        )

    return Project(
        id=raw["id"],
        client_id=raw["client_id"],
        title=raw["title"],
        status=ProjectStatus(raw.get("status", ProjectStatus.APPOINTMENT_NEEDED.value)),
        brief=brief,
        proposal=proposal,
        invoice_amount=invoice_amount,
        payment_status=PaymentStatus(raw.get("payment_status", PaymentStatus.UNPAID.value)),
        percent_complete=int(raw.get("percent_complete", 0)),
        created_at=now,
    )
