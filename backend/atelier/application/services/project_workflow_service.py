"""Project workflow service — the use-case layer around the state machine.

Each operation follows the same shape: load the project, authorize the
actor against it, compute the next state with a pure transition from
``atelier.domain.workflow``, and write the full record back. Validation and
authorization failures raise before anything is written.
"""

import logging
from collections.abc import Callable
from datetime import date, datetime, timezone
from decimal import Decimal

from atelier.application.interfaces import EntityStore, RecordSyncGateway
from atelier.application.schemas.project import BriefCreate, SiteUpdateCreate
from atelier.domain import workflow
from atelier.domain.access_policy import Action, authorize
from atelier.domain.entities import ApprovalQueue, Brief, Project, User, resolve_availability
from atelier.domain.exceptions import EntityNotFoundError, UnauthorizedActionError

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ProjectWorkflowService:
    """Drives projects through brief → appointment → proposal → payment →
    concept → construction → handover.

    Usage:
        service = ProjectWorkflowService(store, record_sync=LoggingRecordSync())
        project = await service.create_project(client, brief)
        project = await service.book_appointment(client, project.id, day, "10:00")
    """

    def __init__(
        self,
        store: EntityStore,
        record_sync: RecordSyncGateway | None = None,
        *,
        proposal_validity_days: int = 7,
        clock: Clock = _utcnow,
    ):
        self._store = store
        self._record_sync = record_sync
        self._proposal_validity_days = proposal_validity_days
        self._clock = clock

    # ── Queries ──────────────────────────────────────────────────────

    async def list_projects(self, actor: User) -> list[Project]:
        """Staff see every project; clients see only their own."""
        if actor.is_staff:
            return await self._store.projects.get_all()
        return await self._store.projects.get_all(client_id=actor.id)

    async def get_project(self, actor: User, project_id: str) -> Project:
        return await self._load(actor, Action.VIEW_PROJECT, project_id)

    async def get_approval_queue(self, actor: User) -> ApprovalQueue:
        self._authorize(actor, Action.VIEW_APPROVAL_QUEUE)
        projects = await self._store.projects.get_all()
        return ApprovalQueue.from_projects(projects)

    # ── Brief & appointment ──────────────────────────────────────────

    async def create_project(self, actor: User, data: BriefCreate) -> Project:
        self._authorize(actor, Action.CREATE_PROJECT)
        brief = Brief(
            project_title=data.project_title,
            project_location=data.project_location,
            project_type=data.project_type,
            budget=data.budget,
            timeline=data.timeline,
            requirements=data.requirements,
            inspiration_images=list(data.inspiration_images),
            submitted_at=self._clock(),
        )
        project = workflow.open_project(actor.id, brief)
        project.created_at = brief.submitted_at
        created = await self._store.projects.create(project)

        owner = await self._store.users.get_by_id(actor.id)
        if owner is None:
            raise EntityNotFoundError("User", actor.id)
        owner.add_project(created.id)
        await self._store.users.update(owner)
        logger.info("Client %s opened project %s (%s)", actor.id, created.id, created.title)

        if self._record_sync is not None:
            try:
                await self._record_sync.sync_project_brief(owner, brief)
            except Exception:
                logger.exception("Record sync failed for project %s — continuing", created.id)
        return created

    async def book_appointment(
        self,
        actor: User,
        project_id: str,
        day: date,
        slot: str,
        notes: str | None = None,
    ) -> Project:
        project = await self._load(actor, Action.BOOK_APPOINTMENT, project_id)
        overrides = await self._store.availability.get_all()
        availability = resolve_availability(day, overrides)
        updated = workflow.book_appointment(project, actor, day, slot, availability, notes)
        return await self._save(actor, Action.BOOK_APPOINTMENT, project, updated)

    async def confirm_appointment(
        self, actor: User, project_id: str, notes: str | None = None
    ) -> Project:
        project = await self._load(actor, Action.CONFIRM_APPOINTMENT, project_id)
        updated = workflow.confirm_appointment(project, actor, notes)
        return await self._save(actor, Action.CONFIRM_APPOINTMENT, project, updated)

    # ── Proposal ─────────────────────────────────────────────────────

    async def send_proposal(
        self, actor: User, project_id: str, amount: Decimal, file_ref: str
    ) -> Project:
        project = await self._load(actor, Action.SEND_PROPOSAL, project_id)
        updated = workflow.send_proposal(
            project, actor, amount, file_ref, self._clock(), self._proposal_validity_days,
        )
        return await self._save(actor, Action.SEND_PROPOSAL, project, updated)

    async def approve_proposal(self, actor: User, project_id: str) -> Project:
        project = await self._load(actor, Action.APPROVE_PROPOSAL, project_id)
        updated = workflow.approve_proposal(project)
        return await self._save(actor, Action.APPROVE_PROPOSAL, project, updated)

    async def request_proposal_revision(self, actor: User, project_id: str, notes: str) -> Project:
        project = await self._load(actor, Action.REQUEST_PROPOSAL_REVISION, project_id)
        updated = workflow.request_proposal_revision(project, notes)
        return await self._save(actor, Action.REQUEST_PROPOSAL_REVISION, project, updated)

    async def accept_proposal(self, actor: User, project_id: str) -> Project:
        project = await self._load(actor, Action.ACCEPT_PROPOSAL, project_id)
        updated = workflow.accept_proposal(project)
        return await self._save(actor, Action.ACCEPT_PROPOSAL, project, updated)

    # ── Payment ──────────────────────────────────────────────────────

    async def record_payment(self, actor: User, project_id: str, amount: Decimal) -> Project:
        project = await self._load(actor, Action.RECORD_PAYMENT, project_id)
        updated = workflow.record_payment(project, amount)
        if project.invoice_amount is not None and amount != project.invoice_amount:
            logger.warning(
                "Payment of %s on project %s differs from invoice %s",
                amount, project_id, project.invoice_amount,
            )
        return await self._save(actor, Action.RECORD_PAYMENT, project, updated)

    async def verify_payment(self, actor: User, project_id: str) -> Project:
        project = await self._load(actor, Action.VERIFY_PAYMENT, project_id)
        updated = workflow.verify_payment(project)
        return await self._save(actor, Action.VERIFY_PAYMENT, project, updated)

    async def reject_payment(self, actor: User, project_id: str) -> Project:
        project = await self._load(actor, Action.REJECT_PAYMENT, project_id)
        updated = workflow.reject_payment(project)
        return await self._save(actor, Action.REJECT_PAYMENT, project, updated)

    # ── Concept ──────────────────────────────────────────────────────

    async def share_concept(
        self, actor: User, project_id: str, files: list[str], link: str | None
    ) -> Project:
        project = await self._load(actor, Action.SHARE_CONCEPT, project_id)
        updated = workflow.share_concept(project, actor, files, link)
        return await self._save(actor, Action.SHARE_CONCEPT, project, updated)

    async def approve_concept(self, actor: User, project_id: str) -> Project:
        project = await self._load(actor, Action.APPROVE_CONCEPT, project_id)
        updated = workflow.approve_concept(project)
        return await self._save(actor, Action.APPROVE_CONCEPT, project, updated)

    async def approve_client_concept(self, actor: User, project_id: str) -> Project:
        project = await self._load(actor, Action.APPROVE_CLIENT_CONCEPT, project_id)
        updated = workflow.approve_client_concept(project)
        return await self._save(actor, Action.APPROVE_CLIENT_CONCEPT, project, updated)

    async def request_concept_changes(
        self, actor: User, project_id: str, notes: str, files: list[str] | None = None
    ) -> Project:
        project = await self._load(actor, Action.REQUEST_CONCEPT_CHANGES, project_id)
        updated = workflow.request_concept_changes(project, notes, files)
        return await self._save(actor, Action.REQUEST_CONCEPT_CHANGES, project, updated)

    # ── Construction & handover ──────────────────────────────────────

    async def post_site_update(
        self, actor: User, project_id: str, data: SiteUpdateCreate
    ) -> Project:
        project = await self._load(actor, Action.POST_SITE_UPDATE, project_id)
        updated = workflow.post_site_update(
            project,
            actor,
            title=data.title,
            progress_percentage=data.progress_percentage,
            now=self._clock(),
            notes=data.notes,
            image_refs=data.image_refs,
        )
        self._warn_on_regression(project, updated)
        return await self._save(actor, Action.POST_SITE_UPDATE, project, updated)

    async def approve_site_update(self, actor: User, project_id: str, update_id: str) -> Project:
        project = await self._load(actor, Action.APPROVE_SITE_UPDATE, project_id)
        updated = workflow.approve_site_update(project, update_id)
        self._warn_on_regression(project, updated)
        return await self._save(actor, Action.APPROVE_SITE_UPDATE, project, updated)

    async def mark_handover(
        self, actor: User, project_id: str, handover_file: str | None = None
    ) -> Project:
        project = await self._load(actor, Action.MARK_HANDOVER, project_id)
        updated = workflow.mark_handover(project, handover_file)
        return await self._save(actor, Action.MARK_HANDOVER, project, updated)

    async def finalize_handover(self, actor: User, project_id: str) -> Project:
        project = await self._load(actor, Action.FINALIZE_HANDOVER, project_id)
        updated = workflow.finalize_handover(project, self._clock())
        return await self._save(actor, Action.FINALIZE_HANDOVER, project, updated)

    # ── Helpers ──────────────────────────────────────────────────────

    @staticmethod
    def _authorize(actor: User, action: Action, project: Project | None = None) -> None:
        decision = authorize(actor, action, project)
        if not decision.allowed:
            logger.warning(
                "Denied %s for user %s on project %s: %s",
                action.value, actor.id, project.id if project else "-", decision.reason,
            )
            raise UnauthorizedActionError(action.value, decision.reason or "denied")

    async def _load(self, actor: User, action: Action, project_id: str) -> Project:
        project = await self._store.projects.get_by_id(project_id)
        if project is None:
            raise EntityNotFoundError("Project", project_id)
        self._authorize(actor, action, project)
        return project

    async def _save(self, actor: User, action: Action, before: Project, after: Project) -> Project:
        if after == before:
            logger.debug("%s on project %s was a no-op", action.value, before.id)
            return after
        saved = await self._store.projects.update(after)
        if before.status is not saved.status:
            logger.info(
                "Project %s: %s → %s (%s by %s)",
                saved.id, before.status.value, saved.status.value, action.value, actor.id,
            )
        else:
            logger.info("Project %s: %s by %s", saved.id, action.value, actor.id)
        return saved

    @staticmethod
    def _warn_on_regression(before: Project, after: Project) -> None:
        if after.percent_complete < before.percent_complete:
            logger.warning(
                "Project %s progress regressed from %d%% to %d%%",
                before.id, before.percent_complete, after.percent_complete,
            )
