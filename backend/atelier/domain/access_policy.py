"""Role and ownership rules for portal actions.

Pure functions only: callers pass the actor and (optionally) the project
and get back an ``AccessDecision``. Services turn a denial into
``UnauthorizedActionError`` before touching any state.
"""

from dataclasses import dataclass
from enum import Enum

from .entities import Project, User, UserRole, is_staff

ADMIN_ROLE_GROUP = "admin"


class Action(str, Enum):
    """Every action the portal authorizes."""

    VIEW_PROJECT = "view_project"
    CREATE_PROJECT = "create_project"
    BOOK_APPOINTMENT = "book_appointment"
    CONFIRM_APPOINTMENT = "confirm_appointment"
    SEND_PROPOSAL = "send_proposal"
    APPROVE_PROPOSAL = "approve_proposal"
    REQUEST_PROPOSAL_REVISION = "request_proposal_revision"
    ACCEPT_PROPOSAL = "accept_proposal"
    RECORD_PAYMENT = "record_payment"
    VERIFY_PAYMENT = "verify_payment"
    REJECT_PAYMENT = "reject_payment"
    SHARE_CONCEPT = "share_concept"
    APPROVE_CONCEPT = "approve_concept"
    APPROVE_CLIENT_CONCEPT = "approve_client_concept"
    REQUEST_CONCEPT_CHANGES = "request_concept_changes"
    POST_SITE_UPDATE = "post_site_update"
    APPROVE_SITE_UPDATE = "approve_site_update"
    MARK_HANDOVER = "mark_handover"
    FINALIZE_HANDOVER = "finalize_handover"
    VIEW_APPROVAL_QUEUE = "view_approval_queue"
    ONBOARD_STAFF = "onboard_staff"
    LIST_STAFF = "list_staff"
    EDIT_AVAILABILITY = "edit_availability"


CLIENT_ACTIONS: frozenset[Action] = frozenset({
    Action.CREATE_PROJECT,
    Action.BOOK_APPOINTMENT,
    Action.REQUEST_PROPOSAL_REVISION,
    Action.ACCEPT_PROPOSAL,
    Action.RECORD_PAYMENT,
    Action.APPROVE_CLIENT_CONCEPT,
    Action.REQUEST_CONCEPT_CHANGES,
})

# Any staff role may submit these; non-superadmin submissions stay pending.
STAFF_ACTIONS: frozenset[Action] = frozenset({
    Action.SEND_PROPOSAL,
    Action.SHARE_CONCEPT,
    Action.POST_SITE_UPDATE,
    Action.LIST_STAFF,
})

SUPERADMIN_ACTIONS: frozenset[Action] = frozenset({
    Action.CONFIRM_APPOINTMENT,
    Action.APPROVE_PROPOSAL,
    Action.VERIFY_PAYMENT,
    Action.REJECT_PAYMENT,
    Action.APPROVE_CONCEPT,
    Action.APPROVE_SITE_UPDATE,
    Action.MARK_HANDOVER,
    Action.FINALIZE_HANDOVER,
    Action.VIEW_APPROVAL_QUEUE,
    Action.ONBOARD_STAFF,
    Action.EDIT_AVAILABILITY,
})


@dataclass(frozen=True)
class AccessDecision:
    """Outcome of an authorization check."""

    allowed: bool
    reason: str | None = None

    @classmethod
    def allow(cls) -> "AccessDecision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str) -> "AccessDecision":
        return cls(allowed=False, reason=reason)


def authorize(actor: User, action: Action, project: Project | None = None) -> AccessDecision:
    """Decide whether ``actor`` may perform ``action`` (on ``project``)."""
    # Ownership first: a client never acts on someone else's project.
    if not is_staff(actor.role) and project is not None and project.client_id != actor.id:
        return AccessDecision.deny("clients may only act on their own projects")

    if action is Action.VIEW_PROJECT:
        return AccessDecision.allow()

    if action in CLIENT_ACTIONS:
        if actor.role is not UserRole.CLIENT:
            return AccessDecision.deny("only the owning client may do this")
        return AccessDecision.allow()

    if action in STAFF_ACTIONS:
        if not is_staff(actor.role):
            return AccessDecision.deny("staff role required")
        return AccessDecision.allow()

    if action in SUPERADMIN_ACTIONS:
        if actor.role is not UserRole.SUPERADMIN:
            return AccessDecision.deny("superadmin role required")
        return AccessDecision.allow()

    return AccessDecision.deny(f"unknown action '{action}'")


def can_view(actor: User, project: Project) -> bool:
    return authorize(actor, Action.VIEW_PROJECT, project).allowed


def matches_role_group(user: User, role_group: str) -> bool:
    """Login segmentation: ``admin`` covers all staff, anything else is literal."""
    if role_group == ADMIN_ROLE_GROUP:
        return is_staff(user.role)
    return user.role.value == role_group
