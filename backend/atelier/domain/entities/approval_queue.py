"""Derived view of everything waiting on a superadmin decision."""

from collections.abc import Iterable
from dataclasses import dataclass, field

from .project import Project
from .site_update import SiteUpdate


@dataclass
class PendingSiteUpdate:
    """An unapproved site update together with the project it belongs to."""

    project: Project
    update: SiteUpdate


@dataclass
class ApprovalQueue:
    """Projects with pending items, computed on demand by scanning."""

    proposals: list[Project] = field(default_factory=list)
    concepts: list[Project] = field(default_factory=list)
    site_updates: list[PendingSiteUpdate] = field(default_factory=list)
    payments: list[Project] = field(default_factory=list)
    appointments: list[Project] = field(default_factory=list)

    @property
    def total(self) -> int:
        return (
            len(self.proposals)
            + len(self.concepts)
            + len(self.site_updates)
            + len(self.payments)
            + len(self.appointments)
        )

    @classmethod
    def from_projects(cls, projects: Iterable[Project]) -> "ApprovalQueue":
        queue = cls()
        for project in projects:
            if project.has_pending_proposal:
                queue.proposals.append(project)
            if project.has_pending_concept:
                queue.concepts.append(project)
            if project.has_pending_payment:
                queue.payments.append(project)
            if project.has_pending_appointment:
                queue.appointments.append(project)
            for update in project.pending_updates:
                queue.site_updates.append(PendingSiteUpdate(project=project, update=update))
        return queue
