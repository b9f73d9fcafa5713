"""Abstract record-sync interface — port for external spreadsheet logging.

Adapters push signups and project briefs to an external sheet. Calls are
best-effort: services log failures and carry on.
"""

from abc import ABC, abstractmethod

from atelier.domain.entities import Brief, User


class RecordSyncGateway(ABC):
    """Port — defines what the application layer needs from a sync target."""

    @property
    @abstractmethod
    def target_name(self) -> str:
        """Short name of the sync target (e.g. 'log', 'webhook')."""
        ...

    @abstractmethod
    async def sync_client(self, user: User) -> None:
        """Record a newly registered client.

        Raises:
            ExternalServiceError: if the target rejects or cannot be reached.
        """
        ...

    @abstractmethod
    async def sync_project_brief(self, user: User, brief: Brief) -> None:
        """Record a newly submitted project brief.

        Raises:
            ExternalServiceError: if the target rejects or cannot be reached.
        """
        ...
