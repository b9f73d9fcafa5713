"""Record sync adapter that only writes to the application log."""

import logging

from atelier.application.interfaces import RecordSyncGateway
from atelier.domain.entities import Brief, User

logger = logging.getLogger(__name__)


class LoggingRecordSync(RecordSyncGateway):
    """Default adapter when no spreadsheet webhook is configured."""

    @property
    def target_name(self) -> str:
        return "log"

    async def sync_client(self, user: User) -> None:
        logger.info(
            "Record sync (client): name=%s email=%s phone=%s role=%s",
            user.name, user.email, user.phone, user.role.value,
        )

    async def sync_project_brief(self, user: User, brief: Brief) -> None:
        logger.info(
            "Record sync (brief): client=%s title=%s location=%s type=%s budget=%s timeline=%s",
            user.email, brief.project_title, brief.project_location,
            brief.project_type, brief.budget, brief.timeline,
        )
