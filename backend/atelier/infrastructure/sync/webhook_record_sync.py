"""Record sync adapter posting JSON rows to a spreadsheet web-app endpoint.

The endpoint receives one POST per record with a ``type`` discriminator
(``client`` or ``brief``) and appends it to the sheet.
"""

import logging
from datetime import datetime, timezone
from typing import Any

import httpx

from atelier.application.interfaces import RecordSyncGateway
from atelier.domain.entities import Brief, User
from atelier.domain.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)


class WebhookRecordSync(RecordSyncGateway):
    """Infrastructure adapter — pushes records to an HTTP webhook with httpx."""

    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._url = url
        self._timeout = timeout
        self._http_client = http_client

    @property
    def target_name(self) -> str:
        return "webhook"

    async def _get_client(self) -> httpx.AsyncClient:
        if self._http_client is not None:
            return self._http_client
        return httpx.AsyncClient(timeout=self._timeout)

    async def _post(self, payload: dict[str, Any]) -> None:
        client = await self._get_client()
        should_close = self._http_client is None

        try:
            response = await client.post(self._url, json=payload)
            if response.status_code >= 400:
                raise ExternalServiceError(
                    self.target_name, response.text[:200] or "request rejected", response.status_code,
                )
            logger.debug("Synced %s record (%d)", payload["type"], response.status_code)
        except httpx.HTTPError as exc:
            raise ExternalServiceError(self.target_name, str(exc) or type(exc).__name__) from exc
        finally:
            if should_close:
                await client.aclose()

    async def sync_client(self, user: User) -> None:
        await self._post({
            "type": "client",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "name": user.name,
            "email": user.email,
            "phone": user.phone,
            "role": user.role.value,
        })

    async def sync_project_brief(self, user: User, brief: Brief) -> None:
        await self._post({
            "type": "brief",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "client_email": user.email,
            "project_title": brief.project_title,
            "location": brief.project_location,
            "project_type": brief.project_type,
            "budget": str(brief.budget),
            "timeline": brief.timeline,
            "requirements": brief.requirements,
        })
