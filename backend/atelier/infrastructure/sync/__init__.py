"""Record sync infrastructure package."""

from .logging_record_sync import LoggingRecordSync
from .webhook_record_sync import WebhookRecordSync

__all__ = ["LoggingRecordSync", "WebhookRecordSync"]
