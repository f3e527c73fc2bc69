from __future__ import annotations

import logging
from typing import Iterable

from gcm_push.application.builders.message_builder import MessageBuilder
from gcm_push.application.builders.notification_builder import NotificationBuilder
from gcm_push.application.errors import Unauthorized
from gcm_push.application.interfaces.transport import Transport
from gcm_push.application.use_cases import send_message
from gcm_push.config.logging import configure_logging
from gcm_push.config.settings import GcmSettings, get_settings
from gcm_push.domain.models.payload import Envelope
from gcm_push.domain.models.send_result import SendResult
from gcm_push.domain.value_objects.priority import Priority
from gcm_push.infrastructure.transport.httpx_transport import HttpxTransport

logger = logging.getLogger(__name__)


class GcmClient:
    """GCM/FCM legacy HTTP sender (server key)."""

    def __init__(
        self,
        api_key: str,
        *,
        transport: Transport | None = None,
        endpoint: str = send_message.DEFAULT_ENDPOINT,
        default_retry_after: float = send_message.DEFAULT_RETRY_AFTER,
    ) -> None:
        self.api_key = api_key
        self.transport = transport or HttpxTransport()
        self.endpoint = endpoint
        self.default_retry_after = default_retry_after

    @classmethod
    def from_settings(
        cls,
        settings: GcmSettings | None = None,
        *,
        transport: Transport | None = None,
        configure_logs: bool = False,
    ) -> GcmClient:
        """Build a client from settings. Logging is only configured when `configure_logs` is set."""
        settings = settings or get_settings()
        if configure_logs:
            configure_logging(settings.log_level)
        api_key = settings.get_api_key()
        if not api_key:
            raise Unauthorized("GCM_API_KEY is not configured")
        return cls(
            api_key,
            transport=transport or HttpxTransport(timeout=settings.timeout_seconds),
            endpoint=settings.endpoint,
            default_retry_after=settings.default_retry_after,
        )

    async def send(self, message: MessageBuilder | Envelope) -> SendResult:
        envelope = message.build() if isinstance(message, MessageBuilder) else message
        return await send_message.execute(
            envelope,
            api_key=self.api_key,
            transport=self.transport,
            endpoint=self.endpoint,
            default_retry_after=self.default_retry_after,
        )

    async def send_to_tokens(
        self,
        *,
        tokens: Iterable[str],
        title: str,
        body: str,
        data: dict | None = None,
    ) -> list[str]:
        """Send a high priority notification to up to 1000 tokens.

        Returns the tokens the API reported as permanently invalid, for the caller
        to disable.
        """
        tokens = list(tokens)
        if not tokens:
            return []
        message = (
            MessageBuilder()
            .registration_ids(tokens)
            .notification(NotificationBuilder(title).body(body))
            .priority(Priority.HIGH)
        )
        if data:
            message.data(data)
        result = await self.send(message)
        for old_id, new_id in result.canonical_updates():
            logger.info("GCM canonical id update: %s -> %s", old_id, new_id)
        for failure in result.failures():
            if not failure.should_remove_registration:
                logger.warning(
                    "GCM delivery failed for %s: %s", failure.registration_id, failure.raw_error
                )
        invalid = result.registration_ids_to_remove()
        if invalid:
            logger.info("GCM reported %d invalid tokens", len(invalid))
        return invalid
