from __future__ import annotations

import logging
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime

from gcm_push.application.errors import (
    GcmError,
    InvalidRequest,
    ServerError,
    TransportError,
    Unauthorized,
)
from gcm_push.application.interfaces.transport import HttpRequest, HttpResponse, Transport
from gcm_push.domain.models.payload import Envelope
from gcm_push.domain.models.send_result import SendResult
from gcm_push.infrastructure.codec.wire_codec import decode_response, serialize_envelope

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://fcm.googleapis.com/fcm/send"
DEFAULT_RETRY_AFTER = 2.0


def build_request(envelope: Envelope, *, api_key: str, endpoint: str) -> HttpRequest:
    return HttpRequest(
        method="POST",
        url=endpoint,
        headers={
            "Authorization": f"key={api_key}",
            "Content-Type": "application/json",
        },
        body=serialize_envelope(envelope),
    )


def parse_retry_after(value: str | None, *, now: datetime | None = None) -> float | None:
    """Seconds to wait according to a Retry-After header (delta seconds or HTTP-date)."""
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    if value.isascii() and value.isdigit():
        return float(value)
    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    return max(0.0, (when - now).total_seconds())


def classify_response(
    response: HttpResponse,
    envelope: Envelope,
    *,
    default_retry_after: float = DEFAULT_RETRY_AFTER,
) -> SendResult:
    status = response.status_code
    if status == 200:
        result = decode_response(
            response.body,
            envelope,
            retry_after=parse_retry_after(response.header("Retry-After")),
        )
        if result.failure or result.canonical_ids:
            logger.info(
                "GCM send partially failed: success=%s failure=%s canonical_ids=%s",
                result.success,
                result.failure,
                result.canonical_ids,
            )
        else:
            logger.debug("GCM sent: multicast_id=%s success=%s", result.multicast_id, result.success)
        return result
    if status == 400:
        logger.error("GCM rejected the request (400): %s", response.text)
        raise InvalidRequest(response.text or "Malformed request", status_code=status)
    if status in (401, 403):
        logger.error("GCM authentication failed (%s)", status)
        raise Unauthorized("API key was rejected", status_code=status)
    if status == 429 or 500 <= status <= 599:
        retry_after = parse_retry_after(response.header("Retry-After"))
        if retry_after is None:
            retry_after = default_retry_after
        logger.warning("GCM unavailable (%s), retry after %ss", status, retry_after)
        raise ServerError(
            f"Server responded with {status}",
            retry_after=retry_after,
            status_code=status,
        )
    logger.error("GCM unexpected status %s: %s", status, response.text)
    raise TransportError(f"Unexpected status {status}", status_code=status)


async def execute(
    envelope: Envelope,
    *,
    api_key: str,
    transport: Transport,
    endpoint: str = DEFAULT_ENDPOINT,
    default_retry_after: float = DEFAULT_RETRY_AFTER,
) -> SendResult:
    """Send `envelope` once.

    Returns the decoded result on HTTP 200, including per-recipient failures.
    Raises a `SendError` subclass when the request as a whole fails. Never retries.
    """
    if not api_key:
        raise Unauthorized("API key is required")
    request = build_request(envelope, api_key=api_key, endpoint=endpoint)
    try:
        response = await transport.execute(request)
    except GcmError:
        raise
    except Exception as exc:
        logger.error("GCM transport failure: %s", exc)
        raise TransportError(f"Transport failed: {exc}", cause=exc) from exc
    return classify_response(response, envelope, default_retry_after=default_retry_after)
