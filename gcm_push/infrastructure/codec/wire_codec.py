"""Encoding of envelopes into request bodies and decoding of API responses."""

from __future__ import annotations

import json
from typing import Any

from pydantic import ValidationError

from gcm_push.application.errors import MalformedResponse
from gcm_push.domain.models.payload import Envelope, NotificationPayload
from gcm_push.domain.models.send_result import (
    CanonicalIdUpdate,
    Delivered,
    DeviceFailure,
    ResultItem,
    SendResult,
)
from gcm_push.domain.value_objects.device_error import DeviceErrorCode
from gcm_push.domain.value_objects.target import MulticastTarget, SingleTarget, TopicTarget
from gcm_push.infrastructure.codec.schemas import WireResponse, WireResult

_NOTIFICATION_FIELDS = (
    "title",
    "body",
    "icon",
    "sound",
    "badge",
    "tag",
    "color",
    "click_action",
    "body_loc_key",
    "body_loc_args",
    "title_loc_key",
    "title_loc_args",
)


def encode_notification(notification: NotificationPayload) -> dict[str, Any]:
    payload: dict[str, Any] = {}
    for name in _NOTIFICATION_FIELDS:
        value = getattr(notification, name)
        if value is None:
            continue
        payload[name] = list(value) if isinstance(value, tuple) else value
    return payload


def encode_envelope(envelope: Envelope) -> dict[str, Any]:
    """Build the JSON object for the request. Unset fields are left out, never sent as null."""
    payload: dict[str, Any] = {}
    target = envelope.target
    if isinstance(target, MulticastTarget):
        payload["registration_ids"] = list(target.registration_ids)
    elif isinstance(target, TopicTarget):
        payload["to"] = target.topic
    else:
        payload["to"] = target.registration_id

    if envelope.data is not None:
        payload["data"] = envelope.data.to_dict()
    if envelope.notification is not None:
        payload["notification"] = encode_notification(envelope.notification)
    if envelope.collapse_key is not None:
        payload["collapse_key"] = envelope.collapse_key
    if envelope.time_to_live is not None:
        payload["time_to_live"] = envelope.time_to_live
    if envelope.priority is not None:
        payload["priority"] = envelope.priority.value
    if envelope.delay_while_idle is not None:
        payload["delay_while_idle"] = envelope.delay_while_idle
    if envelope.dry_run is not None:
        payload["dry_run"] = envelope.dry_run
    if envelope.content_available is not None:
        payload["content_available"] = envelope.content_available
    if envelope.restricted_package_name is not None:
        payload["restricted_package_name"] = envelope.restricted_package_name
    return payload


def serialize_envelope(envelope: Envelope) -> bytes:
    return json.dumps(
        encode_envelope(envelope), separators=(",", ":"), ensure_ascii=False
    ).encode("utf-8")


def _decode_item(wire: WireResult, registration_id: str | None, index: int) -> ResultItem:
    if wire.error is not None:
        return DeviceFailure(
            registration_id=registration_id,
            error=DeviceErrorCode.from_wire(wire.error),
            raw_error=wire.error,
        )
    if wire.message_id is None:
        raise MalformedResponse(
            f"Result {index} has neither message_id nor error",
            details={"index": index},
        )
    if wire.registration_id is not None:
        return CanonicalIdUpdate(
            registration_id=registration_id,
            message_id=wire.message_id,
            canonical_id=wire.registration_id,
        )
    return Delivered(registration_id=registration_id, message_id=wire.message_id)


def _request_ids(envelope: Envelope) -> list[str | None]:
    target = envelope.target
    if isinstance(target, MulticastTarget):
        return list(target.registration_ids)
    if isinstance(target, SingleTarget):
        return [target.registration_id]
    return [None]


def decode_response(
    body: bytes | str,
    envelope: Envelope,
    *,
    retry_after: float | None = None,
) -> SendResult:
    """Decode a 200 response body for `envelope`.

    Results are matched to the request targets by position, so `results[i]`
    always belongs to `registration_ids[i]`.
    """
    try:
        wire = WireResponse.model_validate_json(body)
    except ValidationError as exc:
        raise MalformedResponse("Response body is not a valid result object", cause=exc) from exc

    ids = _request_ids(envelope)
    wire_results = wire.results if wire.results is not None else [wire.top_level_result()]
    if len(wire_results) != len(ids):
        raise MalformedResponse(
            f"Expected {len(ids)} results, got {len(wire_results)}",
            details={"expected": len(ids), "received": len(wire_results)},
        )

    items = tuple(
        _decode_item(item, registration_id, index)
        for index, (item, registration_id) in enumerate(zip(wire_results, ids))
    )
    failures = sum(isinstance(item, DeviceFailure) for item in items)
    canonical = sum(isinstance(item, CanonicalIdUpdate) for item in items)
    return SendResult(
        multicast_id=wire.multicast_id,
        success=wire.success if wire.success is not None else len(items) - failures,
        failure=wire.failure if wire.failure is not None else failures,
        canonical_ids=wire.canonical_ids if wire.canonical_ids is not None else canonical,
        results=items,
        retry_after=retry_after,
    )
