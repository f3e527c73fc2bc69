from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from gcm_push.domain.value_objects.device_error import DeviceErrorCode


@dataclass(frozen=True, slots=True)
class Delivered:
    registration_id: str | None
    message_id: str


@dataclass(frozen=True, slots=True)
class CanonicalIdUpdate:
    """Delivered, but the recipient has a newer registration id to store."""

    registration_id: str | None
    message_id: str
    canonical_id: str


@dataclass(frozen=True, slots=True)
class DeviceFailure:
    registration_id: str | None
    error: DeviceErrorCode
    raw_error: str

    @property
    def should_remove_registration(self) -> bool:
        return self.error.should_remove_registration()

    @property
    def retryable(self) -> bool:
        return self.error.is_retryable()


ResultItem = Union[Delivered, CanonicalIdUpdate, DeviceFailure]


@dataclass(frozen=True, slots=True)
class SendResult:
    """Decoded 200 response. `results` follows the order of the request targets."""

    multicast_id: int | None
    success: int
    failure: int
    canonical_ids: int
    results: tuple[ResultItem, ...]
    retry_after: float | None = None

    def failures(self) -> list[DeviceFailure]:
        return [item for item in self.results if isinstance(item, DeviceFailure)]

    def canonical_updates(self) -> list[tuple[str, str]]:
        return [
            (item.registration_id, item.canonical_id)
            for item in self.results
            if isinstance(item, CanonicalIdUpdate) and item.registration_id is not None
        ]

    def registration_ids_to_remove(self) -> list[str]:
        return [
            item.registration_id
            for item in self.failures()
            if item.should_remove_registration and item.registration_id is not None
        ]

    def retryable_registration_ids(self) -> list[str]:
        return [
            item.registration_id
            for item in self.failures()
            if item.retryable and item.registration_id is not None
        ]
