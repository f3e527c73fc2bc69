from __future__ import annotations

import json
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Iterator, Mapping

from gcm_push.domain.value_objects.priority import Priority
from gcm_push.domain.value_objects.target import Target

MAX_DATA_PAYLOAD_BYTES = 4096
MAX_TIME_TO_LIVE = 2_419_200  # four weeks
RESERVED_DATA_KEYS = {"from"}
RESERVED_DATA_KEY_PREFIXES = ("google", "gcm")


@dataclass(frozen=True, slots=True, eq=False)
class DataPayload(Mapping[str, str]):
    """Custom key/value pairs delivered to the client app.

    Compares equal to any mapping with the same items.
    """

    entries: Mapping[str, str]

    def __post_init__(self) -> None:
        for key, value in self.entries.items():
            if not isinstance(key, str) or not key:
                raise ValueError(f"Data keys must be non-empty strings, got {key!r}")
            if key in RESERVED_DATA_KEYS or key.startswith(RESERVED_DATA_KEY_PREFIXES):
                raise ValueError(f"Data key {key!r} is reserved")
            if not isinstance(value, str):
                raise ValueError(f"Data value for {key!r} must be a string")
        size = self.serialized_size(self.entries)
        if size > MAX_DATA_PAYLOAD_BYTES:
            raise ValueError(
                f"Data payload is {size} bytes, limit is {MAX_DATA_PAYLOAD_BYTES} bytes"
            )
        object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> DataPayload:
        return cls(entries=dict(data))

    @staticmethod
    def serialized_size(entries: Mapping[str, Any]) -> int:
        return len(
            json.dumps(dict(entries), separators=(",", ":"), ensure_ascii=False).encode("utf-8")
        )

    def __getitem__(self, key: str) -> str:
        return self.entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __hash__(self) -> int:
        return hash(frozenset(self.entries.items()))

    def to_dict(self) -> dict[str, str]:
        return dict(self.entries)


@dataclass(frozen=True, slots=True)
class NotificationPayload:
    title: str
    body: str | None = None
    icon: str | None = None
    sound: str | None = None
    badge: str | None = None
    tag: str | None = None
    color: str | None = None
    click_action: str | None = None
    body_loc_key: str | None = None
    body_loc_args: tuple[str, ...] | None = None
    title_loc_key: str | None = None
    title_loc_args: tuple[str, ...] | None = None

    def __post_init__(self) -> None:
        if not self.title or not self.title.strip():
            raise ValueError("Notification title is required")


@dataclass(frozen=True, slots=True)
class Envelope:
    """A finalized message, ready to be encoded and sent."""

    target: Target
    data: DataPayload | None = None
    notification: NotificationPayload | None = None
    collapse_key: str | None = None
    time_to_live: int | None = None
    priority: Priority | None = None
    delay_while_idle: bool | None = None
    dry_run: bool | None = None
    content_available: bool | None = None
    restricted_package_name: str | None = None

    def __post_init__(self) -> None:
        if self.time_to_live is not None and not 0 <= self.time_to_live <= MAX_TIME_TO_LIVE:
            raise ValueError(
                f"time_to_live must be between 0 and {MAX_TIME_TO_LIVE} seconds"
            )
