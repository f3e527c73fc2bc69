from __future__ import annotations

from dataclasses import dataclass
from typing import Union

TOPIC_PREFIX = "/topics/"
MAX_MULTICAST_IDS = 1000


@dataclass(frozen=True, slots=True)
class SingleTarget:
    registration_id: str


@dataclass(frozen=True, slots=True)
class TopicTarget:
    topic: str

    @classmethod
    def from_name(cls, name: str) -> TopicTarget:
        if name.startswith(TOPIC_PREFIX):
            return cls(topic=name)
        return cls(topic=f"{TOPIC_PREFIX}{name}")


@dataclass(frozen=True, slots=True)
class MulticastTarget:
    registration_ids: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.registration_ids:
            raise ValueError("Multicast target needs at least one registration id")
        for index, registration_id in enumerate(self.registration_ids):
            if not isinstance(registration_id, str) or not registration_id.strip():
                raise ValueError(
                    f"Registration id at position {index} must be a non-empty string"
                )
        if len(self.registration_ids) > MAX_MULTICAST_IDS:
            raise ValueError(
                f"Multicast target accepts at most {MAX_MULTICAST_IDS} registration ids, "
                f"got {len(self.registration_ids)}"
            )


Target = Union[SingleTarget, TopicTarget, MulticastTarget]


def target_for(to: str) -> SingleTarget | TopicTarget:
    """Pick the target kind for a raw `to` value."""
    if to.startswith(TOPIC_PREFIX):
        return TopicTarget(topic=to)
    return SingleTarget(registration_id=to)
