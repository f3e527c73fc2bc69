from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


def _id_as_str(value: Any) -> Any:
    # ids are numbers on some responses and strings on others (dry runs)
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


class WireResult(BaseModel):
    model_config = ConfigDict(extra="ignore")

    message_id: str | None = None
    registration_id: str | None = None
    error: str | None = None

    @field_validator("message_id", "registration_id", mode="before")
    @classmethod
    def normalize_ids(cls, value: Any) -> Any:
        return _id_as_str(value)


class WireResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    multicast_id: int | None = None
    success: int | None = None
    failure: int | None = None
    canonical_ids: int | None = None
    results: list[WireResult] | None = None
    # Flat single-target / topic shape
    message_id: str | None = None
    registration_id: str | None = None
    error: str | None = None

    @field_validator("message_id", "registration_id", mode="before")
    @classmethod
    def normalize_ids(cls, value: Any) -> Any:
        return _id_as_str(value)

    def top_level_result(self) -> WireResult:
        return WireResult(
            message_id=self.message_id,
            registration_id=self.registration_id,
            error=self.error,
        )
