from __future__ import annotations

from typing import Any, Sequence

from gcm_push.application.errors import InvalidRequest, UsageError
from gcm_push.domain.models.payload import NotificationPayload


class NotificationBuilder:
    """Builds a `NotificationPayload`.

    Every setter overwrites one optional field and returns the builder, so calls
    can be chained::

        notification = (
            NotificationBuilder("India vs. Australia")
            .body("3 runs to win in 1 ball")
            .finalize()
        )

    The builder is consumed by `finalize()`; using it afterwards raises
    `UsageError`.
    """

    def __init__(self, title: str) -> None:
        if not isinstance(title, str) or not title.strip():
            raise InvalidRequest("Notification title is required")
        self._fields: dict[str, Any] = {"title": title}
        self._finalized = False

    def _set(self, name: str, value: Any) -> NotificationBuilder:
        if self._finalized:
            raise UsageError("NotificationBuilder was already finalized")
        self._fields[name] = value
        return self

    def body(self, body: str) -> NotificationBuilder:
        return self._set("body", body)

    def icon(self, icon: str) -> NotificationBuilder:
        return self._set("icon", icon)

    def sound(self, sound: str) -> NotificationBuilder:
        return self._set("sound", sound)

    def badge(self, badge: str) -> NotificationBuilder:
        """Badge shown on the app icon (iOS)."""
        return self._set("badge", badge)

    def tag(self, tag: str) -> NotificationBuilder:
        """Notifications sharing a tag replace each other on the device."""
        return self._set("tag", tag)

    def color(self, color: str) -> NotificationBuilder:
        """Icon color in #rrggbb format."""
        return self._set("color", color)

    def click_action(self, click_action: str) -> NotificationBuilder:
        return self._set("click_action", click_action)

    def body_loc_key(self, body_loc_key: str) -> NotificationBuilder:
        return self._set("body_loc_key", body_loc_key)

    def body_loc_args(self, body_loc_args: Sequence[str]) -> NotificationBuilder:
        return self._set("body_loc_args", _loc_args(body_loc_args))

    def title_loc_key(self, title_loc_key: str) -> NotificationBuilder:
        return self._set("title_loc_key", title_loc_key)

    def title_loc_args(self, title_loc_args: Sequence[str]) -> NotificationBuilder:
        return self._set("title_loc_args", _loc_args(title_loc_args))

    @property
    def finalized(self) -> bool:
        return self._finalized

    def finalize(self) -> NotificationPayload:
        if self._finalized:
            raise UsageError("NotificationBuilder was already finalized")
        self._finalized = True
        return NotificationPayload(**self._fields)


def _loc_args(args: Sequence[str]) -> tuple[str, ...]:
    if isinstance(args, str):
        raise InvalidRequest("Localization args must be a sequence of strings, not a string")
    return tuple(str(arg) for arg in args)
