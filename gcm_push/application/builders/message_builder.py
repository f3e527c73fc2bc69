from __future__ import annotations

from typing import Any, Iterable, Mapping

from gcm_push.application.builders.notification_builder import NotificationBuilder
from gcm_push.application.errors import InvalidRequest, UsageError
from gcm_push.application.interfaces.transport import Transport
from gcm_push.application.use_cases import send_message
from gcm_push.domain.models.payload import (
    MAX_TIME_TO_LIVE,
    DataPayload,
    Envelope,
    NotificationPayload,
)
from gcm_push.domain.models.send_result import SendResult
from gcm_push.domain.value_objects.priority import Priority
from gcm_push.domain.value_objects.target import (
    MulticastTarget,
    Target,
    TopicTarget,
    target_for,
)


class MessageBuilder:
    """Collects the fields of one message and turns them into an `Envelope`.

    A message goes to exactly one of: a single registration id, a topic
    (``/topics/<name>``) or a list of up to 1000 registration ids. Setting one
    target mode clears the others.
    """

    def __init__(self, to: str | None = None) -> None:
        self._target: Target | None = None
        self._registration_ids: list[str] | None = None
        self._data: DataPayload | None = None
        self._notification: NotificationPayload | None = None
        self._collapse_key: str | None = None
        self._time_to_live: int | None = None
        self._priority: Priority | None = None
        self._delay_while_idle: bool | None = None
        self._dry_run: bool | None = None
        self._content_available: bool | None = None
        self._restricted_package_name: str | None = None
        self._consumed = False
        if to is not None:
            self.to(to)

    def _ensure_open(self) -> None:
        if self._consumed:
            raise UsageError("MessageBuilder was already built")

    # Targets

    def to(self, to: str) -> MessageBuilder:
        """Send to a single registration id, or to a topic when `to` starts with /topics/."""
        self._ensure_open()
        if not isinstance(to, str) or not to.strip():
            raise InvalidRequest("Target must be a non-empty string")
        self._target = target_for(to)
        self._registration_ids = None
        return self

    def topic(self, name: str) -> MessageBuilder:
        self._ensure_open()
        if not isinstance(name, str) or not name.strip():
            raise InvalidRequest("Topic name must be a non-empty string")
        self._target = TopicTarget.from_name(name)
        self._registration_ids = None
        return self

    def registration_ids(self, ids: Iterable[str]) -> MessageBuilder:
        self._ensure_open()
        if isinstance(ids, str):
            raise InvalidRequest("registration_ids expects a sequence of ids, not a string")
        self._registration_ids = list(ids)
        self._target = None
        return self

    # Payloads

    def data(self, data: Mapping[str, Any]) -> MessageBuilder:
        self._ensure_open()
        try:
            self._data = DataPayload.from_mapping(data)
        except ValueError as exc:
            raise InvalidRequest(str(exc)) from exc
        return self

    def notification(self, notification: NotificationPayload | NotificationBuilder) -> MessageBuilder:
        self._ensure_open()
        if isinstance(notification, NotificationBuilder):
            notification = notification.finalize()
        if not isinstance(notification, NotificationPayload):
            raise InvalidRequest("notification expects a NotificationPayload")
        self._notification = notification
        return self

    # Options

    def collapse_key(self, collapse_key: str) -> MessageBuilder:
        """Messages sharing a collapse key replace each other while pending."""
        self._ensure_open()
        if not isinstance(collapse_key, str) or not collapse_key:
            raise InvalidRequest("collapse_key must be a non-empty string")
        self._collapse_key = collapse_key
        return self

    def time_to_live(self, seconds: int) -> MessageBuilder:
        """How long the message is kept while the device is offline. Maximum is four weeks."""
        self._ensure_open()
        if isinstance(seconds, bool) or not isinstance(seconds, int):
            raise InvalidRequest("time_to_live must be an integer number of seconds")
        if not 0 <= seconds <= MAX_TIME_TO_LIVE:
            raise InvalidRequest(f"time_to_live must be between 0 and {MAX_TIME_TO_LIVE} seconds")
        self._time_to_live = seconds
        return self

    def priority(self, priority: Priority | str) -> MessageBuilder:
        self._ensure_open()
        try:
            self._priority = Priority(priority)
        except ValueError as exc:
            raise InvalidRequest(f"priority must be 'normal' or 'high', got {priority!r}") from exc
        return self

    def delay_while_idle(self, delay_while_idle: bool) -> MessageBuilder:
        return self._set_flag("delay_while_idle", delay_while_idle)

    def dry_run(self, dry_run: bool) -> MessageBuilder:
        """Validate the request without delivering it."""
        return self._set_flag("dry_run", dry_run)

    def content_available(self, content_available: bool) -> MessageBuilder:
        """Wake an inactive iOS app."""
        return self._set_flag("content_available", content_available)

    def restricted_package_name(self, package_name: str) -> MessageBuilder:
        self._ensure_open()
        if not isinstance(package_name, str) or not package_name:
            raise InvalidRequest("restricted_package_name must be a non-empty string")
        self._restricted_package_name = package_name
        return self

    def _set_flag(self, name: str, value: bool) -> MessageBuilder:
        self._ensure_open()
        if not isinstance(value, bool):
            raise InvalidRequest(f"{name} must be a boolean")
        setattr(self, f"_{name}", value)
        return self

    # Finalization

    def _resolve_target(self) -> Target:
        if self._registration_ids is not None:
            try:
                return MulticastTarget(registration_ids=tuple(self._registration_ids))
            except ValueError as exc:
                raise InvalidRequest(str(exc)) from exc
        if self._target is None:
            raise InvalidRequest("Message has no target")
        return self._target

    def build(self) -> Envelope:
        self._ensure_open()
        target = self._resolve_target()
        envelope = Envelope(
            target=target,
            data=self._data,
            notification=self._notification,
            collapse_key=self._collapse_key,
            time_to_live=self._time_to_live,
            priority=self._priority,
            delay_while_idle=self._delay_while_idle,
            dry_run=self._dry_run,
            content_available=self._content_available,
            restricted_package_name=self._restricted_package_name,
        )
        self._consumed = True
        return envelope

    async def send(
        self,
        api_key: str,
        transport: Transport,
        *,
        endpoint: str | None = None,
        default_retry_after: float | None = None,
    ) -> SendResult:
        """Build the envelope and send it. Construction errors are raised before any network call."""
        envelope = self.build()
        options: dict[str, Any] = {}
        if endpoint is not None:
            options["endpoint"] = endpoint
        if default_retry_after is not None:
            options["default_retry_after"] = default_retry_after
        return await send_message.execute(
            envelope, api_key=api_key, transport=transport, **options
        )
