from __future__ import annotations

import pytest

from gcm_push.application.builders.message_builder import MessageBuilder
from gcm_push.application.builders.notification_builder import NotificationBuilder
from gcm_push.application.errors import InvalidRequest, UsageError
from gcm_push.domain.value_objects.priority import Priority
from gcm_push.domain.value_objects.target import MulticastTarget, SingleTarget, TopicTarget


def test_new_message_targets_single_registration_id():
    envelope = MessageBuilder("token").build()
    assert envelope.target == SingleTarget(registration_id="token")
    assert envelope.data is None
    assert envelope.notification is None
    assert envelope.priority is None


def test_topic_targets():
    assert MessageBuilder("/topics/news").build().target == TopicTarget(topic="/topics/news")
    assert MessageBuilder().topic("news").build().target == TopicTarget(topic="/topics/news")


def test_registration_ids_replace_single_target():
    envelope = MessageBuilder("token").registration_ids(["id1", "id2"]).build()
    assert envelope.target == MulticastTarget(registration_ids=("id1", "id2"))


def test_single_target_replaces_registration_ids():
    envelope = MessageBuilder().registration_ids(["id1"]).to("token").build()
    assert envelope.target == SingleTarget(registration_id="token")


def test_missing_target_fails_on_build():
    with pytest.raises(InvalidRequest, match="no target"):
        MessageBuilder().build()


def test_empty_registration_ids_leave_no_target():
    with pytest.raises(InvalidRequest):
        MessageBuilder("token").registration_ids([]).build()


def test_too_many_registration_ids_fail_on_build():
    builder = MessageBuilder().registration_ids(f"id{i}" for i in range(1001))
    with pytest.raises(InvalidRequest, match="at most 1000"):
        builder.build()


def test_options_are_set():
    notification = NotificationBuilder("title").finalize()
    envelope = (
        MessageBuilder("token")
        .data({"my": "data"})
        .notification(notification)
        .collapse_key("key")
        .time_to_live(10)
        .priority("high")
        .delay_while_idle(True)
        .dry_run(True)
        .content_available(True)
        .restricted_package_name("com.example")
        .build()
    )
    assert envelope.data["my"] == "data"
    assert envelope.notification is notification
    assert envelope.collapse_key == "key"
    assert envelope.time_to_live == 10
    assert envelope.priority is Priority.HIGH
    assert envelope.delay_while_idle is True
    assert envelope.dry_run is True
    assert envelope.content_available is True
    assert envelope.restricted_package_name == "com.example"


def test_notification_builder_is_finalized_on_behalf_of_caller():
    builder = NotificationBuilder("title").body("body")
    envelope = MessageBuilder("token").notification(builder).build()
    assert envelope.notification.body == "body"
    assert builder.finalized


def test_data_replaces_previous_payload():
    envelope = MessageBuilder("token").data({"a": "1"}).data({"b": "2"}).build()
    assert envelope.data.to_dict() == {"b": "2"}


@pytest.mark.parametrize(
    "call",
    [
        lambda b: b.priority("urgent"),
        lambda b: b.time_to_live(-1),
        lambda b: b.time_to_live(2_419_201),
        lambda b: b.time_to_live(True),
        lambda b: b.dry_run("yes"),
        lambda b: b.collapse_key(""),
        lambda b: b.data({"from": "me"}),
        lambda b: b.data({"big": "x" * 5000}),
        lambda b: b.to(""),
        lambda b: b.registration_ids("token"),
    ],
)
def test_invalid_values_are_rejected(call):
    with pytest.raises(InvalidRequest):
        call(MessageBuilder("token"))


def test_builder_is_consumed_by_build():
    builder = MessageBuilder("token")
    builder.build()
    with pytest.raises(UsageError):
        builder.dry_run(True)
    with pytest.raises(UsageError):
        builder.build()


def test_failed_build_keeps_builder_usable():
    builder = MessageBuilder()
    with pytest.raises(InvalidRequest):
        builder.build()
    assert builder.to("token").build().target == SingleTarget(registration_id="token")
