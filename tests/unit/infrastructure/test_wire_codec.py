from __future__ import annotations

import json

import pytest

from gcm_push.application.builders.message_builder import MessageBuilder
from gcm_push.application.builders.notification_builder import NotificationBuilder
from gcm_push.application.errors import MalformedResponse
from gcm_push.domain.models.send_result import CanonicalIdUpdate, Delivered, DeviceFailure
from gcm_push.domain.value_objects.device_error import DeviceErrorCode
from gcm_push.infrastructure.codec.wire_codec import (
    decode_response,
    encode_envelope,
    encode_notification,
    serialize_envelope,
)


def test_minimal_envelope_omits_unset_fields():
    assert encode_envelope(MessageBuilder("token").build()) == {"to": "token"}


def test_full_envelope_encoding():
    envelope = (
        MessageBuilder()
        .registration_ids(["a", "b"])
        .data({"k": "v"})
        .notification(NotificationBuilder("title").body("body"))
        .collapse_key("score")
        .time_to_live(0)
        .priority("normal")
        .delay_while_idle(False)
        .dry_run(True)
        .content_available(True)
        .restricted_package_name("com.example")
        .build()
    )
    assert encode_envelope(envelope) == {
        "registration_ids": ["a", "b"],
        "data": {"k": "v"},
        "notification": {"title": "title", "body": "body"},
        "collapse_key": "score",
        "time_to_live": 0,
        "priority": "normal",
        "delay_while_idle": False,
        "dry_run": True,
        "content_available": True,
        "restricted_package_name": "com.example",
    }


def test_topic_uses_to_field():
    assert encode_envelope(MessageBuilder().topic("news").build()) == {"to": "/topics/news"}


def test_notification_loc_args_are_lists():
    nm = NotificationBuilder("title").body_loc_args(["args"]).finalize()
    assert encode_notification(nm) == {"title": "title", "body_loc_args": ["args"]}


def test_serialize_envelope_is_compact_utf8_json():
    envelope = MessageBuilder("token").data({"msg": "¡hola!"}).build()
    body = serialize_envelope(envelope)
    assert isinstance(body, bytes)
    assert json.loads(body.decode("utf-8")) == {"to": "token", "data": {"msg": "¡hola!"}}
    assert b": " not in body


def test_flat_single_target_response_becomes_one_item():
    envelope = MessageBuilder("/topics/news").build()
    result = decode_response(b'{"message_id": 1023456}', envelope)
    assert result.results == (Delivered(registration_id=None, message_id="1023456"),)
    assert result.success == 1
    assert result.failure == 0
    assert result.multicast_id is None


def test_flat_error_response():
    envelope = MessageBuilder("/topics/news").build()
    result = decode_response('{"error": "TopicsMessageRateExceeded"}', envelope)
    (item,) = result.results
    assert isinstance(item, DeviceFailure)
    assert item.error is DeviceErrorCode.TOPICS_MESSAGE_RATE_EXCEEDED
    assert item.retryable
    assert result.failure == 1


def test_multicast_results_stay_aligned_with_registration_ids():
    ids = ["id0", "id1", "id2", "id3"]
    envelope = MessageBuilder().registration_ids(ids).build()
    body = {
        "multicast_id": 216,
        "success": 3,
        "failure": 1,
        "canonical_ids": 1,
        "results": [
            {"message_id": "1:0408"},
            {"error": "Unavailable"},
            {"message_id": "1:1516", "registration_id": "new-id2"},
            {"message_id": 2342},
        ],
    }
    result = decode_response(json.dumps(body), envelope)

    assert len(result.results) == len(ids)
    assert [item.registration_id for item in result.results] == ids
    assert result.results[0] == Delivered(registration_id="id0", message_id="1:0408")
    assert isinstance(result.results[1], DeviceFailure)
    assert result.results[2] == CanonicalIdUpdate(
        registration_id="id2", message_id="1:1516", canonical_id="new-id2"
    )
    assert result.results[3] == Delivered(registration_id="id3", message_id="2342")
    assert result.multicast_id == 216
    assert (result.success, result.failure, result.canonical_ids) == (3, 1, 1)
    assert result.canonical_updates() == [("id2", "new-id2")]


def test_unknown_error_code_is_not_fatal():
    envelope = MessageBuilder("token").build()
    result = decode_response('{"results": [{"error": "BrandNewError"}]}', envelope)
    (item,) = result.results
    assert item.error is DeviceErrorCode.UNKNOWN
    assert item.raw_error == "BrandNewError"


def test_numeric_canonical_id_is_normalized():
    envelope = MessageBuilder("token").build()
    result = decode_response(
        '{"results": [{"message_id": 200000, "registration_id": 200001}]}', envelope
    )
    assert result.results == (
        CanonicalIdUpdate(registration_id="token", message_id="200000", canonical_id="200001"),
    )
    assert result.canonical_ids == 1


@pytest.mark.parametrize(
    "body",
    [
        "not json",
        "[]",
        '{"results": [{"message_id": "1"}, {"message_id": "2"}]}',
        '{"results": []}',
        '{"results": [{}]}',
        '{"multicast_id": "abc", "results": [{"message_id": "1"}]}',
    ],
)
def test_malformed_responses(body):
    envelope = MessageBuilder("token").build()
    with pytest.raises(MalformedResponse):
        decode_response(body, envelope)


def test_multicast_count_mismatch_is_malformed():
    envelope = MessageBuilder().registration_ids(["a", "b"]).build()
    with pytest.raises(MalformedResponse, match="Expected 2 results, got 1"):
        decode_response('{"results": [{"message_id": "1"}]}', envelope)
