"""
Tests for decoding ntfy messages.
"""
import json

import pytest
from pydantic import ValidationError

from ntfy_sdk.exceptions import DecodeError
from ntfy_sdk.models import ActionButton, Attachment, EventType, NtfyMessage, decode_message

from helpers import make_message


class TestDecodeMessage:
    """Tests for decode_message()."""

    def test_decode_full_message(self):
        """All documented fields should be decoded."""
        payload = make_message(
            title="Deploy",
            tags=["rocket", "warning"],
            priority=4,
            click="https://example.com",
            actions=[
                {"action": "view", "label": "Open", "url": "https://example.com/run", "clear": True},
                {
                    "action": "http",
                    "label": "Retry",
                    "url": "https://api.example.com/retry",
                    "method": "PUT",
                    "headers": {"Authorization": "Bearer x"},
                    "body": "{}",
                },
            ],
            attachment={
                "name": "log.txt",
                "url": "https://ntfy.example.com/file/log.txt",
                "size": 1024,
                "type": "text/plain",
                "expires": 1700050000,
            },
        )

        message = decode_message(json.dumps(payload))

        assert message.id == "sPs71M8A2T"
        assert message.time == 1700000000
        assert message.event == EventType.MESSAGE
        assert message.is_message
        assert message.tags == ["rocket", "warning"]
        assert message.priority == 4
        assert message.actions[0] == ActionButton(
            action="view", label="Open", url="https://example.com/run", clear=True
        )
        assert message.actions[1].method == "PUT"
        assert message.actions[1].headers == {"Authorization": "Bearer x"}
        assert message.attachment == Attachment(
            name="log.txt",
            url="https://ntfy.example.com/file/log.txt",
            size=1024,
            type="text/plain",
            expires=1700050000,
        )

    def test_absent_fields_are_none(self):
        """A keepalive carries only the required fields."""
        line = '{"id":"k1","time":1700000000,"event":"keepalive","topic":"alerts"}'

        message = decode_message(line)

        assert message.event == EventType.KEEPALIVE
        assert not message.is_message
        assert message.expires is None
        assert message.message is None
        assert message.title is None
        assert message.tags is None
        assert message.priority is None
        assert message.actions is None
        assert message.attachment is None

    def test_decode_bytes(self):
        """Raw bytes from the wire should decode too."""
        message = decode_message(json.dumps(make_message(event="open")).encode("utf-8"))
        assert message.event == EventType.OPEN

    def test_poll_request_event(self):
        message = decode_message(json.dumps(make_message(event="poll_request")))
        assert message.event == EventType.POLL_REQUEST

    def test_unknown_fields_ignored(self):
        """Fields added by newer servers should not break decoding."""
        message = decode_message(json.dumps(make_message(content_type="text/markdown")))
        assert message.message == "Backup finished"

    def test_action_defaults(self):
        """Action type defaults to view and clear to False."""
        message = decode_message(json.dumps(make_message(actions=[{"label": "Open"}])))
        assert message.actions[0].action == "view"
        assert message.actions[0].clear is False
        assert message.actions[0].url is None

    def test_priority_range_not_enforced(self):
        """Priority is reported as sent, even outside 1-5."""
        message = decode_message(json.dumps(make_message(priority=9)))
        assert message.priority == 9

    def test_malformed_json_raises_decode_error(self):
        with pytest.raises(DecodeError) as exc_info:
            decode_message("{not json")
        assert exc_info.value.raw == "{not json"

    def test_schema_mismatch_raises_decode_error(self):
        """Missing required fields and unknown event kinds are decode errors."""
        with pytest.raises(DecodeError):
            decode_message('{"time": 1, "event": "message", "topic": "alerts"}')
        with pytest.raises(DecodeError):
            decode_message(json.dumps(make_message(event="bogus")))


class TestNtfyMessage:
    """Tests for the NtfyMessage model."""

    def test_reencoding_is_stable(self):
        """Decoding the serialized form of a message yields an equal message."""
        message = decode_message(json.dumps(make_message(tags=["tada"], title="Hi")))

        assert decode_message(message.to_json()) == message

    def test_to_json_omits_absent_fields(self):
        message = decode_message('{"id":"k1","time":1,"event":"keepalive","topic":"alerts"}')
        assert json.loads(message.to_json()) == {
            "id": "k1",
            "time": 1,
            "event": "keepalive",
            "topic": "alerts",
        }

    def test_messages_are_immutable(self):
        message = NtfyMessage(id="a", time=1, event=EventType.MESSAGE, topic="alerts")
        with pytest.raises(ValidationError):
            message.title = "changed"
