"""Unit tests for Message, MessageType and AppEvent."""

import dataclasses

import pytest

from rmsim.core.events import AppEvent
from rmsim.core.messages import APP_ID, Message, MessageType, create_message, make_message_id


class TestMessageType:
    """Tests for MessageType helpers."""

    def test_request_and_response_flags(self):
        assert MessageType.REQUEST.is_request
        assert MessageType.REQUEST_RESHOG.is_request
        assert MessageType.RESPONSE.is_response
        assert MessageType.RESPONSE_RESHOG.is_response
        assert not MessageType.UNIDIRECTIONAL.is_request
        assert not MessageType.UNIDIRECTIONAL.is_response

    def test_response_type(self):
        assert MessageType.REQUEST.response_type() is MessageType.RESPONSE
        assert MessageType.REQUEST_RESHOG.response_type() is MessageType.RESPONSE_RESHOG

    def test_response_type_of_non_request_raises(self):
        with pytest.raises(ValueError):
            MessageType.UNIDIRECTIONAL.response_type()


class TestMessage:
    """Tests for Message creation."""

    def test_id_encodes_type_time_source_destination(self):
        assert make_message_id(MessageType.REQUEST, 12.0, 3, 7) == "request12.0-3-7"

    def test_create_message(self):
        m = create_message(MessageType.UNIDIRECTIONAL, source=1, destination=2, size=50, now=4.0)
        assert m.id == "unidirectional4.0-1-2"
        assert m.size == 50
        assert m.created_at == 4.0
        assert m.receive_time == 4.0
        assert m.app_tag == APP_ID

    def test_message_is_immutable(self):
        m = create_message(MessageType.REQUEST, source=1, destination=2, size=5, now=0.0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            m.size = 10

    def test_received_stamps_copy(self):
        m = create_message(MessageType.REQUEST, source=1, destination=2, size=5, now=1.0)
        copy = m.received(9.0)

        assert copy.receive_time == 9.0
        assert copy.created_at == 1.0
        assert copy.id == m.id
        assert m.receive_time == 1.0


class TestAppEvent:
    """Tests for the event mapping."""

    def test_event_names(self):
        assert AppEvent.SENT_REQUEST.value == "SentRequest"
        assert AppEvent.GOT_RESPONSE_RESHOG.value == "GotResponseResHog"

    def test_every_type_has_sent_and_got(self):
        for msg_type in MessageType:
            assert AppEvent.sent(msg_type).value.startswith("Sent")
            assert AppEvent.got(msg_type).value.startswith("Got")

    def test_mapping(self):
        assert AppEvent.sent(MessageType.REQUEST_RESHOG) is AppEvent.SENT_REQUEST_RESHOG
        assert AppEvent.got(MessageType.UNIDIRECTIONAL) is AppEvent.GOT_UNIDIRECTIONAL
