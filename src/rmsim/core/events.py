"""
Application events reported to listeners.

The event set is closed: every send and receive the protocol performs maps
to exactly one AppEvent. Listeners are plain callables or objects with an
on_event method, registered on whatever EventBus the host provides.
"""

from __future__ import annotations
from enum import Enum
from typing import Any, Protocol

from rmsim.core.messages import MessageType


class AppEvent(Enum):
    """Events fired by the resource management application."""

    SENT_REQUEST = "SentRequest"
    GOT_REQUEST = "GotRequest"
    SENT_RESPONSE = "SentResponse"
    GOT_RESPONSE = "GotResponse"
    SENT_REQUEST_RESHOG = "SentRequestResHog"
    GOT_REQUEST_RESHOG = "GotRequestResHog"
    SENT_RESPONSE_RESHOG = "SentResponseResHog"
    GOT_RESPONSE_RESHOG = "GotResponseResHog"
    SENT_UNIDIRECTIONAL = "SentUnidirectional"
    GOT_UNIDIRECTIONAL = "GotUnidirectional"

    @classmethod
    def sent(cls, msg_type: MessageType) -> AppEvent:
        """Event fired when a message of this type is sent."""
        return _SENT[msg_type]

    @classmethod
    def got(cls, msg_type: MessageType) -> AppEvent:
        """Event fired when a message of this type reaches its destination."""
        return _GOT[msg_type]


_SENT = {
    MessageType.REQUEST: AppEvent.SENT_REQUEST,
    MessageType.REQUEST_RESHOG: AppEvent.SENT_REQUEST_RESHOG,
    MessageType.RESPONSE: AppEvent.SENT_RESPONSE,
    MessageType.RESPONSE_RESHOG: AppEvent.SENT_RESPONSE_RESHOG,
    MessageType.UNIDIRECTIONAL: AppEvent.SENT_UNIDIRECTIONAL,
}

_GOT = {
    MessageType.REQUEST: AppEvent.GOT_REQUEST,
    MessageType.REQUEST_RESHOG: AppEvent.GOT_REQUEST_RESHOG,
    MessageType.RESPONSE: AppEvent.GOT_RESPONSE,
    MessageType.RESPONSE_RESHOG: AppEvent.GOT_RESPONSE_RESHOG,
    MessageType.UNIDIRECTIONAL: AppEvent.GOT_UNIDIRECTIONAL,
}


class EventListener(Protocol):
    """Receives application events."""

    def on_event(self, event: AppEvent, payload: Any, origin: int) -> None:
        """
        Handle one event.

        Args:
            event: What happened
            payload: Optional event data (None for all protocol events)
            origin: Address of the node that fired the event
        """
        ...


class EventBus(Protocol):
    """Fires events to the listeners registered with the host."""

    def fire(self, event: AppEvent, payload: Any, origin: int) -> None:
        ...
