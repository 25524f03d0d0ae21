"""
Messages exchanged by the resource management protocol.

A message is an immutable record. The only thing that changes while it
travels is its receive time, so each hop gets its own stamped copy via
Message.received().
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum


APP_ID = "fi.tkk.netlab.ResourceManagementApplication"


class MessageType(Enum):
    """Kinds of traffic the protocol produces."""

    REQUEST = "request"
    REQUEST_RESHOG = "request_reshog"
    RESPONSE = "response"
    RESPONSE_RESHOG = "response_reshog"
    UNIDIRECTIONAL = "unidirectional"

    @property
    def is_request(self) -> bool:
        return self in (MessageType.REQUEST, MessageType.REQUEST_RESHOG)

    @property
    def is_response(self) -> bool:
        return self in (MessageType.RESPONSE, MessageType.RESPONSE_RESHOG)

    @property
    def from_res_hog(self) -> bool:
        return self in (MessageType.REQUEST_RESHOG, MessageType.RESPONSE_RESHOG)

    def response_type(self) -> MessageType:
        """Type of the response that answers this request."""
        if self is MessageType.REQUEST:
            return MessageType.RESPONSE
        if self is MessageType.REQUEST_RESHOG:
            return MessageType.RESPONSE_RESHOG
        raise ValueError(f"{self.value} is not a request")


@dataclass(frozen=True)
class Message:
    """
    A message travelling through the DTN.

    msg_type is None for traffic that does not belong to this protocol;
    such messages are passed through untouched.
    """

    id: str
    source: int
    destination: int
    size: int             # Bytes; what the buffers account for
    created_at: float     # Logical time of creation
    receive_time: float   # Logical time the current holder received it
    msg_type: MessageType | None = None
    app_tag: str | None = None

    def received(self, now: float) -> Message:
        """Copy of this message as received by a node at time `now`."""
        return replace(self, receive_time=now)


def make_message_id(
    msg_type: MessageType, time: float, source: int, destination: int
) -> str:
    """
    Build a traceable message id: <type><time>-<source>-<destination>.

    Example: "request12.0-3-7"
    """
    return f"{msg_type.value}{time}-{source}-{destination}"


def create_message(
    msg_type: MessageType,
    source: int,
    destination: int,
    size: int,
    now: float,
) -> Message:
    """Create a new protocol message stamped with the current time."""
    return Message(
        id=make_message_id(msg_type, now, source, destination),
        source=source,
        destination=destination,
        size=size,
        created_at=now,
        receive_time=now,
        msg_type=msg_type,
        app_tag=APP_ID,
    )
