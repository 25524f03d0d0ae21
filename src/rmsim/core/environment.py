"""
Interfaces to the host simulation environment.

The application never moves messages or advances time itself. The host
(a DTN simulator, or rmsim.sim.LoopbackWorld in tests and demos) provides
a logical clock and a message transport.
"""

from __future__ import annotations
from typing import Any, Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from rmsim.core.messages import Message


class Clock(Protocol):
    """Shared logical clock."""

    def now(self) -> float:
        """Current logical time."""
        ...


class Transport(Protocol):
    """Moves messages between nodes."""

    def send(self, message: "Message") -> None:
        """Create the message at its source and start delivering it."""
        ...

    def delete_message(self, address: int, message_id: str) -> bool:
        """
        Force-delete a message held by a node.

        Returns:
            False if the node no longer holds the message (not an error)
        """
        ...

    def resolve(self, address: int) -> Any | None:
        """Node handle for an address, or None if there is no such node."""
        ...
