"""
Traffic generation: the sending half of the protocol.

On every tick the host calls TrafficGenerator.tick(). When the node's send
interval has elapsed, it picks a destination, decides the message type
from the destination's role, draws a size and sends the message.

- probability_to_send_request percent of sends go to a random server
  as a request (request_reshog when the sender is a resource hog)
- the rest go to a random non-server as unidirectional messages
- resource hogs and normal nodes keep separate "last sent" clocks so the
  hog interval can be tighter
"""

from __future__ import annotations
import logging
from typing import TYPE_CHECKING

import numpy as np

from rmsim.core.events import AppEvent
from rmsim.core.messages import Message, MessageType, create_message

if TYPE_CHECKING:
    from rmsim.core.buffer import PartitionedBuffer
    from rmsim.core.config import ResourceManagementConfig
    from rmsim.core.environment import Clock, Transport
    from rmsim.core.events import EventBus
    from rmsim.core.roles import RoleAssignment

logger = logging.getLogger(__name__)


def draw_size(rng: np.random.Generator, lo: int, hi: int) -> int:
    """Uniform size in [lo, hi); lo when the range is empty."""
    if hi <= lo:
        return lo
    return int(rng.integers(lo, hi))


class TrafficGenerator:
    """Periodic message source for one node."""

    def __init__(
        self,
        address: int,
        config: "ResourceManagementConfig",
        roles: "RoleAssignment",
        buffer: "PartitionedBuffer",
        clock: "Clock",
        transport: "Transport",
        events: "EventBus",
        rng: np.random.Generator,
    ):
        self.address = address
        self.config = config
        self.roles = roles
        self.buffer = buffer
        self.clock = clock
        self.transport = transport
        self.events = events
        self.rng = rng

        self.is_res_hog = roles.is_res_hog(address)
        self.last_send = config.offset
        self.last_send_reshog = 0.0

    @property
    def interval(self) -> float:
        """Send interval for this node's role."""
        if self.is_res_hog:
            return self.config.interval_res_hogs
        return self.config.interval

    def is_due(self, now: float) -> bool:
        last = self.last_send_reshog if self.is_res_hog else self.last_send
        return now - last >= self.interval

    def tick(self) -> Message | None:
        """
        Send a message if the interval has elapsed.

        Returns:
            The message sent, or None if nothing was due
        """
        if self.config.passive:
            return None

        now = self.clock.now()
        if not self.is_due(now):
            return None

        destination = self.pick_destination()
        if self.transport.resolve(destination) is None:
            raise LookupError(f"no node with address {destination}")

        msg_type = self.type_for(destination)
        message = create_message(
            msg_type,
            source=self.address,
            destination=destination,
            size=self.size_for(msg_type),
            now=now,
        )

        logger.info(
            "node %d: sending %s (%d bytes) to %d",
            self.address, message.id, message.size, destination,
        )
        self.transport.send(message)
        self.events.fire(AppEvent.sent(msg_type), None, self.address)

        # Own messages are accounted to our own partition
        self.buffer.admit(self.address, message, self.address)

        if self.is_res_hog:
            self.last_send_reshog = now
        else:
            self.last_send = now

        return message

    def pick_destination(self) -> int:
        """Random server with the configured probability, else a random non-server."""
        servers = self.roles.servers
        roll = int(self.rng.integers(1, 101))

        if roll <= self.config.probability_to_send_request and servers:
            return servers[int(self.rng.integers(len(servers)))]

        while True:
            address = int(self.rng.integers(self.config.dest_min, self.config.dest_max))
            if address not in servers:
                return address

    def type_for(self, destination: int) -> MessageType:
        """Requests only go to servers; everything else is unidirectional."""
        if self.roles.is_server(destination):
            if self.is_res_hog:
                return MessageType.REQUEST_RESHOG
            return MessageType.REQUEST
        return MessageType.UNIDIRECTIONAL

    def size_for(self, msg_type: MessageType) -> int:
        cfg = self.config
        if msg_type.is_request:
            return draw_size(self.rng, cfg.request_min_size, cfg.request_max_size)
        return draw_size(self.rng, cfg.unidirectional_min_size, cfg.unidirectional_max_size)
