"""
Reception handling: the receiving half of the protocol.

Every message a node receives goes through ReceptionHandler.handle().
The handler decides where the message is buffered and whether it keeps
travelling:

- Transit traffic (not addressed to us) is buffered and relayed on.
  Requests and unidirectional messages are accounted to their source.
  Responses are accounted to their source, or to their destination when
  proxy signatures are simulated.
- Terminating requests are answered with a response, which is buffered
  here under the same response rule before it is sent.
- Terminating responses and unidirectional messages are only counted.

Returning None consumes the message; returning it relays it further.
"""

from __future__ import annotations
import logging
from typing import TYPE_CHECKING

import numpy as np

from rmsim.app.traffic import draw_size
from rmsim.core.events import AppEvent
from rmsim.core.messages import APP_ID, Message, create_message

if TYPE_CHECKING:
    from rmsim.core.buffer import PartitionedBuffer
    from rmsim.core.config import ResourceManagementConfig
    from rmsim.core.environment import Clock, Transport
    from rmsim.core.events import EventBus

logger = logging.getLogger(__name__)


class ReceptionHandler:
    """Classifies and buffers inbound messages for one node."""

    def __init__(
        self,
        address: int,
        config: "ResourceManagementConfig",
        buffer: "PartitionedBuffer",
        clock: "Clock",
        transport: "Transport",
        events: "EventBus",
        rng: np.random.Generator,
    ):
        self.address = address
        self.config = config
        self.buffer = buffer
        self.clock = clock
        self.transport = transport
        self.events = events
        self.rng = rng

    def response_partition(self, message: Message) -> int:
        """Partition a response is accounted to on this node."""
        if self.config.simulate_proxy_signatures:
            return message.destination
        return message.source

    def handle(self, message: Message) -> Message | None:
        """
        Process one received message.

        Returns:
            The message if it should be relayed further, None if consumed
        """
        if message.msg_type is None or message.app_tag != APP_ID:
            return message

        logger.debug(
            "node %d: incoming %s (from %d, to %d)",
            self.address, message.id, message.source, message.destination,
        )

        if message.destination != self.address:
            return self._handle_transit(message)
        return self._handle_terminating(message)

    def _handle_transit(self, message: Message) -> Message:
        if message.msg_type.is_response:
            key = self.response_partition(message)
        else:
            key = message.source

        logger.debug(
            "node %d: buffering %s into partition %d", self.address, message.id, key
        )
        self.buffer.admit(key, message, self.address)
        return message

    def _handle_terminating(self, message: Message) -> None:
        msg_type = message.msg_type

        if msg_type.is_request:
            self._respond(message)
        else:
            self.events.fire(AppEvent.got(msg_type), None, self.address)

        return None

    def _respond(self, request: Message) -> Message:
        """Answer a request addressed to this node."""
        cfg = self.config
        response = create_message(
            request.msg_type.response_type(),
            source=self.address,
            destination=request.source,
            size=draw_size(self.rng, cfg.response_min_size, cfg.response_max_size),
            now=self.clock.now(),
        )

        self.buffer.admit(self.response_partition(response), response, self.address)

        self.events.fire(AppEvent.got(request.msg_type), None, self.address)
        self.events.fire(AppEvent.sent(response.msg_type), None, self.address)

        logger.info(
            "node %d: answering %s with %s (%d bytes)",
            self.address, request.id, response.id, response.size,
        )
        self.transport.send(response)
        return response
