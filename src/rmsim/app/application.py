"""
Per-node application and the factory that builds one per address.

All nodes of a scenario share one immutable config and one role
assignment. Each node owns its buffer and its random stream; the stream is
seeded from (seed, address) so nodes draw independently yet a run can be
replayed exactly.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
from typing import TYPE_CHECKING

import numpy as np

from rmsim.app.reception import ReceptionHandler
from rmsim.app.traffic import TrafficGenerator
from rmsim.core.buffer import PartitionedBuffer
from rmsim.core.roles import Role, RoleAssignment, assign_roles

if TYPE_CHECKING:
    from rmsim.core.config import ResourceManagementConfig
    from rmsim.core.environment import Clock, Transport
    from rmsim.core.events import EventBus
    from rmsim.core.messages import Message

logger = logging.getLogger(__name__)


@dataclass
class NodeApplication:
    """The resource management application running on one node."""

    address: int
    config: "ResourceManagementConfig"
    roles: RoleAssignment
    clock: "Clock"
    transport: "Transport"
    events: "EventBus"

    buffer: PartitionedBuffer = field(init=False)
    generator: TrafficGenerator = field(init=False)
    handler: ReceptionHandler = field(init=False)
    rng: np.random.Generator = field(init=False)

    def __post_init__(self):
        self.rng = np.random.default_rng(
            [self.config.seed_entropy, self.address - self.config.dest_min]
        )
        self.buffer = PartitionedBuffer(
            self.roles.buffer_size_for(self.address, self.config),
            transport=self.transport,
        )
        self.generator = TrafficGenerator(
            self.address, self.config, self.roles, self.buffer,
            self.clock, self.transport, self.events, self.rng,
        )
        self.handler = ReceptionHandler(
            self.address, self.config, self.buffer,
            self.clock, self.transport, self.events, self.rng,
        )

    @property
    def role(self) -> Role:
        return self.roles.role_of(self.address)

    def update(self) -> "Message | None":
        """Clock tick: send a message if one is due."""
        return self.generator.tick()

    def handle(self, message: "Message") -> "Message | None":
        """A message arrived: buffer, answer, or relay it."""
        return self.handler.handle(message)

    def remove(self, message_id: str) -> bool:
        """The host deleted a message; forget it in the buffer too."""
        return self.buffer.remove(self.address, message_id)


def build_applications(
    config: "ResourceManagementConfig",
    clock: "Clock",
    transport: "Transport",
    events: "EventBus",
    roles: RoleAssignment | None = None,
) -> dict[int, NodeApplication]:
    """
    Create one application per address in the destination range.

    Args:
        config: Scenario configuration (validated here)
        clock, transport, events: Host environment shared by all nodes
        roles: Precomputed roles; sampled from the config seed if None

    Returns:
        {address: NodeApplication} in ascending address order

    Raises:
        ConfigError: if the config is invalid
    """
    config.validate()
    if roles is None:
        roles = assign_roles(config)

    apps = {
        address: NodeApplication(address, config, roles, clock, transport, events)
        for address in config.addresses()
    }
    logger.info(
        "built %d applications: %d servers, %d resource hogs",
        len(apps), len(roles.servers), len(roles.res_hogs),
    )
    return apps
