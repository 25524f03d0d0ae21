"""
Role assignment: which nodes are servers, which are resource hogs.

Roles are drawn once per scenario from a generator seeded with the config
seed, so the same seed always produces the same servers and hogs.
Everything that is neither is a plain client.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
import logging

import numpy as np

from rmsim.core.config import ResourceManagementConfig

logger = logging.getLogger(__name__)


class Role(Enum):
    SERVER = "server"
    RESOURCE_HOG = "resource_hog"
    PLAIN_CLIENT = "plain_client"


@dataclass(frozen=True)
class RoleAssignment:
    """
    Result of role sampling for one scenario.

    servers and res_hogs keep the order in which they were drawn; the
    traffic generator indexes into servers when picking a destination.
    """

    dest_min: int
    dest_max: int
    servers: tuple[int, ...]
    res_hogs: tuple[int, ...]

    def is_server(self, address: int) -> bool:
        return address in self.servers

    def is_res_hog(self, address: int) -> bool:
        return address in self.res_hogs

    def role_of(self, address: int) -> Role:
        if address in self.servers:
            return Role.SERVER
        if address in self.res_hogs:
            return Role.RESOURCE_HOG
        return Role.PLAIN_CLIENT

    @property
    def clients(self) -> tuple[int, ...]:
        """Addresses that are neither server nor resource hog."""
        return tuple(
            a for a in range(self.dest_min, self.dest_max)
            if a not in self.servers and a not in self.res_hogs
        )

    def buffer_size_for(self, address: int, config: ResourceManagementConfig) -> int:
        """Buffer capacity in bytes for the node at this address."""
        if address in self.servers:
            return config.server_buffer_size
        return config.client_buffer_size


def _draw_distinct(
    rng: np.random.Generator,
    lo: int,
    hi: int,
    count: int,
    excluded: set[int],
) -> list[int]:
    """Draw `count` distinct addresses from [lo, hi) by rejection sampling."""
    chosen: list[int] = []
    while len(chosen) < count:
        address = int(rng.integers(lo, hi))
        if address in excluded or address in chosen:
            continue
        chosen.append(address)
    return chosen


def assign_roles(config: ResourceManagementConfig) -> RoleAssignment:
    """
    Sample servers and resource hogs for a scenario.

    The config is validated first: sampling draws only from the
    destination range, so it could never finish if servers and hogs
    together claimed every address.

    Args:
        config: Scenario configuration (seed, range, percentages)

    Returns:
        RoleAssignment with disjoint server and hog sets
    """
    config.validate()
    rng = np.random.default_rng(config.seed_entropy)

    servers = _draw_distinct(
        rng, config.dest_min, config.dest_max, config.number_of_servers, set()
    )
    logger.info("Number of servers: %d, chosen: %s", len(servers), servers)

    res_hogs = _draw_distinct(
        rng, config.dest_min, config.dest_max, config.number_of_res_hogs, set(servers)
    )
    logger.info("Number of resource hogs: %d, chosen: %s", len(res_hogs), res_hogs)

    return RoleAssignment(
        dest_min=config.dest_min,
        dest_max=config.dest_max,
        servers=tuple(servers),
        res_hogs=tuple(res_hogs),
    )
