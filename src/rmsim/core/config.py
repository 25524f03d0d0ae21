"""
Configuration for the resource management application.

A single immutable config is shared by every node in a scenario. It can be
built directly as a dataclass or read from a settings mapping that uses the
host simulator's camelCase option names.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Mapping


class ConfigError(ValueError):
    """Raised when a scenario configuration is invalid."""


@dataclass(frozen=True)
class ResourceManagementConfig:
    """Configuration for one resource management scenario."""

    passive: bool = False              # Respond only, never generate traffic
    interval: float = 500.0            # Send interval of normal nodes
    interval_res_hogs: float = 500.0   # Send interval of resource hogs
    offset: float = 0.0                # Initial "last sent" of normal nodes

    # Destination address range: inclusive lower, exclusive upper
    dest_min: int = 0
    dest_max: int = 1

    seed: int = 0

    # Message size ranges in bytes: inclusive lower, exclusive upper
    request_min_size: int = 1
    request_max_size: int = 1
    response_min_size: int = 1
    response_max_size: int = 1
    unidirectional_min_size: int = 1
    unidirectional_max_size: int = 1

    # Buffer capacities in bytes
    client_buffer_size: int = 1
    server_buffer_size: int = 1

    percentage_of_servers: int = 5
    percentage_of_res_hogs: int = 5
    probability_to_send_request: int = 80  # Percent of sends aimed at servers

    simulate_proxy_signatures: bool = False

    @property
    def number_of_servers(self) -> int:
        return self.dest_max * self.percentage_of_servers // 100

    @property
    def number_of_res_hogs(self) -> int:
        return self.dest_max * self.percentage_of_res_hogs // 100

    @property
    def address_count(self) -> int:
        return self.dest_max - self.dest_min

    @property
    def seed_entropy(self) -> int:
        """Seed folded into the non-negative 64-bit range numpy accepts."""
        return self.seed & 0xFFFF_FFFF_FFFF_FFFF

    def addresses(self) -> range:
        """All node addresses covered by the destination range."""
        return range(self.dest_min, self.dest_max)

    def validate(self) -> "ResourceManagementConfig":
        """
        Check the config for values that would break the simulation.

        Returns self so calls can be chained. Raises ConfigError on the
        first problem found.
        """
        if self.dest_max <= self.dest_min:
            raise ConfigError(
                f"destinationRange must be non-empty, got [{self.dest_min}, {self.dest_max})"
            )

        for name in ("interval", "interval_res_hogs"):
            if getattr(self, name) < 0:
                raise ConfigError(f"{name} must be >= 0")

        for kind in ("request", "response", "unidirectional"):
            lo = getattr(self, f"{kind}_min_size")
            hi = getattr(self, f"{kind}_max_size")
            if lo < 0:
                raise ConfigError(f"{kind}_min_size must be >= 0, got {lo}")
            if hi < lo:
                raise ConfigError(
                    f"{kind} size range is inverted: min={lo}, max={hi}"
                )

        for name in ("client_buffer_size", "server_buffer_size"):
            if getattr(self, name) <= 0:
                raise ConfigError(f"{name} must be > 0")

        for name in (
            "percentage_of_servers",
            "percentage_of_res_hogs",
            "probability_to_send_request",
        ):
            value = getattr(self, name)
            if not 0 <= value <= 100:
                raise ConfigError(f"{name} must be within [0, 100], got {value}")

        # Role sampling only draws from the range, so it must leave at
        # least one address over for plain clients.
        taken = self.number_of_servers + self.number_of_res_hogs
        if taken >= self.address_count:
            raise ConfigError(
                f"{self.number_of_servers} servers + {self.number_of_res_hogs} "
                f"resource hogs do not fit into {self.address_count} addresses"
            )

        return self


# camelCase option name -> (field name, coercion)
_SETTINGS = {
    "passive": ("passive", "bool"),
    "interval": ("interval", float),
    "intervalResHogs": ("interval_res_hogs", float),
    "offset": ("offset", float),
    "seed": ("seed", int),
    "requestMinSize": ("request_min_size", int),
    "requestMaxSize": ("request_max_size", int),
    "responseMinSize": ("response_min_size", int),
    "responseMaxSize": ("response_max_size", int),
    "unidirectionalMinSize": ("unidirectional_min_size", int),
    "unidirectionalMaxSize": ("unidirectional_max_size", int),
    "clientBufferSize": ("client_buffer_size", int),
    "serverBufferSize": ("server_buffer_size", int),
    "percentageOfServers": ("percentage_of_servers", int),
    "percentageOfResHogs": ("percentage_of_res_hogs", int),
    "probabilityToSendRequest": ("probability_to_send_request", int),
    "simulateProxySignatures": ("simulate_proxy_signatures", "bool"),
}

DEST_RANGE = "destinationRange"


def _to_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes", "on"):
            return True
        if lowered in ("false", "0", "no", "off"):
            return False
    if isinstance(value, int):
        return bool(value)
    raise ConfigError(f"{key}: cannot interpret {value!r} as a boolean")


def _to_range(value: Any) -> tuple[int, int]:
    if isinstance(value, str):
        parts = [p.strip() for p in value.split(",")]
    else:
        try:
            parts = list(value)
        except TypeError as e:
            raise ConfigError(f"{DEST_RANGE}: expected two values, got {value!r}") from e
    if len(parts) != 2:
        raise ConfigError(f"{DEST_RANGE}: expected two values, got {value!r}")
    try:
        return int(parts[0]), int(parts[1])
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{DEST_RANGE}: {e}") from e


def from_settings(settings: Mapping[str, Any]) -> ResourceManagementConfig:
    """
    Build a validated config from host-simulator style settings.

    Keys use the simulator's option names (e.g. "intervalResHogs",
    "destinationRange"). Missing keys keep their defaults and unknown keys
    are ignored.

    Args:
        settings: Mapping of option name to raw value (strings are coerced)

    Returns:
        Validated ResourceManagementConfig
    """
    values: dict[str, Any] = {}

    for key, (name, kind) in _SETTINGS.items():
        if key not in settings:
            continue
        raw = settings[key]
        if kind == "bool":
            values[name] = _to_bool(key, raw)
            continue
        try:
            values[name] = kind(raw)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"{key}: {e}") from e

    if DEST_RANGE in settings:
        values["dest_min"], values["dest_max"] = _to_range(settings[DEST_RANGE])

    return ResourceManagementConfig(**values).validate()
