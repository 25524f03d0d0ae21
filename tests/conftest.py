"""
Pytest configuration and shared fixtures.
"""

import pytest
import numpy as np

from rmsim.core import ResourceManagementConfig, Message, MessageType, APP_ID


class FakeClock:
    """Clock whose time is set by the test."""

    def __init__(self, time: float = 0.0):
        self.time = time

    def now(self) -> float:
        return self.time


class RecordingTransport:
    """Transport that records sends and deletions instead of moving messages."""

    def __init__(self, addresses=range(0, 10)):
        self.addresses = set(addresses)
        self.sent: list[Message] = []
        self.deleted: list[tuple[int, str]] = []
        self.held: set[str] = set()

    def send(self, message):
        self.sent.append(message)
        self.held.add(message.id)

    def delete_message(self, address, message_id):
        self.deleted.append((address, message_id))
        if message_id in self.held:
            self.held.discard(message_id)
            return True
        return False

    def resolve(self, address):
        return address if address in self.addresses else None


class RecordingEvents:
    """Event bus that keeps (event, origin) pairs in firing order."""

    def __init__(self):
        self.fired = []

    def fire(self, event, payload, origin):
        self.fired.append((event, origin))

    @property
    def names(self) -> list[str]:
        return [event.value for event, _ in self.fired]


def make_message(
    msg_id: str,
    size: int,
    receive_time: float = 0.0,
    source: int = 1,
    destination: int = 2,
    msg_type: MessageType | None = MessageType.UNIDIRECTIONAL,
) -> Message:
    """Protocol message with explicit id, size and receive time."""
    return Message(
        id=msg_id,
        source=source,
        destination=destination,
        size=size,
        created_at=receive_time,
        receive_time=receive_time,
        msg_type=msg_type,
        app_tag=APP_ID if msg_type is not None else None,
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def transport_factory():
    """Factory for extra transports: transport_factory(addresses=range(0, 10))."""
    return RecordingTransport


@pytest.fixture
def clock_factory():
    """Factory for extra clocks: clock_factory(time=0.0)."""
    return FakeClock


@pytest.fixture
def events():
    return RecordingEvents()


@pytest.fixture
def scenario_config():
    """10 nodes: 2 servers, 2 resource hogs, 6 plain clients."""
    return ResourceManagementConfig(
        interval=10.0,
        interval_res_hogs=2.0,
        dest_min=0,
        dest_max=10,
        seed=42,
        request_min_size=10,
        request_max_size=20,
        response_min_size=30,
        response_max_size=40,
        unidirectional_min_size=5,
        unidirectional_max_size=8,
        client_buffer_size=100,
        server_buffer_size=1000,
        percentage_of_servers=20,
        percentage_of_res_hogs=20,
        probability_to_send_request=80,
    )


@pytest.fixture
def rng():
    """Reproducible random number generator."""
    return np.random.default_rng(seed=42)


@pytest.fixture
def msg():
    """Factory for protocol messages: msg(id, size, receive_time=0.0, ...)."""
    return make_message
