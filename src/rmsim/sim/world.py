"""
LoopbackWorld: a minimal in-memory host environment.

Stands in for a real DTN simulator in demos and tests. It provides the
clock, transport and event bus the applications need, with the simplest
possible delivery model:

- every message sent is queued in a FIFO outbox
- draining the outbox walks each message along its relay path
  (hops(source, destination), empty by default) and then to its
  destination, calling handle() on each node's application
- a node that consumes the message ends its journey and keeps no copy;
  relays keep theirs until deleted

Every node keeps a store of the messages it currently holds, like a DTN
router's buffer. Deleting a message from a store also tells that node's
application to forget it, the way the host router reports deletions.
"""

from __future__ import annotations
from collections import deque
from dataclasses import dataclass, field
import logging
from typing import Any, Callable, TYPE_CHECKING

from rmsim.core.events import AppEvent

if TYPE_CHECKING:
    from rmsim.app.application import NodeApplication
    from rmsim.core.events import EventListener
    from rmsim.core.messages import Message

logger = logging.getLogger(__name__)


def direct(source: int, destination: int) -> list[int]:
    """Relay path with no intermediate nodes."""
    return []


@dataclass
class FiredEvent:
    """One event as recorded by the world."""

    time: float
    event: AppEvent
    origin: int
    payload: Any = None


@dataclass
class LoopbackWorld:
    """In-memory clock, transport and event bus for a set of addresses."""

    dest_min: int
    dest_max: int
    hops: Callable[[int, int], list[int]] = direct

    time: float = field(default=0.0, init=False)
    apps: dict[int, "NodeApplication"] = field(default_factory=dict, init=False)
    stores: dict[int, dict[str, "Message"]] = field(default_factory=dict, init=False)
    fired: list[FiredEvent] = field(default_factory=list, init=False)
    listeners: list["EventListener"] = field(default_factory=list, init=False)
    _outbox: deque = field(default_factory=deque, init=False)

    def __post_init__(self):
        self.stores = {a: {} for a in range(self.dest_min, self.dest_max)}

    # ─────────────────────────────────────────────────────────────────
    # Clock
    # ─────────────────────────────────────────────────────────────────

    def now(self) -> float:
        return self.time

    # ─────────────────────────────────────────────────────────────────
    # Transport
    # ─────────────────────────────────────────────────────────────────

    def send(self, message: "Message") -> None:
        self.stores[message.source][message.id] = message
        self._outbox.append(message)

    def delete_message(self, address: int, message_id: str) -> bool:
        store = self.stores.get(address)
        if store is None or store.pop(message_id, None) is None:
            return False
        app = self.apps.get(address)
        if app is not None:
            app.remove(message_id)
        return True

    def resolve(self, address: int) -> int | None:
        if address in self.stores:
            return address
        return None

    # ─────────────────────────────────────────────────────────────────
    # Event bus
    # ─────────────────────────────────────────────────────────────────

    def fire(self, event: AppEvent, payload: Any, origin: int) -> None:
        self.fired.append(FiredEvent(self.time, event, origin, payload))
        for listener in self.listeners:
            listener.on_event(event, payload, origin)

    def add_listener(self, listener: "EventListener") -> None:
        self.listeners.append(listener)

    def events_of(self, event: AppEvent) -> list[FiredEvent]:
        """All recorded firings of one event kind."""
        return [e for e in self.fired if e.event is event]

    # ─────────────────────────────────────────────────────────────────
    # Driving the simulation
    # ─────────────────────────────────────────────────────────────────

    def attach(self, apps: dict[int, "NodeApplication"]) -> None:
        """Install one application per address."""
        self.apps.update(apps)

    def deliver_pending(self) -> int:
        """
        Deliver queued messages, including any sent while delivering.

        Returns:
            Number of messages taken from the outbox
        """
        delivered = 0
        while self._outbox:
            message = self._outbox.popleft()
            delivered += 1
            self._deliver(message)
        return delivered

    def _deliver(self, message: "Message") -> None:
        path = list(self.hops(message.source, message.destination))
        path.append(message.destination)

        for hop in path:
            copy = message.received(self.time)
            store = self.stores[hop]
            store[copy.id] = copy
            app = self.apps.get(hop)
            if app is None:
                continue
            if app.handle(copy) is None:
                store.pop(copy.id, None)
                logger.debug("%s consumed at node %d", message.id, hop)
                return

        # Reached the destination without being consumed: foreign traffic
        self.stores[message.destination].pop(message.id, None)
        logger.debug("%s dropped at node %d", message.id, message.destination)

    def step(self, dt: float = 1.0) -> None:
        """Advance the clock, tick every application, deliver traffic."""
        self.time += dt
        for address in sorted(self.apps):
            self.apps[address].update()
        self.deliver_pending()

    def run(self, duration: float, dt: float = 1.0) -> None:
        """Step until `duration` time units have passed."""
        n_steps = int(duration / dt)
        for _ in range(n_steps):
            self.step(dt)

    def buffer_usage(self) -> dict[int, int]:
        """Total buffer usage per attached node."""
        return {a: app.buffer.total_usage() for a, app in sorted(self.apps.items())}
