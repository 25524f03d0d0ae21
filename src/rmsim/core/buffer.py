"""
Partitioned buffer: per-node message storage with a byte capacity.

Messages are stored in partitions keyed by a counterpart address (usually
the node the traffic came from). When the whole buffer exceeds its
capacity, messages are dropped from the fullest partition first, oldest
message first. A node that floods the network therefore fills and loses
its own partition instead of pushing everyone else's messages out.

Eviction rule, repeated until the buffer fits:
1. Take the partition with the highest usage (lowest key on ties)
2. Drop its oldest message, but never the message that was just admitted
3. If that partition only holds the new message, use the second fullest
   partition instead, without the exclusion
4. Ask the transport to delete the victim as well

If no victim can be found at all (one message larger than the whole
buffer, alone in its partition) the loop stops and the buffer stays over
capacity until something else is removed.
"""

from __future__ import annotations
import logging
from typing import TYPE_CHECKING, Iterator

if TYPE_CHECKING:
    from rmsim.core.environment import Transport
    from rmsim.core.messages import Message

logger = logging.getLogger(__name__)


class PartitionedBuffer:
    """
    Byte-bounded message buffer split into partitions.

    Partitions are plain lists in insertion order, so among messages with
    the same receive time the one admitted first is the oldest.
    """

    def __init__(self, max_size: int, transport: "Transport | None" = None):
        """
        Create an empty buffer.

        Args:
            max_size: Capacity in bytes
            transport: Where evicted messages are deleted from as well
                       (None for a standalone buffer)
        """
        self.max_size = max_size
        self.transport = transport
        self._partitions: dict[int, list["Message"]] = {}

    # ─────────────────────────────────────────────────────────────────
    # Queries
    # ─────────────────────────────────────────────────────────────────

    def usage(self, partition_key: int) -> int:
        """Bytes held in one partition (0 for unknown keys)."""
        return sum(m.size for m in self._partitions.get(partition_key, ()))

    def total_usage(self) -> int:
        """Bytes held across all partitions."""
        return sum(self.usage(key) for key in self._partitions)

    def partition_keys(self) -> list[int]:
        """Known partition keys in ascending order."""
        return sorted(self._partitions)

    def messages(self, partition_key: int) -> list["Message"]:
        """Messages in one partition, in admission order."""
        return list(self._partitions.get(partition_key, ()))

    def snapshot(self) -> dict[int, int]:
        """Usage per partition, keyed in ascending order."""
        return {key: self.usage(key) for key in self.partition_keys()}

    def __len__(self) -> int:
        return sum(len(p) for p in self._partitions.values())

    def __contains__(self, message_id: object) -> bool:
        return any(m.id == message_id for m in self._iter_messages())

    def _iter_messages(self) -> Iterator["Message"]:
        for key in self.partition_keys():
            yield from self._partitions[key]

    # ─────────────────────────────────────────────────────────────────
    # Mutation
    # ─────────────────────────────────────────────────────────────────

    def admit(self, partition_key: int, message: "Message", owner: int) -> list["Message"]:
        """
        Store a message and evict until the buffer fits again.

        Args:
            partition_key: Counterpart address the message is accounted to
            message: The message to store
            owner: Address of the node owning this buffer

        Returns:
            Messages evicted to make room (empty if none)
        """
        self._partitions.setdefault(partition_key, []).append(message)
        logger.debug(
            "node %d: admitted %s into partition %d (%d/%d bytes)",
            owner, message.id, partition_key, self.total_usage(), self.max_size,
        )
        return self.evict(owner, message)

    def remove(self, owner: int, message_id: str) -> bool:
        """
        Remove a message by id from whichever partition holds it.

        Unknown ids are ignored, so calling this twice is harmless.

        Returns:
            True if a message was removed
        """
        for key in self.partition_keys():
            partition = self._partitions[key]
            for i, message in enumerate(partition):
                if message.id == message_id:
                    del partition[i]
                    logger.debug("node %d: removed %s from partition %d", owner, message_id, key)
                    return True
        return False

    # ─────────────────────────────────────────────────────────────────
    # Eviction
    # ─────────────────────────────────────────────────────────────────

    def evict(self, owner: int, just_admitted: "Message | None" = None) -> list["Message"]:
        """
        Drop messages until total usage is within capacity.

        Args:
            owner: Address of the node owning this buffer (for the transport)
            just_admitted: Message that must not evict itself

        Returns:
            Evicted messages in eviction order
        """
        evicted: list["Message"] = []

        while self.total_usage() > self.max_size:
            victim_key, victim = self._select_victim(just_admitted)

            if victim is None:
                logger.warning(
                    "node %d: no message to drop, buffer stays at %d/%d bytes",
                    owner, self.total_usage(), self.max_size,
                )
                break

            partition = self._partitions[victim_key]
            partition[:] = [m for m in partition if m is not victim]
            evicted.append(victim)
            logger.info(
                "node %d: dropping %s from partition %d", owner, victim.id, victim_key
            )

            if self.transport is not None:
                if not self.transport.delete_message(owner, victim.id):
                    logger.debug("node %d: transport no longer held %s", owner, victim.id)

        return evicted

    def _ranked_keys(self) -> list[int]:
        """Partition keys by descending usage, lowest key first on ties."""
        return sorted(self._partitions, key=lambda k: (-self.usage(k), k))

    def _select_victim(
        self, just_admitted: "Message | None"
    ) -> tuple[int, "Message | None"]:
        ranked = self._ranked_keys()
        if not ranked:
            return -1, None

        highest = ranked[0]
        victim = _oldest(self._partitions[highest], exclude=just_admitted)
        if victim is not None:
            return highest, victim

        logger.info(
            "message to drop is the only message in partition %d", highest
        )

        if len(ranked) < 2:
            return highest, None

        second = ranked[1]
        return second, _oldest(self._partitions[second], exclude=None)


def _oldest(partition: list["Message"], exclude: "Message | None") -> "Message | None":
    """Oldest message by receive time, skipping `exclude` (by identity)."""
    oldest = None
    for message in partition:
        if message is exclude:
            continue
        if oldest is None or message.receive_time < oldest.receive_time:
            oldest = message
    return oldest
