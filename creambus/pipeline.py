"""Routing of messages from outgoing buffers to incoming buffers.

Every tick the pipeline looks at each subscriber's outgoing buffer. Busy
subscribers (at least ``BATCH_THRESHOLD`` queued messages) are collected
into a shared message pool, sorted by destination and delivered in runs.
All other non-empty buffers are delivered message by message. Before
delivery each message is stamped with its real source and has its group
translated through the lookup table; a message whose destination is not
a member of the translated group gets destination 0 and is discarded.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from itertools import groupby
from operator import attrgetter

from creambus.buffer import Outgoing
from creambus.lookup import LookupTable
from creambus.message import UntypedMessage
from creambus.pool import BufferPool, MessagePool

BATCH_THRESHOLD = 128
"""Queued messages from which a subscriber is delivered through the pool."""

_BATCH_BUCKET = 0
_DIRECT_BUCKET = 1


def bucket_index(count: int) -> int:
    """Bucket of a subscriber with ``count`` queued messages.

    0 for batched delivery, 1 for direct delivery, 2 for nothing to do.
    """
    return int(count < BATCH_THRESHOLD) + int(count == 0)


@dataclass
class Offsets:
    """How many subscribers fall into each delivery bucket."""

    batch: int = 0
    scalar: int = 0
    ignore: int = 0

    def add(self, count: int) -> None:
        """Account for one subscriber with ``count`` queued messages."""
        self.batch += int(count >= BATCH_THRESHOLD)
        self.scalar += int(0 < count < BATCH_THRESHOLD)
        self.ignore = int(count == 0)

    def start_positions(self) -> list[int]:
        """Where each bucket starts in the ordered list of subscribers."""
        return [0, self.batch, self.batch + self.scalar]


def prepare_message(
    lookup_table: LookupTable, src: int, message: UntypedMessage
) -> UntypedMessage:
    """Stamp ``message`` with its source and translate its group in place.

    The destination is cleared to 0 when the sender's group does not map
    to a group the destination belongs to. The message is returned.
    """
    max_groups = lookup_table.max_groups
    message.src = src

    global_group = message.dst * max_groups + lookup_table.input[
        src * max_groups + message.group
    ]
    local_group = lookup_table.output[global_group]

    if global_group == 0 or local_group == 0:
        message.dst = 0
    message.group = local_group
    return message


@dataclass
class MemoryPools:
    """The storage a dispatch works on.

    ``write`` holds the subscribers' incoming buffers, ``read`` their
    outgoing buffers and ``message`` the shared batch pool.
    """

    write: BufferPool
    read: BufferPool
    message: MessagePool


@dataclass
class PipelineData:
    """Everything one dispatch needs."""

    lookup_table: LookupTable
    memory: MemoryPools
    subscriber_range: range


class MessagePipeline:
    """Moves queued messages to the subscribers they are addressed to."""

    def __init__(self, max_subscribers: int) -> None:
        self.max_subscribers = max_subscribers
        self.batches: list[tuple[int, int, int]] = []

    def dispatch_messages(self, data: PipelineData) -> None:
        """Deliver every message queued by the subscribers in range."""
        offsets, batched, direct = self._plan(data)

        if offsets.batch:
            self._prepare_batches(batched, data)
            self.batch_messages(data)
            self._send_batches(data)
            self.batches.clear()
            data.memory.message.clear()

        if offsets.scalar:
            self._send_direct(direct, data)

    def batch_messages(self, data: PipelineData) -> list[tuple[int, int, int]]:
        """Sort the message pool by destination and record its runs.

        Each run is ``(dst, count, start)``; messages with destination 0
        are skipped. The runs are appended to ``batches`` and returned.
        """
        pool = data.memory.message
        pool.sort_by_dst()

        position = 0
        for dst, run in groupby(pool, key=attrgetter("dst")):
            length = sum(1 for _ in run)
            if dst != 0:
                self.batches.append((dst, length, position))
            position += length
        return list(self.batches)

    @staticmethod
    def _plan(data: PipelineData) -> tuple[Offsets, list[int], list[int]]:
        read = data.memory.read
        counts = [(src, read.count_for(src)) for src in data.subscriber_range]

        offsets = Offsets()
        for _, count in counts:
            offsets.add(count)

        cursor = offsets.start_positions()
        order = [0] * len(counts)
        for src, count in counts:
            bucket = bucket_index(count)
            order[cursor[bucket]] = src
            cursor[bucket] += 1

        batched = order[: offsets.batch]
        direct = order[offsets.batch : offsets.batch + offsets.scalar]
        return offsets, batched, direct

    @staticmethod
    def _take_outgoing(data: PipelineData, src: int) -> list[UntypedMessage]:
        slot = data.memory.read.slot(src)
        messages = Outgoing(slot).messages()
        slot.reset()
        return messages

    def _prepare_batches(self, sources: Sequence[int], data: PipelineData) -> None:
        for src in sources:
            messages = self._take_outgoing(data, src)
            data.memory.message.reserve(
                prepare_message(data.lookup_table, src, message)
                for message in messages
            )

    def _send_batches(self, data: PipelineData) -> None:
        pool = data.memory.message
        for dst, count, start in self.batches:
            target = data.memory.write.slot(dst)
            for message in pool.slice(count, start):
                target.append(message)

    def _send_direct(self, sources: Sequence[int], data: PipelineData) -> None:
        for src in sources:
            for message in self._take_outgoing(data, src):
                prepare_message(data.lookup_table, src, message)
                if message.dst != 0:
                    data.memory.write.slot(message.dst).append(message)