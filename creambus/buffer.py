"""Bounded per-subscriber message buffers.

A ``BufferSlot`` is the storage shared between the bus and a subscriber.
``Outgoing`` is the subscriber's sending side of a slot, ``Incoming`` its
receiving side. A slot behaves as a stack: ``pending`` lists the most
recently stored message first, and ``Incoming.pop`` takes that one.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable

from creambus.message import UntypedMessage


class BufferSlot:
    """Fixed-capacity storage for the messages of one subscriber."""

    def __init__(self, capacity: int) -> None:
        if capacity < 0:
            raise ValueError("capacity must not be negative")
        self.capacity = capacity
        self._messages: list[UntypedMessage] = []

    def __len__(self) -> int:
        return len(self._messages)

    def reset(self) -> None:
        """Drop every stored message."""
        self._messages.clear()

    def pending(self) -> list[UntypedMessage]:
        """Copies of the stored messages, most recently stored first."""
        return [dataclasses.replace(m) for m in reversed(self._messages)]

    def append(self, message: UntypedMessage) -> bool:
        """Store a copy of ``message``; return False if the slot is full."""
        if len(self._messages) >= self.capacity:
            return False
        self._messages.append(dataclasses.replace(message))
        return True


class Buffer:
    """A view of a ``BufferSlot``."""

    def __init__(self, slot: BufferSlot) -> None:
        self._slot = slot

    def __len__(self) -> int:
        return len(self._slot)

    @property
    def capacity(self) -> int:
        return self._slot.capacity

    def clear(self) -> None:
        self._slot.reset()

    def available_space(self) -> int:
        return self._slot.capacity - len(self._slot)

    def messages(self) -> list[UntypedMessage]:
        """Copies of the buffered messages, most recently stored first."""
        return self._slot.pending()


class Outgoing(Buffer):
    """The sending side of a subscriber's buffer."""

    def send(self, message: UntypedMessage) -> bool:
        """Queue one message; return False if the buffer is full."""
        return self._slot.append(message)

    def send_many(self, messages: Iterable[UntypedMessage]) -> bool:
        """Queue all messages, or none of them if they do not all fit."""
        batch = list(messages)
        if self.available_space() < len(batch):
            return False
        for message in batch:
            self._slot.append(message)
        return True


class Incoming(Buffer):
    """The receiving side of a subscriber's buffer."""

    def pop(self) -> UntypedMessage | None:
        """Take the most recently delivered message, or None if empty."""
        if not self._slot._messages:
            return None
        return self._slot._messages.pop()

    def pop_all(self) -> list[UntypedMessage]:
        """Take every message, in the order repeated ``pop`` would give them."""
        taken = self._slot._messages[::-1]
        self._slot._messages.clear()
        return taken