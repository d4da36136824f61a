"""Storage pools behind the bus: per-subscriber slots and a shared batch."""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from creambus.buffer import BufferSlot, Incoming, Outgoing
from creambus.defines import MESSAGE_SIZE, METADATA, SPECIAL_DATA_OFFSET
from creambus.message import UntypedMessage


class BufferPool:
    """A fixed number of equally sized message slots, one per subscriber."""

    def __init__(self, slices: int, max_messages: int) -> None:
        self._slice_size = max_messages * MESSAGE_SIZE + METADATA
        self.capacity = slices
        per_slot = self.slice_capacity()
        self._slots = [BufferSlot(per_slot) for _ in range(slices)]

    def __len__(self) -> int:
        return self.capacity

    def slot(self, slot_id: int) -> BufferSlot:
        """The storage of one subscriber."""
        if not 0 <= slot_id < self.capacity:
            raise IndexError(f"slot {slot_id} is outside the pool")
        return self._slots[slot_id]

    def slice_capacity(self) -> int:
        """How many messages one slot holds."""
        return (self._slice_size - SPECIAL_DATA_OFFSET) // MESSAGE_SIZE

    def count_for(self, slot_id: int) -> int:
        """How many messages are stored in a slot."""
        return len(self.slot(slot_id))

    def _fresh_slot(self, slot_id: int) -> BufferSlot | None:
        if not 0 <= slot_id < self.capacity:
            return None
        slot = self._slots[slot_id]
        slot.reset()
        return slot

    def incoming(self, slot_id: int) -> Incoming | None:
        """Reset a slot and hand out its receiving side; None if out of range."""
        slot = self._fresh_slot(slot_id)
        return None if slot is None else Incoming(slot)

    def outgoing(self, slot_id: int) -> Outgoing | None:
        """Reset a slot and hand out its sending side; None if out of range."""
        slot = self._fresh_slot(slot_id)
        return None if slot is None else Outgoing(slot)

    def return_buffer(self, slot_id: int) -> None:
        """Empty a slot that is no longer in use."""
        self.slot(slot_id).reset()


@dataclass
class MessagePool:
    """A flat run of messages gathered from many subscribers in one tick.

    ``capacity`` is counted in messages; None means unbounded.
    """

    capacity: int | None = None
    _messages: list[UntypedMessage] = field(
        default_factory=list, init=False, repr=False
    )

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[UntypedMessage]:
        return iter(self._messages)

    def __getitem__(self, index: int) -> UntypedMessage:
        return self._messages[index]

    def reserve(self, messages: Iterable[UntypedMessage]) -> int:
        """Append copies of ``messages``; return the position of the first."""
        batch = [dataclasses.replace(m) for m in messages]
        start = len(self._messages)
        if self.capacity is not None and start + len(batch) > self.capacity:
            raise ValueError(
                f"message pool holds at most {self.capacity} messages, "
                f"cannot add {len(batch)} to {start}"
            )
        self._messages.extend(batch)
        return start

    def clear(self) -> None:
        self._messages.clear()

    def slice(self, length: int, start: int) -> list[UntypedMessage]:
        """The ``length`` messages beginning at position ``start``."""
        if start < 0 or length < 0 or start + length > len(self._messages):
            raise IndexError(
                f"range {start}..{start + length} is outside the "
                f"{len(self._messages)} stored messages"
            )
        return self._messages[start : start + length]

    def sort_by_dst(self) -> None:
        """Order the stored messages by destination."""
        self._messages.sort(key=lambda m: m.dst)