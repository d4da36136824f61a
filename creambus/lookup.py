"""Group translation tables between subscribers.

Each subscriber owns one row of ``max_groups`` bytes in two tables. The
input table maps a subscriber's local group id to a global group id; the
output table maps a global group id back to that subscriber's local id.
Byte 0 of a row marks whether the subscriber has any entries at all.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass


def _check_u8(name: str, value: int) -> None:
    if not 0 <= value <= 0xFF:
        raise ValueError(f"{name} must be in range 0..=255, got {value}")


@dataclass(frozen=True)
class SubscriberLookupData:
    """One local-to-global group mapping reported for a new subscriber."""

    local_group_id: int
    global_group_id: int

    def __post_init__(self) -> None:
        _check_u8("local_group_id", self.local_group_id)
        _check_u8("global_group_id", self.global_group_id)


@dataclass(frozen=True)
class SubscriberOldLookupData:
    """A global group a departing subscriber was a member of."""

    global_group_id: int

    def __post_init__(self) -> None:
        _check_u8("global_group_id", self.global_group_id)


class LookupTable:
    """Per-subscriber translation between local and global group ids."""

    def __init__(self, max_groups: int, max_subscribers: int) -> None:
        size = max_subscribers * max_groups
        self._input = bytearray(size)
        self._output = bytearray(size)
        self.max_groups = max_groups

    @property
    def input(self) -> memoryview:
        """Read-only view of the local-to-global table."""
        return memoryview(self._input).toreadonly()

    @property
    def output(self) -> memoryview:
        """Read-only view of the global-to-local table."""
        return memoryview(self._output).toreadonly()

    def _row(self, subscriber_id: int) -> int:
        row = int(subscriber_id) * self.max_groups
        if not 0 <= row < len(self._input):
            raise IndexError(f"subscriber id {subscriber_id} is outside the table")
        return row

    def add(
        self, subscriber_id: int, lookup_data: Iterable[SubscriberLookupData]
    ) -> None:
        """Record the group mappings of a subscriber."""
        row = self._row(subscriber_id)
        for data in lookup_data:
            self._input[row + data.local_group_id] = data.global_group_id
            self._output[row + data.global_group_id] = data.local_group_id
            self._input[row] = 1
            self._output[row] = 1

    def remove(
        self, subscriber_id: int, lookup_data: Iterable[SubscriberOldLookupData]
    ) -> None:
        """Forget the group mappings of a subscriber."""
        row = self._row(subscriber_id)
        for data in lookup_data:
            out_idx = row + data.global_group_id
            local_group_id = self._output[out_idx]
            self._input[row + local_group_id] = 0
            self._output[out_idx] = 0
            self._input[row] = 0
            self._output[row] = 0