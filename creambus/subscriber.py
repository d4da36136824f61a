"""Subscriber identifiers and the subscriber interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar

from creambus.message import Destination


@dataclass(frozen=True, order=True)
class SubscriberId:
    """The one-byte id the bus gives to a subscriber."""

    ZERO: ClassVar[SubscriberId]

    value: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.value <= 0xFF:
            raise ValueError(f"subscriber id must be in range 0..=255, got {self.value}")

    def as_dst(self) -> Destination:
        return Destination(self.value)

    def __int__(self) -> int:
        return self.value

    def __index__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)


SubscriberId.ZERO = SubscriberId(0)


class Subscriber(ABC):
    """Something attached to the bus that is notified once per tick."""

    @abstractmethod
    def notify(self) -> None:
        """Called by the bus after messages have been dispatched."""