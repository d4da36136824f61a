"""Errors raised by the message bus."""

from __future__ import annotations


class BusError(Exception):
    """Base class of every bus error; equal when type and fields match."""

    _fields: tuple[str, ...] = ()

    def _key(self) -> tuple:
        return tuple(getattr(self, name) for name in self._fields)

    def __eq__(self, other: object) -> bool:
        if type(self) is not type(other):
            return NotImplemented
        return self._key() == other._key()  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._key()))

    def __repr__(self) -> str:
        args = ", ".join(f"{name}={getattr(self, name)!r}" for name in self._fields)
        return f"{type(self).__name__}({args})"


class InvalidSubscriberId(BusError):
    def __init__(self) -> None:
        super().__init__("Cannot remove subscriber with id == 0")


class RequestAlreadySent(BusError):
    def __init__(self) -> None:
        super().__init__("Remove request already sent")


class SubscriberNotRegistered(BusError):
    def __init__(self) -> None:
        super().__init__("Subscriber not registered")


class PoolExhausted(BusError):
    _fields = ("maximum",)

    def __init__(self, maximum: int) -> None:
        self.maximum = maximum
        super().__init__(
            "Cannot allocate buffer. Pool is full. "
            f"Possible count of subscribers: {maximum}"
        )


class TooBigPoolSize(BusError):
    _fields = ("current", "maximum")

    def __init__(self, current: int, maximum: int) -> None:
        self.current = current
        self.maximum = maximum
        super().__init__(
            f"Size of pool is too big ({current}). Size should be less than {maximum} bytes"
        )


class ValueTooSmall(BusError):
    _fields = ("name", "current", "minimum")

    def __init__(self, name: str, current: int, minimum: int) -> None:
        self.name = name
        self.current = current
        self.minimum = minimum
        super().__init__(
            f"Config '{name}' is too small: {current}. Minimum required: {minimum}"
        )


class ValueTooBig(BusError):
    _fields = ("name",)

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Config '{name}' is too big.")


class ValueOutOfRange(BusError):
    _fields = ("name", "current", "minimum", "maximum")

    def __init__(self, name: str, current: int, minimum: int, maximum: int) -> None:
        self.name = name
        self.current = current
        self.minimum = minimum
        self.maximum = maximum
        super().__init__(
            f"Config '{name}' is out of range: {current}. "
            f"Valid range: [{minimum}..{maximum}]"
        )


class ValueIsNotMultipleOf2(BusError):
    _fields = ("name",)

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Config '{name}' is not multiple of 2")


class GroupsIsNotPowerOf2(BusError):
    def __init__(self) -> None:
        super().__init__("'max_groups' must be a power of 2")


class DriverError(BusError):
    _fields = ("message",)

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)