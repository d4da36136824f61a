"""Fixed-size bus messages and the small value types they carry."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar

from creambus.defines import MESSAGE_SIZE, PAYLOAD_SIZE

if TYPE_CHECKING:
    from creambus.subscriber import SubscriberId

_HEADER_FIELDS = ("dst", "group", "src", "kind")


def _check_u8(name: str, value: int) -> int:
    value = int(value)
    if not 0 <= value <= 0xFF:
        raise ValueError(f"{name} must be in range 0..=255, got {value}")
    return value


@dataclass(order=True)
class UntypedMessage:
    """A 32-byte message: four header bytes followed by a 28-byte payload."""

    dst: int = 0
    group: int = 0
    src: int = 0
    kind: int = 0
    payload: bytes = field(default=bytes(PAYLOAD_SIZE))

    def __setattr__(self, name: str, value: object) -> None:
        if name in _HEADER_FIELDS:
            value = _check_u8(name, value)  # type: ignore[arg-type]
        elif name == "payload":
            value = bytes(value)  # type: ignore[arg-type]
            if len(value) != PAYLOAD_SIZE:
                raise ValueError(
                    f"payload must be exactly {PAYLOAD_SIZE} bytes, got {len(value)}"
                )
        super().__setattr__(name, value)

    def to_bytes(self) -> bytes:
        """Return the wire form: dst, group, src, kind, then the payload."""
        return bytes((self.dst, self.group, self.src, self.kind)) + self.payload

    @classmethod
    def from_bytes(cls, data: bytes) -> UntypedMessage:
        """Build a message from its exact wire form."""
        data = bytes(data)
        if len(data) != MESSAGE_SIZE:
            raise ValueError(
                f"message must be exactly {MESSAGE_SIZE} bytes, got {len(data)}"
            )
        dst, group, src, kind = data[:4]
        return cls(dst=dst, group=group, src=src, kind=kind, payload=data[4:])

    def with_dst(self, dst: int) -> UntypedMessage:
        self.dst = dst
        return self

    def with_group(self, group: int) -> UntypedMessage:
        self.group = group
        return self

    def with_kind(self, kind: int) -> UntypedMessage:
        self.kind = kind
        return self


@dataclass(frozen=True, order=True)
class MessageType:
    """A 16-bit message type code."""

    value: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.value <= 0xFFFF:
            raise ValueError(f"message type must be in range 0..=65535, got {self.value}")

    @classmethod
    def from_le_bytes(cls, data: bytes) -> MessageType:
        data = bytes(data)
        if len(data) != 2:
            raise ValueError(f"message type needs exactly 2 bytes, got {len(data)}")
        return cls(int.from_bytes(data, "little"))

    def __int__(self) -> int:
        return self.value

    def __index__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True, order=True)
class Destination:
    """The id of the subscriber a message is addressed to."""

    ZERO: ClassVar[Destination]

    value: int = 0

    def __post_init__(self) -> None:
        _check_u8("destination", self.value)

    def as_subscriber_id(self) -> SubscriberId:
        from creambus.subscriber import SubscriberId

        return SubscriberId(self.value)

    def __int__(self) -> int:
        return self.value

    def __index__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)


Destination.ZERO = Destination(0)