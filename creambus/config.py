"""Bus configuration and its validation."""

from __future__ import annotations

from dataclasses import dataclass

from creambus.defines import MESSAGE_SIZE, METADATA, USIZE_MAX
from creambus.errors import (
    GroupsIsNotPowerOf2,
    TooBigPoolSize,
    ValueIsNotMultipleOf2,
    ValueOutOfRange,
    ValueTooBig,
    ValueTooSmall,
)

_U8_MAX = 0xFF
_MAX_POOL_SIZE = USIZE_MAX // 2 + 1
_MIN_MESSAGES = 1024
_MIN_SUBSCRIBERS = 2


def _is_power_of_two(value: int) -> bool:
    return value > 0 and value & (value - 1) == 0


@dataclass(frozen=True)
class BusConfig:
    """Sizing of a message bus: subscriber slots, messages per slot, groups."""

    max_subscribers: int
    max_messages: int
    max_groups: int

    def into_valid(self) -> ValidConfig:
        """Validate this configuration and wrap it for use by a bus."""
        return ValidConfig(self)


class ValidConfig:
    """A configuration that has passed every check a bus needs."""

    def __init__(self, config: BusConfig) -> None:
        self._check_ranges(config)

        if config.max_subscribers == 0:
            raise ValueTooSmall("max_subscribers", 0, _MIN_SUBSCRIBERS)
        if config.max_subscribers % 2 != 0:
            raise ValueIsNotMultipleOf2("max_subscribers")

        if config.max_messages < _MIN_MESSAGES:
            raise ValueTooSmall("max_messages", config.max_messages, _MIN_MESSAGES)
        if config.max_messages % 2 != 0:
            raise ValueIsNotMultipleOf2("max_messages")

        slice_size = config.max_messages * MESSAGE_SIZE
        if slice_size > USIZE_MAX:
            raise ValueTooBig("max_messages")
        slice_size += METADATA
        if slice_size > USIZE_MAX:
            raise ValueTooBig("max_messages")
        total_size = slice_size * config.max_subscribers
        if total_size > USIZE_MAX:
            raise ValueTooBig("max_messages")

        if total_size > _MAX_POOL_SIZE:
            raise TooBigPoolSize(total_size, _MAX_POOL_SIZE)

        if not _is_power_of_two(config.max_groups):
            raise GroupsIsNotPowerOf2()

        self._config = config

    @staticmethod
    def _check_ranges(config: BusConfig) -> None:
        limits = (
            ("max_subscribers", config.max_subscribers, _U8_MAX),
            ("max_messages", config.max_messages, USIZE_MAX),
            ("max_groups", config.max_groups, _U8_MAX),
        )
        for name, value, maximum in limits:
            if not 0 <= value <= maximum:
                raise ValueOutOfRange(name, value, 0, maximum)

    @property
    def config(self) -> BusConfig:
        return self._config

    @property
    def max_subscribers(self) -> int:
        return self._config.max_subscribers

    @property
    def max_messages(self) -> int:
        return self._config.max_messages

    @property
    def max_groups(self) -> int:
        return self._config.max_groups

    def __repr__(self) -> str:
        return f"ValidConfig({self._config!r})"


Legacy = BusConfig(max_subscribers=32, max_messages=1024, max_groups=64)
Middle = BusConfig(max_subscribers=128, max_messages=2048, max_groups=128)
Advanced = BusConfig(max_subscribers=_U8_MAX - 1, max_messages=2048, max_groups=128)