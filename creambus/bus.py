"""The message bus: subscriber registration and the tick loop."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from creambus.buffer import Incoming, Outgoing
from creambus.config import BusConfig, ValidConfig
from creambus.driver import BusDriver, Driver
from creambus.errors import (
    InvalidSubscriberId,
    PoolExhausted,
    RequestAlreadySent,
    SubscriberNotRegistered,
)
from creambus.pipeline import MemoryPools
from creambus.pool import BufferPool, MessagePool
from creambus.subscriber import Subscriber, SubscriberId

DriverFactory = Callable[[ValidConfig, Outgoing], BusDriver]
SubscriberFactory = Callable[[Incoming, Outgoing], Any]


class _IdMint:
    """Hands out small integer ids, reusing recycled ones first."""

    def __init__(self, reserved: int, limit: int = 256) -> None:
        self._next = reserved
        self._limit = limit
        self._free: list[int] = []

    def issue(self) -> int:
        if self._free:
            return self._free.pop()
        if self._next >= self._limit:
            raise RuntimeError("no subscriber ids left")
        value = self._next
        self._next += 1
        return value

    def recycle(self, value: int) -> None:
        self._free.append(value)

    def in_use(self, value: int) -> bool:
        return 0 <= value < self._next and value not in self._free

    @property
    def last(self) -> int:
        return self._next - 1

    @property
    def used(self) -> int:
        return self._next - len(self._free)


class MessageBus:
    """Routes fixed-size messages between registered subscribers once per tick."""

    def __init__(self, config: BusConfig, driver_factory: DriverFactory) -> None:
        valid = config.into_valid()

        max_subscribers = valid.max_subscribers
        max_messages = valid.max_messages

        self._write_pool = BufferPool(max_subscribers, max_messages)
        self._read_pool = BufferPool(max_subscribers, max_messages)

        outgoing = self._read_pool.outgoing(0)
        # Slot 0 of the incoming side swallows messages addressed to nobody.
        trash = self._write_pool.incoming(0)
        if outgoing is None or trash is None:
            raise RuntimeError("buffer pools must hold the reserved slot 0")

        self._driver = Driver(
            driver_factory(valid, outgoing), valid.max_groups, max_subscribers
        )
        self._pool = MessagePool(capacity=max_subscribers * max_messages)
        self._subscribers: list[Any | None] = [None] * max_subscribers
        self._uninit: list[tuple[SubscriberId, Any]] = []
        self._remove_requests: list[SubscriberId] = []
        self._removed: list[Any] = []
        self._mint = _IdMint(reserved=1)

    @property
    def driver(self) -> BusDriver:
        """The user driver the bus was built with."""
        return self._driver.inner

    def add_subscriber(self, factory: SubscriberFactory) -> SubscriberId:
        """Register a subscriber built by ``factory(incoming, outgoing)``.

        It starts receiving notifications from the next tick.
        """
        raw_id = self._mint.issue()
        outgoing = self._read_pool.outgoing(raw_id)
        if outgoing is None:
            self._mint.recycle(raw_id)
            raise PoolExhausted(self._read_pool.capacity)
        incoming = self._write_pool.incoming(raw_id)
        if incoming is None:
            raise RuntimeError("buffer pools must be sliced equally")

        subscriber_id = SubscriberId(raw_id)
        self._uninit.append((subscriber_id, factory(incoming, outgoing)))
        return subscriber_id

    def send_remove_request(self, subscriber_id: SubscriberId | int) -> None:
        """Ask for a subscriber to be removed on the next tick."""
        subscriber_id = SubscriberId(int(subscriber_id))
        if subscriber_id == SubscriberId.ZERO:
            raise InvalidSubscriberId()
        if subscriber_id in self._remove_requests:
            raise RequestAlreadySent()
        if not self._mint.in_use(subscriber_id.value):
            raise SubscriberNotRegistered()
        self._remove_requests.append(subscriber_id)

    def removed(self) -> list[Any]:
        """Take the subscribers removed so far, in the order of their removal."""
        taken, self._removed = self._removed, []
        return taken

    def subscribers(self) -> int:
        """Number of ids in use, the reserved id 0 included."""
        return self._mint.used

    def _take_subscriber(self, subscriber_id: SubscriberId) -> Any:
        index = subscriber_id.value
        active = self._subscribers[index]
        if active is not None:
            self._subscribers[index] = None
            return active
        for position, (pending_id, pending) in enumerate(self._uninit):
            if pending_id == subscriber_id:
                del self._uninit[position]
                return pending
        raise RuntimeError(f"subscriber {subscriber_id} has no entry")

    def _handle_remove_requests(self) -> None:
        requests, self._remove_requests = self._remove_requests, []
        for subscriber_id in requests:
            index = subscriber_id.value
            self._driver.on_unsubscribe(index)
            self._mint.recycle(index)
            self._read_pool.return_buffer(index)
            self._write_pool.return_buffer(index)
            self._removed.append(self._take_subscriber(subscriber_id))

    def _init_subscribers(self) -> None:
        pending, self._uninit = self._uninit, []
        for subscriber_id, subscriber in pending:
            index = subscriber_id.value
            if self._subscribers[index] is not None:
                raise RuntimeError("Invalid operation: cannot replace subscriber")
            self._subscribers[index] = subscriber
            self._driver.on_subscribe(index)

    def tick(self) -> None:
        """Apply removals and additions, deliver messages, notify subscribers."""
        self._handle_remove_requests()
        self._init_subscribers()

        last = self._mint.last
        memory = MemoryPools(
            write=self._write_pool, read=self._read_pool, message=self._pool
        )
        self._driver.process_messages(memory, range(0, last + 1))

        for subscriber in self._subscribers[1 : last + 1]:
            if subscriber is not None:
                subscriber.notify()

    def full_tick(self) -> None:
        """Two ticks: enough for a message sent in one to be received."""
        self.tick()
        self.tick()


__all__ = ["MessageBus", "Subscriber"]