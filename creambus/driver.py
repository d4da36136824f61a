"""The driver interface of the bus and the routing machinery around it."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable

from creambus.lookup import LookupTable, SubscriberLookupData, SubscriberOldLookupData
from creambus.pipeline import MemoryPools, MessagePipeline, PipelineData


class BusDriver(ABC):
    """Decides which groups a subscriber joins and leaves."""

    @abstractmethod
    def on_subscribe(self, subscriber_id: int) -> Iterable[SubscriberLookupData]:
        """Group mappings of a subscriber that has just joined the bus."""

    @abstractmethod
    def on_unsubscribe(self, subscriber_id: int) -> Iterable[SubscriberOldLookupData]:
        """Groups a subscriber that is leaving the bus was a member of."""


class Driver:
    """A user driver together with the lookup table and pipeline it feeds."""

    def __init__(self, inner: BusDriver, max_groups: int, max_subscribers: int) -> None:
        self.lookup_table = LookupTable(max_groups, max_subscribers)
        self.pipeline = MessagePipeline(max_subscribers)
        self.inner = inner

    def on_subscribe(self, subscriber_id: int) -> None:
        """Ask the driver for a new subscriber's groups and record them."""
        subscriber_id = int(subscriber_id)
        self.lookup_table.add(subscriber_id, self.inner.on_subscribe(subscriber_id))

    def on_unsubscribe(self, subscriber_id: int) -> None:
        """Ask the driver for a departing subscriber's groups and forget them."""
        subscriber_id = int(subscriber_id)
        self.lookup_table.remove(subscriber_id, self.inner.on_unsubscribe(subscriber_id))

    def process_messages(self, memory: MemoryPools, subscriber_range: range) -> None:
        """Deliver the messages queued by the subscribers in ``subscriber_range``."""
        data = PipelineData(
            lookup_table=self.lookup_table,
            memory=memory,
            subscriber_range=subscriber_range,
        )
        self.pipeline.dispatch_messages(data)