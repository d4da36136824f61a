# creambus

An in-process message bus. Every message is exactly 32 bytes: a four-byte
header (`dst`, `group`, `src`, `kind`) and a 28-byte payload. Each subscriber
gets its own incoming and outgoing buffer. On every tick the bus collects what
the subscribers have queued, writes the real sender id into `src`, translates
the sender's local group into the receiver's local group, and delivers the
message. A message whose receiver does not belong to the translated group is
dropped.

## Installation

```
pip install .
```

## Modules

- `creambus.message`: `UntypedMessage`, the 32-byte message, with `to_bytes`,
  `from_bytes` and the chaining setters `with_dst`, `with_group`, `with_kind`.
  Header fields must be in 0..=255 and the payload exactly 28 bytes, or
  `ValueError` is raised. Also `MessageType` (a 16-bit code with
  `from_le_bytes`) and `Destination`.
- `creambus.subscriber`: `Subscriber`, an abstract class whose `notify()` the
  bus calls once per tick, and `SubscriberId`.
- `creambus.buffer`: `Incoming` and `Outgoing`, the two sides of a subscriber's
  buffer. `Outgoing.send` queues one message and `Outgoing.send_many` queues all
  or none; both return `False` when the buffer is full. `Incoming.pop` takes the
  most recently delivered message (or `None`), `Incoming.pop_all` takes all of
  them in the same order. Both sides have `len()`, `clear()`,
  `available_space()` and `messages()`.
- `creambus.driver`: `BusDriver`, the abstract class that decides group
  membership. `on_subscribe(subscriber_id)` returns or yields
  `SubscriberLookupData(local_group_id, global_group_id)` entries;
  `on_unsubscribe(subscriber_id)` returns or yields
  `SubscriberOldLookupData(global_group_id)` entries.
- `creambus.lookup`: the two lookup data classes and `LookupTable`.
- `creambus.config`: `BusConfig(max_subscribers, max_messages, max_groups)` and
  the presets `Legacy` (32, 1024, 64), `Middle` (128, 2048, 128) and
  `Advanced` (254, 2048, 128). `into_valid()` checks the values and raises a
  `BusError` subclass such as `ValueTooSmall`, `ValueIsNotMultipleOf2`,
  `ValueTooBig`, `TooBigPoolSize`, `ValueOutOfRange` or `GroupsIsNotPowerOf2`.
- `creambus.errors`: the `BusError` hierarchy. Errors compare equal when their
  type and fields match.
- `creambus.bus`: `MessageBus`, which ties it all together.
- `creambus.pool`, `creambus.pipeline`, `creambus.defines`: the storage pools,
  the routing step and the size constants the bus is built on.

## Example

```python
from creambus.bus import MessageBus
from creambus.config import BusConfig
from creambus.driver import BusDriver
from creambus.lookup import SubscriberLookupData, SubscriberOldLookupData
from creambus.message import UntypedMessage
from creambus.subscriber import Subscriber


class Driver(BusDriver):
    def on_subscribe(self, subscriber_id):
        yield SubscriberLookupData(local_group_id=1, global_group_id=10)

    def on_unsubscribe(self, subscriber_id):
        yield SubscriberOldLookupData(global_group_id=10)


class Sender(Subscriber):
    def __init__(self, incoming, outgoing):
        self.outgoing = outgoing

    def notify(self):
        self.outgoing.send(UntypedMessage(dst=2, group=1, kind=1))


class Listener(Subscriber):
    def __init__(self, incoming, outgoing):
        self.incoming = incoming
        self.received = []

    def notify(self):
        self.received.extend(self.incoming.pop_all())


config = BusConfig(max_subscribers=32, max_messages=1024, max_groups=64)
bus = MessageBus(config, lambda valid_config, outgoing: Driver())
sender_id = bus.add_subscriber(Sender)      # id 1
listener_id = bus.add_subscriber(Listener)  # id 2
bus.full_tick()
```

The driver factory is called with the validated configuration and the
outgoing buffer of the reserved id 0, so a driver can send messages itself.
The user driver is available afterwards as `bus.driver`.

## Subscribers and ticks

- `add_subscriber(factory)` calls `factory(incoming, outgoing)` and returns the
  new `SubscriberId`. Ids start at 1; id 0 is reserved. When every slot is
  taken it raises `PoolExhausted`.
- `tick()` first applies pending removals, then activates new subscribers
  (asking the driver for their groups), delivers the queued messages, and
  finally calls `notify()` on every active subscriber.
- `full_tick()` runs two ticks, enough for a message queued in one to be
  received in the next.
- `send_remove_request(subscriber_id)` schedules a removal for the next tick.
  It raises `InvalidSubscriberId` for id 0, `RequestAlreadySent` for a repeated
  request and `SubscriberNotRegistered` for an id that is not in use.
  `removed()` hands back the removed subscriber objects, oldest first.
- `subscribers()` is the number of ids in use, the reserved id 0 included.

## What it does not do

Everything happens in one process and one thread, and only when `tick()` is
called: there is no background loop, no networking, no persistence of messages
and no command-line tool.

## Running the tests

```
pip install .[test]
pytest
```