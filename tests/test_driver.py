import pytest

from creambus.driver import BusDriver, Driver
from creambus.lookup import SubscriberLookupData, SubscriberOldLookupData
from creambus.message import UntypedMessage
from creambus.pipeline import MemoryPools
from creambus.pool import BufferPool, MessagePool

MAX_GROUPS = 16
MAX_SUBSCRIBERS = 4


class GroupDriver(BusDriver):
    def __init__(self):
        self.subscribed = []
        self.unsubscribed = []

    def on_subscribe(self, subscriber_id):
        self.subscribed.append(subscriber_id)
        return [SubscriberLookupData(local_group_id=1, global_group_id=10)]

    def on_unsubscribe(self, subscriber_id):
        self.unsubscribed.append(subscriber_id)
        return [SubscriberOldLookupData(global_group_id=10)]


def make_memory():
    return MemoryPools(
        write=BufferPool(MAX_SUBSCRIBERS, 1024),
        read=BufferPool(MAX_SUBSCRIBERS, 1024),
        message=MessagePool(),
    )


def test_bus_driver_is_abstract():
    with pytest.raises(TypeError):
        BusDriver()


def test_on_subscribe_records_lookup_entries():
    inner = GroupDriver()
    driver = Driver(inner, MAX_GROUPS, MAX_SUBSCRIBERS)
    driver.on_subscribe(2)
    row = 2 * MAX_GROUPS
    assert inner.subscribed == [2]
    assert driver.lookup_table.input[row + 1] == 10
    assert driver.lookup_table.output[row + 10] == 1
    assert driver.lookup_table.input[row] == 1


def test_on_unsubscribe_clears_lookup_entries():
    inner = GroupDriver()
    driver = Driver(inner, MAX_GROUPS, MAX_SUBSCRIBERS)
    driver.on_subscribe(2)
    driver.on_unsubscribe(2)
    row = 2 * MAX_GROUPS
    assert inner.unsubscribed == [2]
    assert bytes(driver.lookup_table.input[row : row + MAX_GROUPS]) == bytes(MAX_GROUPS)
    assert bytes(driver.lookup_table.output[row : row + MAX_GROUPS]) == bytes(MAX_GROUPS)


def test_inner_is_kept():
    inner = GroupDriver()
    driver = Driver(inner, MAX_GROUPS, MAX_SUBSCRIBERS)
    assert driver.inner is inner


def test_process_messages_delivers_between_group_members():
    driver = Driver(GroupDriver(), MAX_GROUPS, MAX_SUBSCRIBERS)
    driver.on_subscribe(1)
    driver.on_subscribe(2)
    memory = make_memory()
    outgoing = memory.read.outgoing(1)
    incoming = memory.write.incoming(2)
    assert outgoing.send(UntypedMessage(dst=2, group=1, src=0, kind=1))

    driver.process_messages(memory, range(0, 3))

    received = incoming.pop_all()
    assert len(received) == 1
    message = received[0]
    assert (message.dst, message.src, message.group, message.kind) == (2, 1, 1, 1)
    assert len(outgoing) == 0


def test_process_messages_drops_messages_to_non_members():
    driver = Driver(GroupDriver(), MAX_GROUPS, MAX_SUBSCRIBERS)
    driver.on_subscribe(1)
    memory = make_memory()
    outgoing = memory.read.outgoing(1)
    incoming = memory.write.incoming(3)
    assert outgoing.send(UntypedMessage(dst=3, group=1, kind=1))

    driver.process_messages(memory, range(0, 4))

    assert len(incoming) == 0
    assert len(outgoing) == 0