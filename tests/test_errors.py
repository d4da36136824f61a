import pytest

from creambus.errors import (
    BusError,
    DriverError,
    GroupsIsNotPowerOf2,
    InvalidSubscriberId,
    PoolExhausted,
    RequestAlreadySent,
    SubscriberNotRegistered,
    TooBigPoolSize,
    ValueIsNotMultipleOf2,
    ValueOutOfRange,
    ValueTooBig,
    ValueTooSmall,
)


@pytest.mark.parametrize(
    "error, text",
    [
        (InvalidSubscriberId(), "Cannot remove subscriber with id == 0"),
        (RequestAlreadySent(), "Remove request already sent"),
        (SubscriberNotRegistered(), "Subscriber not registered"),
        (GroupsIsNotPowerOf2(), "'max_groups' must be a power of 2"),
        (ValueTooBig("max_messages"), "Config 'max_messages' is too big."),
        (
            ValueIsNotMultipleOf2("max_subscribers"),
            "Config 'max_subscribers' is not multiple of 2",
        ),
        (
            ValueTooSmall("max_messages", 0, 1024),
            "Config 'max_messages' is too small: 0. Minimum required: 1024",
        ),
        (
            PoolExhausted(32),
            "Cannot allocate buffer. Pool is full. Possible count of subscribers: 32",
        ),
        (DriverError("driver failed"), "driver failed"),
    ],
)
def test_messages(error, text):
    assert str(error) == text
    assert isinstance(error, BusError)


def test_out_of_range_and_pool_size_messages_hold_fields():
    err = ValueOutOfRange("max_groups", 5, 1, 4)
    assert "max_groups" in str(err)
    assert (err.current, err.minimum, err.maximum) == (5, 1, 4)
    big = TooBigPoolSize(10, 8)
    assert (big.current, big.maximum) == (10, 8)
    assert "(10)" in str(big)


def test_equality_by_type_and_fields():
    assert ValueTooSmall("max_messages", 0, 1024) == ValueTooSmall("max_messages", 0, 1024)
    assert ValueTooSmall("max_messages", 0, 1024) != ValueTooSmall("max_subscribers", 0, 2)
    assert InvalidSubscriberId() == InvalidSubscriberId()
    assert InvalidSubscriberId() != RequestAlreadySent()


def test_hashable():
    errors = {PoolExhausted(32), PoolExhausted(32), PoolExhausted(128)}
    assert len(errors) == 2


def test_raised_and_caught_as_bus_error():
    with pytest.raises(BusError) as info:
        raise ValueIsNotMultipleOf2("max_messages")
    assert info.value == ValueIsNotMultipleOf2("max_messages")