import pytest

from hxserialize._references import (
    ObjectReferenceHxSerializeError,
    ReferenceLog,
    SerializedId,
    SerializedIdOutOfRangeHxSerializeError,
)


def test_reference_log__values_receive_sequential_ids_from_0() -> None:
    log = ReferenceLog[object]()

    assert log.record_reference(object()) == SerializedId(0)
    assert log.record_reference(object()) == SerializedId(1)
    same_obj = set[object]()
    assert log.record_reference(same_obj) == SerializedId(2)
    assert log.record_reference(same_obj) == SerializedId(3)
    assert len(log) == 4


def test_reference_log__can_be_retrieved_by_id() -> None:
    obj1, obj2, set1 = object(), object(), set[object]()
    log = ReferenceLog[object]()

    obj1_id = log.record_reference(obj1)
    obj2_id = log.record_reference(obj2)
    set1_id = log.record_reference(set1)

    assert log.get_object(obj1_id) is obj1
    assert log.get_object(obj2_id) is obj2
    assert log.get_object(set1_id) is set1
    assert list(log) == [obj1, obj2, set1]


def test_reference_log__duplicate_values_are_not_merged() -> None:
    log = ReferenceLog[str]()

    log.record_reference("a")
    log.record_reference("a")

    assert len(log) == 2
    assert log.get_object(SerializedId(1)) == "a"


@pytest.mark.parametrize("serialized_id", [-1, 2, 100])
def test_reference_log__getting_unrecorded_id_throws(serialized_id: int) -> None:
    log = ReferenceLog[object]()
    log.record_reference(object())
    log.record_reference(object())

    with pytest.raises(
        SerializedIdOutOfRangeHxSerializeError,
        match=r"Serialized ID has not been recorded in the log",
    ) as exc_info:
        log.get_object(SerializedId(serialized_id))

    assert isinstance(exc_info.value, ObjectReferenceHxSerializeError)
    assert isinstance(exc_info.value, KeyError)
    assert exc_info.value.serialized_id == serialized_id
    assert exc_info.value.size == 2
