from __future__ import annotations

import pytest

from hxserialize.hxtypes import HxObject


def test_fields_are_attributes() -> None:
    obj = HxObject[int](x=1, y=2)

    assert obj.x == 1
    assert obj["y"] == 2
    with pytest.raises(AttributeError, match=r"'HxObject' object has no field 'z'"):
        obj.z


def test_field_order_is_preserved() -> None:
    obj = HxObject[int]()
    obj["b"] = 1
    obj["a"] = 2

    assert list(obj) == ["b", "a"]


def test_eq() -> None:
    assert HxObject(a=1) == HxObject(a=1)
    assert HxObject(a=1) == {"a": 1}
    assert HxObject(a=1) != HxObject(a=2)


def test_eq__cycle() -> None:
    x = HxObject[object](a=1)
    x["self"] = x
    y = HxObject[object](a=1)
    y["self"] = y

    assert x == y


def test_repr() -> None:
    assert repr(HxObject()) == "HxObject()"
    assert repr(HxObject(x=1, y="a")) == "HxObject(x=1, y='a')"
    assert repr(HxObject({"a b": 1})) == "HxObject({'a b': 1})"

    obj = HxObject[object](x=1)
    obj["self"] = obj
    assert repr(obj) == "HxObject(x=1, self=HxObject(...))"
