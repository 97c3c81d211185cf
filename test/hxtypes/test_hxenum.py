from __future__ import annotations

import pytest

from hxserialize.hxtypes import EnumConstruct, HxEnum


class Shape(HxEnum):
    __constructs__ = (
        EnumConstruct("Empty"),
        EnumConstruct("Circle", ("radius",)),
        EnumConstruct("Rect", ("width", "height")),
    )


class Other(HxEnum):
    __constructs__ = (EnumConstruct("Empty"),)


def test_enum_construct() -> None:
    assert EnumConstruct("Empty").arity == 0
    assert EnumConstruct("Rect", ("width", "height")).arity == 2


def test_init() -> None:
    rect = Shape("Rect", 2, 3)

    assert rect.tag == "Rect"
    assert rect.index == 2
    assert rect.params == (2, 3)
    assert rect.width == 2
    assert rect.height == 3


def test_init__omitted_params_are_none() -> None:
    assert Shape("Rect", 2).params == (2, None)
    assert Shape("Circle").radius is None


def test_init__invalid() -> None:
    with pytest.raises(ValueError, match=r"Shape has no constructor 'Square'"):
        Shape("Square")
    with pytest.raises(
        ValueError, match=r"Shape\.Circle takes 1 arguments but 2 were given"
    ):
        Shape("Circle", 1, 2)


def test_get_enum_construct() -> None:
    assert Shape.get_enum_constructs()[1].name == "Circle"
    assert Shape.get_enum_construct("Rect") == EnumConstruct(
        "Rect", ("width", "height")
    )
    assert Shape.get_enum_construct(0) == EnumConstruct("Empty")
    assert Shape.get_enum_construct(3) is None
    assert Shape.get_enum_construct(-1) is None
    assert Shape.get_enum_construct("Square") is None


def test_create() -> None:
    assert Shape.create("Circle", [1]) == Shape("Circle", 1)
    assert Shape.create(2, (4, 5)) == Shape("Rect", 4, 5)
    assert Shape.create(0) == Shape("Empty")

    with pytest.raises(ValueError, match=r"Shape has no constructor #9"):
        Shape.create(9)


def test_unknown_attribute() -> None:
    with pytest.raises(AttributeError, match=r"'Shape' object has no attribute 'x'"):
        Shape("Circle", 1).x
    # Params of other constructors are not attributes
    with pytest.raises(AttributeError):
        Shape("Circle", 1).width


def test_eq() -> None:
    assert Shape("Circle", 1) == Shape("Circle", 1)
    assert Shape("Circle", 1) != Shape("Circle", 2)
    assert Shape("Empty") != Shape("Circle")
    assert Shape("Empty") != Other("Empty")
    assert Shape("Empty") != "Empty"


def test_hash() -> None:
    assert hash(Shape("Circle", 1)) == hash(Shape("Circle", 1))
    assert len({Shape("Empty"), Shape("Empty"), Shape("Circle", 1)}) == 2


def test_repr() -> None:
    assert repr(Shape("Empty")) == "Shape.Empty"
    assert repr(Shape("Rect", 1, "a")) == "Shape.Rect(1, 'a')"
