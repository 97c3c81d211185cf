from __future__ import annotations

import logging

import pytest

from hxserialize import (
    InvalidTypeNameHxSerializeError,
    TypeRegistry,
    UnresolvedTypeDecodeHxSerializeError,
    loads,
    register_serializable_class,
    register_serializable_enum,
    serializable_class,
    serializable_enum,
)
from hxserialize.hxtypes import EnumConstruct, HxEnum
from hxserialize.resolver import EnumType, get_type_name


class Apple:
    pass


class Pear:
    hx_name = "fruit.Pear"


class Answer(HxEnum):
    __constructs__ = (EnumConstruct("Yes"), EnumConstruct("No"))


def test_get_type_name() -> None:
    assert get_type_name(Apple) == "Apple"
    assert get_type_name(Pear) == "fruit.Pear"


def test_type_registry__register_class(registry: TypeRegistry) -> None:
    assert registry.register_class(Apple) is Apple
    registry.register_class(Pear)
    registry.register_class(Apple, "fruit.Apple")

    assert registry.resolve_class("Apple") is Apple
    assert registry.resolve_class("fruit.Apple") is Apple
    assert registry.resolve_class("fruit.Pear") is Pear
    assert registry.resolve_class("Pear") is None
    assert dict(registry.classes) == {
        "Apple": Apple,
        "fruit.Pear": Pear,
        "fruit.Apple": Apple,
    }
    assert "Apple" in registry
    assert "Pear" not in registry


def test_type_registry__register_class_requires_type(
    registry: TypeRegistry,
) -> None:
    def make_apple() -> Apple:
        return Apple()

    with pytest.raises(TypeError, match=r"cls must be a class"):
        registry.register_class(make_apple, "Apple")  # type: ignore[type-var]
    with pytest.raises(TypeError, match=r"cls must be a class"):
        registry.register_class(Apple())  # type: ignore[type-var]
    assert "Apple" not in registry


def test_type_registry__register_enum(registry: TypeRegistry) -> None:
    assert registry.register_enum(Answer) is Answer

    assert registry.resolve_enum("Answer") is Answer
    assert registry.resolve_class("Answer") is None
    assert dict(registry.enums) == {"Answer": Answer}


def test_type_registry__register_enum_requires_enum_type(
    registry: TypeRegistry,
) -> None:
    assert not issubclass(Apple, EnumType)
    assert issubclass(Answer, EnumType)

    with pytest.raises(TypeError, match=r"enum must be a type with"):
        registry.register_enum(Apple)  # type: ignore[type-var]
    with pytest.raises(TypeError, match=r"enum must be a type with"):
        registry.register_enum(Answer("Yes"))  # type: ignore[type-var]


@pytest.mark.parametrize("name", ["", "null", "undefined"])
def test_type_registry__rejects_reserved_names(
    registry: TypeRegistry, name: str
) -> None:
    with pytest.raises(
        InvalidTypeNameHxSerializeError,
        match=r"Unable to register that name as a serializable type",
    ) as exc_info:
        registry.register_class(Apple, name)

    assert exc_info.value.name == name
    assert exc_info.value.type is Apple
    assert isinstance(exc_info.value, ValueError)

    with pytest.raises(InvalidTypeNameHxSerializeError):
        registry.register_enum(Answer, name)

    assert len(registry.classes) == 0
    assert len(registry.enums) == 0


def test_type_registry__rejects_types_without_a_name(registry: TypeRegistry) -> None:
    class Unnamed:
        hx_name = None

    nameless = type("nameless", (), {})
    nameless.__name__ = "null"

    # hx_name = None falls back to __name__
    assert registry.register_class(Unnamed) is Unnamed
    with pytest.raises(InvalidTypeNameHxSerializeError):
        registry.register_class(nameless)
    with pytest.raises(
        InvalidTypeNameHxSerializeError, match=r"Unable to register that name"
    ):
        registry.register_class(Apple, 42)  # type: ignore[arg-type]


def test_type_registry__replaces_existing_registration(
    registry: TypeRegistry, caplog: pytest.LogCaptureFixture
) -> None:
    class OtherApple:
        pass

    with caplog.at_level(logging.DEBUG, logger="hxserialize.resolver"):
        registry.register_class(Apple)
        registry.register_class(OtherApple, "Apple")

    assert registry.resolve_class("Apple") is OtherApple
    assert [r.getMessage() for r in caplog.records] == [
        f"Registered class {Apple!r} as 'Apple'",
        f"Replacing class registered as 'Apple': {Apple!r} -> {OtherApple!r}",
    ]


def test_type_registry__copies_other_registry(registry: TypeRegistry) -> None:
    registry.register_class(Apple)
    registry.register_enum(Answer)

    copy = TypeRegistry(registry)
    copy.register_class(Pear)

    assert copy.resolve_class("Apple") is Apple
    assert copy.resolve_enum("Answer") is Answer
    assert registry.resolve_class("fruit.Pear") is None


def test_type_registry__decorators(registry: TypeRegistry) -> None:
    @serializable_class(registry=registry)
    class Plum:
        pass

    @serializable_class(name="fruit.Fig", registry=registry)
    class Fig:
        pass

    @serializable_enum(registry=registry)
    class Ripeness(HxEnum):
        __constructs__ = (EnumConstruct("Ripe"),)

    assert registry.resolve_class("Plum") is Plum
    assert registry.resolve_class("fruit.Fig") is Fig
    assert registry.resolve_enum("Ripeness") is Ripeness


def test_default_registry(isolated_default_registry: TypeRegistry) -> None:
    assert register_serializable_class(Apple) is Apple
    assert register_serializable_enum(Answer, "Reply") is Answer

    @serializable_class
    class Quince:
        pass

    @serializable_enum
    class Season(HxEnum):
        __constructs__ = (EnumConstruct("Summer"),)

    assert isolated_default_registry.resolve_class("Apple") is Apple
    assert isolated_default_registry.resolve_class("Quince") is Quince
    assert isolated_default_registry.resolve_enum("Reply") is Answer
    assert isolated_default_registry.resolve_enum("Season") is Season

    # loads() uses the default registry when no resolver is given
    assert isinstance(loads("cy5:Appleg"), Apple)
    assert loads("wy5:Replyy2:No:0") == Answer("No")


def test_default_registry__is_restored_after_test() -> None:
    with pytest.raises(
        UnresolvedTypeDecodeHxSerializeError, match=r"Class not found 'Apple'"
    ):
        loads("cy5:Appleg")


def test_custom_resolver() -> None:
    class PrefixResolver:
        """Allow any class with a name in a known package."""

        def resolve_class(self, name: str) -> type | None:
            if name.startswith("fruit."):
                return type(name.removeprefix("fruit."), (), {})
            return None

        def resolve_enum(self, name: str) -> type[EnumType] | None:
            return None

    result = loads("cy10:fruit.Kiwiy4:ripetg", resolver=PrefixResolver())

    assert type(result).__name__ == "Kiwi"
    assert result.ripe is True
    with pytest.raises(
        UnresolvedTypeDecodeHxSerializeError, match=r"Class not found 'Kiwi'"
    ):
        loads("cy4:Kiwig", resolver=PrefixResolver())
