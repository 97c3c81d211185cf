"""Control which classes and enums can be created when decoding."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Protocol, TypeVar, overload, runtime_checkable

from hxserialize._errors import InvalidTypeNameHxSerializeError
from hxserialize.constants import RESERVED_TYPE_NAMES
from hxserialize.hxtypes.hxenum import EnumConstruct

if TYPE_CHECKING:
    from typing_extensions import Self

logger = logging.getLogger(__name__)

ClassT = TypeVar("ClassT", bound=type)
EnumT = TypeVar("EnumT", bound="type[EnumType]")


@runtime_checkable
class EnumType(Protocol):
    """The interface of an enum type that can be decoded.

    [`HxEnum`](`hxserialize.hxtypes.HxEnum`) implements this, but other types
    can too.
    """

    @classmethod
    def get_enum_constructs(cls) -> Sequence[EnumConstruct]:
        """Get the enum's constructors, in index order."""

    @classmethod
    def create(cls, construct: str | int, params: Sequence[object] = ()) -> Self:
        """Create an instance using the constructor with this name or index."""


class TypeResolver(Protocol):
    """Look up the Python types to create for class and enum names in the data.

    A resolver is the allow-list of types that decoding can create. Returning
    `None` prevents a type being created, and decoding fails instead.
    """

    def resolve_class(self, name: str) -> type | None:
        """Get the class registered with `name`, or None."""

    def resolve_enum(self, name: str) -> type[EnumType] | None:
        """Get the enum registered with `name`, or None."""


def get_type_name(type_: type) -> str | None:
    """Get the name a type is serialized with.

    This is the type's `hx_name` attribute if it has one (Haxe names are
    usually qualified with their package, like `geom.Point`), otherwise the
    Python class name.
    """
    name = getattr(type_, "hx_name", None)
    if name is None:
        name = getattr(type_, "__name__", None)
    return name


def validate_type_name(name: object, type_: object) -> str:
    if name is None:
        raise InvalidTypeNameHxSerializeError(
            "Unable to get the type's name", name=name, type=type_
        )
    if not isinstance(name, str) or name in RESERVED_TYPE_NAMES:
        raise InvalidTypeNameHxSerializeError(
            "Unable to register that name as a serializable type",
            name=name,
            type=type_,
        )
    return name


@dataclass(init=False)
class TypeRegistry(TypeResolver):
    """
    A `TypeResolver` that allows the classes and enums registered with it.

    For security, decoding will not create a class or enum instance unless its
    type has been registered as safe. Data from an untrusted source could
    otherwise name any type, and populate its fields with arbitrary values.

    Registering a type with a name that is already registered replaces the
    existing registration.

    Examples
    --------
    >>> class Point:
    ...     x: int
    ...     y: int
    >>> registry = TypeRegistry()
    >>> registry.register_class(Point)
    <class 'hxserialize.resolver.Point'>
    >>> registry.resolve_class("Point") is Point
    True
    >>> registry.resolve_class("Other") is None
    True
    """

    classes: Mapping[str, type]
    enums: Mapping[str, type[EnumType]]
    _classes: dict[str, type]
    _enums: dict[str, type[EnumType]]

    def __init__(self, entries: TypeRegistry | None = None) -> None:
        self._classes = {}
        self._enums = {}
        self.classes = MappingProxyType(self._classes)
        self.enums = MappingProxyType(self._enums)
        if entries:
            self.register_all(entries)

    def register_class(self, cls: ClassT, name: str | None = None) -> ClassT:
        """Allow instances of `cls` to be decoded from data that uses `name`.

        `name` defaults to `get_type_name(cls)`. Returns `cls`, so this can be
        used as a class decorator.
        """
        if not isinstance(cls, type):
            raise TypeError(f"cls must be a class: {cls!r}")
        type_name = validate_type_name(
            get_type_name(cls) if name is None else name, cls
        )
        if type_name in self._classes and self._classes[type_name] is not cls:
            logger.debug(
                "Replacing class registered as %r: %r -> %r",
                type_name,
                self._classes[type_name],
                cls,
            )
        else:
            logger.debug("Registered class %r as %r", cls, type_name)
        self._classes[type_name] = cls
        return cls

    def register_enum(self, enum: EnumT, name: str | None = None) -> EnumT:
        """Allow instances of the `enum` type to be decoded from data that uses `name`.

        `name` defaults to `get_type_name(enum)`. Returns `enum`, so this can
        be used as a class decorator.
        """
        if not isinstance(enum, type) or not issubclass(enum, EnumType):
            raise TypeError(
                f"enum must be a type with get_enum_constructs() and create() "
                f"methods: {enum!r}"
            )
        type_name = validate_type_name(
            get_type_name(enum) if name is None else name, enum
        )
        if type_name in self._enums and self._enums[type_name] is not enum:
            logger.debug(
                "Replacing enum registered as %r: %r -> %r",
                type_name,
                self._enums[type_name],
                enum,
            )
        else:
            logger.debug("Registered enum %r as %r", enum, type_name)
        self._enums[type_name] = enum
        return enum

    def register_all(self, registry: TypeRegistry) -> None:
        """
        Copy the registrations of another registry into this one.

        Existing registrations that also occur in `registry` are overwritten.
        """
        self._classes.update(registry.classes)
        self._enums.update(registry.enums)

    def resolve_class(self, name: str) -> type | None:
        return self._classes.get(name)

    def resolve_enum(self, name: str) -> type[EnumType] | None:
        return self._enums.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._classes or name in self._enums


default_registry: TypeRegistry = TypeRegistry()
"""The registry used to resolve types when decoding without a `resolver`.

The registry is shared by the whole process. Register types before decoding
starts in other threads, as registration is not synchronised.
"""


def register_serializable_class(cls: ClassT, name: str | None = None) -> ClassT:
    """Register a class with the `default_registry`, allowing it to be decoded.

    Examples
    --------
    >>> @register_serializable_class
    ... class Apple:
    ...     pass
    >>> default_registry.resolve_class("Apple") is Apple
    True
    """
    return default_registry.register_class(cls, name)


def register_serializable_enum(enum: EnumT, name: str | None = None) -> EnumT:
    """Register an enum type with the `default_registry`, allowing it to be decoded."""
    return default_registry.register_enum(enum, name)


@overload
def serializable_class(cls: ClassT, /) -> ClassT: ...


@overload
def serializable_class(
    *, name: str | None = None, registry: TypeRegistry | None = None
) -> Callable[[ClassT], ClassT]: ...


def serializable_class(
    cls: ClassT | None = None,
    /,
    *,
    name: str | None = None,
    registry: TypeRegistry | None = None,
) -> ClassT | Callable[[ClassT], ClassT]:
    """Class decorator that registers a class as serializable.

    Use as `@serializable_class` to register with the `default_registry`, or
    `@serializable_class(name="geom.Point", registry=my_registry)`.
    """

    def register(cls: ClassT) -> ClassT:
        return (registry or default_registry).register_class(cls, name)

    if cls is not None:
        return register(cls)
    return register


@overload
def serializable_enum(enum: EnumT, /) -> EnumT: ...


@overload
def serializable_enum(
    *, name: str | None = None, registry: TypeRegistry | None = None
) -> Callable[[EnumT], EnumT]: ...


def serializable_enum(
    enum: EnumT | None = None,
    /,
    *,
    name: str | None = None,
    registry: TypeRegistry | None = None,
) -> EnumT | Callable[[EnumT], EnumT]:
    """Class decorator that registers an enum type as serializable.

    Works like [`serializable_class`](`hxserialize.resolver.serializable_class`).
    """

    def register(enum: EnumT) -> EnumT:
        return (registry or default_registry).register_enum(enum, name)

    if enum is not None:
        return register(enum)
    return register
