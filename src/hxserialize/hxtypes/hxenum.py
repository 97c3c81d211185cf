from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from reprlib import recursive_repr
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from typing_extensions import Self


@dataclass(frozen=True, slots=True)
class EnumConstruct:
    """One constructor (variant) of a Haxe enum.

    Parameters
    ----------
    name
        The constructor's name, as it occurs in serialized data.
    params
        The names of the constructor's parameters, in order.
    """

    name: str
    params: tuple[str, ...] = ()

    @property
    def arity(self) -> int:
        return len(self.params)


class HxEnum:
    """
    Base class for Python equivalents of Haxe enums.

    Haxe enums are tagged unions: each value is one of the enum's constructors,
    with the constructor's arguments. Subclasses list their constructors in
    order in `__constructs__`. The order matters, as serialized data can refer
    to constructors by their index.

    Enum types must be registered with a `TypeRegistry` (or otherwise allowed
    by the `TypeResolver` in use) before they can be decoded.

    Examples
    --------
    >>> class Color(HxEnum):
    ...     __constructs__ = (
    ...         EnumConstruct("Red"),
    ...         EnumConstruct("Rgb", ("r", "g", "b")),
    ...     )
    >>> rgb = Color("Rgb", 255, 0, 0)
    >>> rgb
    Color.Rgb(255, 0, 0)
    >>> rgb.tag, rgb.index, rgb.params, rgb.g
    ('Rgb', 1, (255, 0, 0), 0)
    >>> Color.create(0)
    Color.Red
    """

    __slots__ = ("tag", "index", "params")

    __constructs__: ClassVar[Sequence[EnumConstruct]] = ()

    tag: str
    index: int
    params: tuple[object, ...]

    def __init__(self, tag: str, *params: object) -> None:
        construct = self.get_enum_construct(tag)
        if construct is None:
            raise ValueError(f"{type(self).__name__} has no constructor {tag!r}")
        if len(params) > construct.arity:
            raise ValueError(
                f"{type(self).__name__}.{construct.name} takes {construct.arity} "
                f"arguments but {len(params)} were given"
            )
        # Trailing arguments can be omitted when they're optional in Haxe
        params = params + (None,) * (construct.arity - len(params))
        self.tag = construct.name
        self.index = list(self.get_enum_constructs()).index(construct)
        self.params = params

    @classmethod
    def get_enum_constructs(cls) -> Sequence[EnumConstruct]:
        return cls.__constructs__

    @classmethod
    def get_enum_construct(cls, construct: str | int) -> EnumConstruct | None:
        """Look up a constructor by name or index, or return None."""
        constructs = cls.get_enum_constructs()
        if isinstance(construct, int):
            if 0 <= construct < len(constructs):
                return constructs[construct]
            return None
        return next((c for c in constructs if c.name == construct), None)

    @classmethod
    def create(cls, construct: str | int, params: Iterable[object] = ()) -> Self:
        """Create an instance from a constructor name or index and its arguments."""
        if isinstance(construct, int):
            enum_construct = cls.get_enum_construct(construct)
            if enum_construct is None:
                raise ValueError(f"{cls.__name__} has no constructor #{construct}")
            construct = enum_construct.name
        return cls(construct, *params)

    def __getattr__(self, name: str) -> object:
        if name in HxEnum.__slots__:
            raise AttributeError(name)
        construct = self.get_enum_construct(self.tag)
        if construct is not None and name in construct.params:
            return self.params[construct.params.index(name)]
        raise AttributeError(
            f"{type(self).__name__!r} object has no attribute {name!r}"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HxEnum):
            return NotImplemented
        return (
            type(self) is type(other)
            and self.index == other.index
            and self.params == other.params
        )

    def __hash__(self) -> int:
        return hash((type(self), self.index, self.params))

    @recursive_repr("...")
    def __repr__(self) -> str:
        name = f"{type(self).__name__}.{self.tag}"
        if not self.params:
            return name
        return f"{name}({', '.join(repr(p) for p in self.params)})"
