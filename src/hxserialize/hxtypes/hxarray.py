from __future__ import annotations

from collections.abc import Iterable, MutableSequence, Sequence
from dataclasses import dataclass
from enum import Enum
from reprlib import recursive_repr
from typing import TYPE_CHECKING, Final, Literal, overload

from hxserialize._recursive_eq import recursive_eq

if TYPE_CHECKING:
    from typing_extensions import Self, TypeAlias, TypeVar

    T = TypeVar("T", default=object)


class HxHoleEnum(Enum):
    """Explicit representation of the unassigned elements of Haxe arrays.

    Haxe serializes runs of `null` array elements compactly with a fill
    directive. On JavaScript targets the filled elements are left unassigned,
    which is not the same as containing `null`: `i in array` is `false` for an
    unassigned element.

    To keep this distinction when decoding, `HxHole` is stored in the
    unassigned elements of an `HxArray`, and `None` in the elements that are
    explicitly `null`.
    """

    HxHole = "HxHole"
    """Explicit representation of the unassigned elements of Haxe arrays."""

    def __repr__(self) -> str:
        return self.name

    def __str__(self) -> str:
        return self.name


HxHoleType: TypeAlias = Literal[HxHoleEnum.HxHole]
HxHole: Final = HxHoleEnum.HxHole
"""Explicit representation of the unassigned elements of Haxe arrays."""


@recursive_eq
@dataclass(init=False, eq=False, slots=True)
class HxArray(MutableSequence["T | HxHoleType"]):
    """
    A Python equivalent of a Haxe Array.

    `HxArray` is a regular mutable sequence, except that elements can be
    unassigned. Unassigned elements read as [`HxHole`], which is distinct from
    `None` (the Haxe `null` value).

    [`HxHole`]: `hxserialize.hxtypes.HxHole`

    Parameters
    ----------
    values
        The initial elements, which may include `HxHole`.

    Examples
    --------
    >>> arr = HxArray([1])
    >>> arr.fill(3)
    >>> arr
    HxArray([1, HxHole, HxHole, None])
    >>> arr.has_hole(1), arr.has_hole(3)
    (True, False)
    >>> arr.elements_used
    2
    """

    _items: list[T | HxHoleType]

    def __init__(self, values: Iterable[T | HxHoleType] = ()) -> None:
        self._items = list(values)

    def __len__(self) -> int:
        return len(self._items)

    @overload
    def __getitem__(self, index: int) -> T | HxHoleType: ...

    @overload
    def __getitem__(self, index: slice) -> HxArray[T]: ...

    def __getitem__(self, index: int | slice) -> T | HxHoleType | HxArray[T]:
        if isinstance(index, slice):
            return HxArray(self._items[index])
        return self._items[index]

    @overload
    def __setitem__(self, index: int, value: T | HxHoleType) -> None: ...

    @overload
    def __setitem__(self, index: slice, value: Iterable[T | HxHoleType]) -> None: ...

    def __setitem__(
        self, index: int | slice, value: T | HxHoleType | Iterable[T | HxHoleType]
    ) -> None:
        self._items[index] = value  # type: ignore[index,assignment]

    def __delitem__(self, index: int | slice) -> None:
        del self._items[index]

    def insert(self, index: int, value: T | HxHoleType) -> None:
        self._items.insert(index, value)

    def resize(self, length: int) -> None:
        """Change the length, truncating or adding unassigned elements at the end."""
        if length < 0:
            raise ValueError(f"length must be >= 0: {length}")
        current = len(self._items)
        if length < current:
            del self._items[length:]
        else:
            self._items.extend([HxHole] * (length - current))

    def fill(self, count: int) -> None:
        """Append `count` elements: `count - 1` unassigned, then `None`.

        This is the effect of the Haxe `u` array fill directive, which assigns
        `null` to the last of the new elements only.
        """
        if count < 1:
            raise ValueError(f"count must be >= 1: {count}")
        self.resize(len(self._items) + count - 1)
        self._items.append(None)  # type: ignore[arg-type]

    def has_hole(self, index: int) -> bool:
        return self._items[index] is HxHole

    @property
    def elements_used(self) -> int:
        """The number of elements that are assigned (including `None`)."""
        return sum(1 for v in self._items if v is not HxHole)

    def copy(self) -> Self:
        return type(self)(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, HxArray):
            return self._items == other._items
        if isinstance(other, Sequence) and not isinstance(other, (str, bytes)):
            return self._items == list(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    @recursive_repr("HxArray([...])")
    def __repr__(self) -> str:
        return f"HxArray({self._items!r})"
