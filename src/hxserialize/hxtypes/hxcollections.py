"""The Haxe collection types: List, StringMap, IntMap and ObjectMap."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, MutableMapping
from dataclasses import dataclass
from reprlib import recursive_repr
from typing import TYPE_CHECKING

from hxserialize._recursive_eq import recursive_eq

if TYPE_CHECKING:
    from typing_extensions import TypeVar

    KT = TypeVar("KT", default=object)
    VT = TypeVar("VT", default=object)
    T = TypeVar("T", default=object)


@recursive_eq
class HxList(list["T"]):
    """A Python equivalent of a Haxe `List`, an ordered sequence of values.

    Haxe serializes `List` separately from `Array`, so it is decoded as a
    distinct type. Unlike `HxArray`, a `List` never has unassigned elements.
    """

    __slots__ = ()

    @recursive_repr("HxList([...])")
    def __repr__(self) -> str:
        return f"HxList({list(self)!r})"


@recursive_eq
class HxStringMap(dict[str, "VT"]):
    """A Python equivalent of Haxe's `haxe.ds.StringMap`."""

    __slots__ = ()

    @recursive_repr("HxStringMap({...})")
    def __repr__(self) -> str:
        return f"HxStringMap({dict(self)!r})"


@recursive_eq
class HxIntMap(dict[int, "VT"]):
    """A Python equivalent of Haxe's `haxe.ds.IntMap`."""

    __slots__ = ()

    @recursive_repr("HxIntMap({...})")
    def __repr__(self) -> str:
        return f"HxIntMap({dict(self)!r})"


@recursive_eq
@dataclass(init=False, eq=False, slots=True)
class HxObjectMap(MutableMapping["KT", "VT"]):
    """A Python equivalent of Haxe's `haxe.ds.ObjectMap`.

    `HxObjectMap` uses object identity rather than `==` for key equality, as
    Haxe's ObjectMap does. Keys don't need to be hashable, and two keys that are
    equal but are not the same object are separate entries.

    Parameters
    ----------
    init
        Another Mapping to copy items from, or a series of `(key, value)` pairs.

    Examples
    --------
    >>> a, b = [1], [1]
    >>> m = HxObjectMap([(a, "a"), (b, "b")])
    >>> len(m), m[a], m[b]
    (2, 'a', 'b')
    >>> [1] in m
    False
    """

    _entries: dict[int, tuple[KT, VT]]

    def __init__(
        self, init: Mapping[KT, VT] | Iterable[tuple[KT, VT]] | None = None
    ) -> None:
        self._entries = {}
        if init is not None:
            self.update(init)

    def __getitem__(self, key: KT) -> VT:
        try:
            return self._entries[id(key)][1]
        except KeyError:
            raise KeyError(key) from None

    def __setitem__(self, key: KT, value: VT) -> None:
        # The stored key keeps the object alive, so its id() is never reused
        # while the entry exists.
        self._entries[id(key)] = (key, value)

    def __delitem__(self, key: KT) -> None:
        try:
            del self._entries[id(key)]
        except KeyError:
            raise KeyError(key) from None

    def __contains__(self, key: object) -> bool:
        return id(key) in self._entries

    def __iter__(self) -> Iterator[KT]:
        return (k for k, _ in self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HxObjectMap):
            return NotImplemented
        if len(self._entries) != len(other._entries):
            return False
        # Keys must be the same objects, values need only be equal.
        return all(
            key_id in other._entries and other._entries[key_id][1] == value
            for key_id, (_, value) in self._entries.items()
        )

    __hash__ = None  # type: ignore[assignment]

    @recursive_repr("HxObjectMap([...])")
    def __repr__(self) -> str:
        return f"HxObjectMap({list(self._entries.values())!r})"
