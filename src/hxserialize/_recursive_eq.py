from __future__ import annotations

import threading
from functools import wraps
from typing import Callable, TypeVar

_T = TypeVar("_T")


class _ActiveComparisons(threading.local):
    ids: set[int]

    def __init__(self) -> None:
        self.ids = set()


_active = _ActiveComparisons()


def recursive_eq(cls: type[_T]) -> type[_T]:
    """Allow `==` of container classes that can contain themselves.

    Decoded Haxe data can be cyclic: an array can hold a reference to itself,
    or an object can reference its parent. The built-in container comparisons
    recurse forever on such values. This class decorator wraps `__eq__` so that
    a comparison that reaches an object already being compared further up the
    call stack stops there.

    Two cyclic values compare equal if they repeat at the same points: `a -> b
    -> a` can equal `a' -> b' -> a'`, but not `a' -> b' -> A' -> B' -> a'`.
    """
    wrapped_eq: Callable[[object, object], bool] = cls.__eq__  # type: ignore

    @wraps(wrapped_eq)
    def __eq__(self: object, other: object) -> bool:
        if self is other:
            return True

        active = _active.ids
        self_active = id(self) in active
        other_active = id(other) in active
        if self_active or other_active:
            # Only equal if both sides loop back at the same point.
            return self_active and other_active

        active.add(id(self))
        active.add(id(other))
        try:
            return wrapped_eq(self, other)
        finally:
            active.discard(id(self))
            active.discard(id(other))

    # dict and list subclasses inherit a != that doesn't call __eq__
    def __ne__(self: object, other: object) -> bool:
        eq = __eq__(self, other)
        return eq if eq is NotImplemented else not eq

    cls.__eq__ = __eq__  # type: ignore[method-assign,assignment]
    cls.__ne__ = __ne__  # type: ignore[method-assign,assignment]
    return cls
