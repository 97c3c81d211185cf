from __future__ import annotations

from reprlib import recursive_repr
from typing import TYPE_CHECKING

from hxserialize._recursive_eq import recursive_eq

if TYPE_CHECKING:
    from typing_extensions import TypeVar

    T = TypeVar("T", default=object)


@recursive_eq
class HxObject(dict[str, "T"]):
    """
    A Python equivalent of a Haxe anonymous structure.

    Anonymous structures are objects without a class, like `{x: 1, y: 2}` in
    Haxe. `HxObject` is a `dict` of field names to values which keeps fields in
    the order they were serialized. Fields can also be read as attributes when
    their names are valid Python identifiers.

    Examples
    --------
    >>> point = HxObject(x=1, y=2)
    >>> point
    HxObject(x=1, y=2)
    >>> point.x, point["y"]
    (1, 2)
    >>> HxObject({"not an identifier": True})
    HxObject({'not an identifier': True})
    """

    __slots__ = ()

    def __getattr__(self, name: str) -> T:
        try:
            return self[name]
        except KeyError:
            raise AttributeError(
                f"{type(self).__name__!r} object has no field {name!r}"
            ) from None

    @recursive_repr("HxObject(...)")
    def __repr__(self) -> str:
        if all(isinstance(k, str) and k.isidentifier() for k in self):
            fields = ", ".join(f"{k}={v!r}" for k, v in self.items())
            return f"{type(self).__name__}({fields})"
        return f"{type(self).__name__}({dict(self)!r})"
