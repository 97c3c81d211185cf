from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, NewType

from hxserialize._errors import HxSerializeError

if TYPE_CHECKING:
    from typing_extensions import TypeVar

    T = TypeVar("T", default=object)
else:
    from typing import TypeVar

    T = TypeVar("T")


class ObjectReferenceHxSerializeError(HxSerializeError, KeyError):
    pass


@dataclass(init=False)
class SerializedIdOutOfRangeHxSerializeError(ObjectReferenceHxSerializeError):
    serialized_id: SerializedId
    size: int

    def __init__(self, message: str, serialized_id: SerializedId, size: int) -> None:
        super(SerializedIdOutOfRangeHxSerializeError, self).__init__(message)
        self.serialized_id = serialized_id
        self.size = size


SerializedId = NewType("SerializedId", int)


@dataclass(init=False, slots=True)
class ReferenceLog(Generic[T]):
    """Values occurring in Haxe serialized data, in the order they occurred.

    The Haxe serialization format allows for backreferences to values that
    occurred earlier in the serialized data. This allows for de-duplication
    and cyclic references. Objects and strings are referenced separately, so
    a decoder keeps one log for each.

    Values are never de-duplicated: recording the same value twice gives it two
    serialized IDs.
    """

    _object_by_serialized_id: list[T]

    def __init__(self) -> None:
        self._object_by_serialized_id = []

    def __len__(self) -> int:
        return len(self._object_by_serialized_id)

    def __iter__(self) -> Iterator[T]:
        return iter(self._object_by_serialized_id)

    def get_object(self, serialized_id: SerializedId) -> T:
        # Negative indexes must not wrap around to the end of the log.
        if not 0 <= serialized_id < len(self._object_by_serialized_id):
            raise SerializedIdOutOfRangeHxSerializeError(
                "Serialized ID has not been recorded in the log",
                serialized_id=serialized_id,
                size=len(self._object_by_serialized_id),
            )
        return self._object_by_serialized_id[serialized_id]

    def record_reference(self, obj: T) -> SerializedId:
        serialized_id = SerializedId(len(self._object_by_serialized_id))
        self._object_by_serialized_id.append(obj)
        return serialized_id
