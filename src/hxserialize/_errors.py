from __future__ import annotations

from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, Final, Literal, cast

_DATA_CONTEXT: Final = 30


@dataclass(init=False)
class HxSerializeError(Exception):
    """The base class that all hxserialize errors are subclasses of."""

    if not TYPE_CHECKING:
        message: str  # needed to have dataclass include message in the repr, etc

    def __init__(self, message: str, *args: object) -> None:
        super().__init__(message, *args)

    @property
    def message(self) -> str:
        return cast(str, self.args[0])

    def __str__(self) -> str:
        field_values = [
            (f.name, getattr(self, f.name)) for f in fields(self) if f.name != "message"
        ]
        values_fmt = ", ".join(self._format_field(f, v) for (f, v) in field_values)

        if values_fmt:
            return f"{self.message}: {values_fmt}"
        return self.message

    def _format_field(self, name: str, value: object) -> str:
        return f"{name}={value!r}"


@dataclass(init=False)
class DecodeHxSerializeError(HxSerializeError, ValueError):
    """The serialized data is not well-formed."""

    position: int
    data: str

    def __init__(self, message: str, *args: object, position: int, data: str) -> None:
        super().__init__(message, *args)
        self.position = position
        self.data = data

    def _format_field(self, name: str, value: object) -> str:
        if name != "data" or len(self.data) <= 2 * _DATA_CONTEXT:
            return super()._format_field(name, value)
        # Only show the data around the error position
        start = max(0, self.position - _DATA_CONTEXT)
        end = self.position + _DATA_CONTEXT
        before = "..." if start > 0 else ""
        after = "..." if end < len(self.data) else ""
        return f"data={before}{self.data[start:end]!r}{after}"


@dataclass(init=False)
class UnhandledTagDecodeHxSerializeError(DecodeHxSerializeError):
    """
    No decode step is able to handle the character at the current position.

    The character may not be a `SerializationTag` at all, in which case `tag`
    is the raw character (or `None` at the end of the data).
    """

    if not TYPE_CHECKING:
        tag: str | None

    def __init__(
        self,
        message: str,
        *args: object,
        tag: str | None,
        position: int,
        data: str,
    ) -> None:
        super().__init__(message, tag, *args, position=position, data=data)

    @property
    def tag(self) -> str | None:
        return cast("str | None", self.args[1])


@dataclass(init=False)
class UnsupportedFeatureDecodeHxSerializeError(DecodeHxSerializeError):
    """The data uses a tag that is recognised but cannot be decoded."""


@dataclass(init=False)
class UnresolvedTypeDecodeHxSerializeError(DecodeHxSerializeError):
    """
    The data names a class or enum that the active resolver does not allow.

    Only types registered with a `TypeRegistry` (or accepted by a custom
    `TypeResolver`) can be created when decoding.
    """

    type_name: object
    kind: Literal["class", "enum"]

    def __init__(
        self,
        message: str,
        *args: object,
        type_name: object,
        kind: Literal["class", "enum"],
        position: int,
        data: str,
    ) -> None:
        super().__init__(message, *args, position=position, data=data)
        self.type_name = type_name
        self.kind = kind


@dataclass(init=False)
class UnresolvedEnumConstructDecodeHxSerializeError(
    UnresolvedTypeDecodeHxSerializeError
):
    """An enum was resolved, but it has no constructor with the given name/index."""

    construct: str | int

    def __init__(
        self,
        message: str,
        *args: object,
        type_name: object,
        construct: str | int,
        position: int,
        data: str,
    ) -> None:
        super().__init__(
            message,
            *args,
            type_name=type_name,
            kind="enum",
            position=position,
            data=data,
        )
        self.construct = construct


@dataclass(init=False)
class ThrownValueHxSerializeError(HxSerializeError):
    """
    The serialized data contains an exception value.

    The `x` tag serializes a value that was thrown, and decoding it raises
    this error with the decoded value attached.
    """

    value: object

    def __init__(self, message: str, *args: object, value: object) -> None:
        super().__init__(message, *args)
        self.value = value


@dataclass(init=False)
class InvalidTypeNameHxSerializeError(HxSerializeError, ValueError):
    """A type cannot be registered because its name is not usable."""

    name: object
    type: object

    def __init__(self, message: str, *args: object, name: object, type: object) -> None:
        super().__init__(message, *args)
        self.name = name
        self.type = type
