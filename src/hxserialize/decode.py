"""Deserialize Haxe values from the Haxe serialization format into Python values."""

from __future__ import annotations

import base64
import binascii
import codecs
import math
import operator
import re
from collections.abc import Iterable, Mapping, MutableMapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from functools import partial
from types import MappingProxyType
from typing import (
    TYPE_CHECKING,
    Callable,
    Final,
    Literal,
    Protocol,
    cast,
    overload,
    runtime_checkable,
)
from urllib.parse import unquote

from hxserialize._errors import (
    DecodeHxSerializeError,
    HxSerializeError,
    ThrownValueHxSerializeError,
    UnhandledTagDecodeHxSerializeError,
    UnresolvedEnumConstructDecodeHxSerializeError,
    UnresolvedTypeDecodeHxSerializeError,
    UnsupportedFeatureDecodeHxSerializeError,
)
from hxserialize._references import ReferenceLog, SerializedId
from hxserialize.constants import (
    CONSTANT_TAGS,
    DEFAULT_MAX_ARRAY_LENGTH,
    DEFAULT_MAX_DEPTH,
    HX_BASE64_TRANSLATION,
    UNSUPPORTED_TAGS,
    SerializationTag,
)
from hxserialize.hxtypes import (
    EnumConstruct,
    HxArray,
    HxIntMap,
    HxList,
    HxObject,
    HxObjectMap,
    HxStringMap,
)
from hxserialize.resolver import EnumType, TypeResolver, default_registry

if TYPE_CHECKING:
    from typing_extensions import Never, TypeAlias

    from _typeshed import SupportsRead

_TAGS: Final[Mapping[str, SerializationTag]] = {t.value: t for t in SerializationTag}
_FLOAT_CHARS: Final = frozenset("+-.0123456789eE")
# Enough for any integer a double holds exactly; Haxe Ints are 32-bit.
_MAX_INT_DIGITS: Final = 16
_INVALID_PERCENT_ESCAPE: Final = re.compile(r"%(?![0-9A-Fa-f]{2})")
_LEGACY_DATE: Final = re.compile(
    r"[0-9]{4}-[0-9]{2}-[0-9]{2} [0-9]{2}:[0-9]{2}:[0-9]{2}"
)
_LEGACY_DATE_FORMAT: Final = "%Y-%m-%d %H:%M:%S"


@dataclass(slots=True)
class ReadableTagStream:
    """A cursor over Haxe serialized data, with the back-reference logs.

    Values of compound types (arrays, objects, class instances, etc.) are
    recorded in `objects` as they're created, and strings are recorded in
    `strings`, so that later references to them can be resolved.
    """

    data: str
    pos: int = field(default=0)
    objects: ReferenceLog[object] = field(default_factory=ReferenceLog)
    strings: ReferenceLog[str] = field(default_factory=ReferenceLog)

    @property
    def eof(self) -> bool:
        return self.pos >= len(self.data)

    def ensure_capacity(self, count: int) -> None:
        if self.pos + count > len(self.data):
            available = max(0, len(self.data) - self.pos)
            self.throw(
                f"Data truncated: Expected {count} characters at position "
                f"{self.pos} but {available} available"
            )

    def throw(self, message: str, *, cause: BaseException | None = None) -> Never:
        raise DecodeHxSerializeError(
            message, data=self.data, position=self.pos
        ) from cause

    def peek_char(self) -> str | None:
        """Get the character at the current position without advancing.

        Returns
        -------
        :
            The character, or None at the end of the data.
        """
        if self.eof:
            return None
        return self.data[self.pos]

    def consume_if(self, char: str) -> bool:
        """Advance over the current character if it is `char`."""
        if self.peek_char() == char:
            self.pos += 1
            return True
        return False

    def read_tag(self, tag: SerializationTag | None = None) -> str:
        """Read the tag character at the current position.

        The result is a `SerializationTag` if the character is one, otherwise
        the raw character, so that callers can report invalid tags.
        """
        self.ensure_capacity(1)
        value = self.data[self.pos]
        if tag is None or value == tag:
            self.pos += 1
            return _TAGS.get(value, value)
        self.throw(
            f"Expected tag {tag.name} at position {self.pos} but found {value!r}"
        )

    def read_separator(self, enclosing_name: str) -> None:
        char = self.peek_char()
        if char != SerializationTag.kSeparator:
            found = "end of data" if char is None else repr(char)
            self.throw(
                f"Expected ':' in {enclosing_name} at position {self.pos} but "
                f"found {found}"
            )
        self.pos += 1

    def read_int(self) -> int:
        """Read a decimal integer, optionally preceded by `-`.

        Reading stops at the first character that is not a digit. The result is
        0 if no digits occur. More than 16 digits is an error.
        """
        data = self.data
        start = pos = self.pos
        end = len(data)
        negative = False
        value = 0
        while pos < end:
            char = data[pos]
            if char == "-":
                # Only valid as the first character
                if pos != start:
                    break
                negative = True
            elif "0" <= char <= "9":
                if pos - start - negative >= _MAX_INT_DIGITS:
                    self.throw(
                        f"Integer at position {start} has more than "
                        f"{_MAX_INT_DIGITS} digits"
                    )
                value = value * 10 + (ord(char) - 48)
            else:
                break
            pos += 1
        self.pos = pos
        return -value if negative else value

    def read_float(self) -> float:
        data = self.data
        start = pos = self.pos
        end = len(data)
        while pos < end and data[pos] in _FLOAT_CHARS:
            pos += 1
        literal = data[start:pos]
        try:
            value = float(literal)
        except ValueError as e:
            self.throw(f"Invalid float literal {literal!r}", cause=e)
        self.pos = pos
        return value

    def _read_length_prefixed(self, enclosing_name: str) -> str:
        length = self.read_int()
        if self.peek_char() != SerializationTag.kSeparator or length < 0:
            self.throw(f"Invalid {enclosing_name} length")
        self.pos += 1
        if len(self.data) - self.pos < length:
            self.throw(
                f"Invalid {enclosing_name} length: {length} characters expected "
                f"but {len(self.data) - self.pos} available"
            )
        self.pos += length
        return self.data[self.pos - length : self.pos]

    def read_string(self) -> str:
        """Read a length-prefixed, percent-encoded string and record it."""
        encoded = self._read_length_prefixed("string")
        invalid_escape = _INVALID_PERCENT_ESCAPE.search(encoded)
        if invalid_escape:
            self.throw(
                f"String contains an invalid percent-encoded character at offset "
                f"{invalid_escape.start()}"
            )
        try:
            value = unquote(encoded, errors="strict")
        except UnicodeDecodeError as e:
            self.throw("String is not valid percent-encoded UTF-8 text", cause=e)
        self.strings.record_reference(value)
        return value

    def read_bytes(self) -> bytes:
        """Read length-prefixed Base64 data (in Haxe's URL-safe alphabet)."""
        encoded = self._read_length_prefixed("bytes")
        standard = encoded.translate(HX_BASE64_TRANSLATION)
        # Haxe does not pad its Base64 output.
        standard += "=" * (-len(standard) % 4)
        try:
            result = base64.b64decode(standard, validate=True)
        except binascii.Error as e:
            self.throw("Bytes are not valid Base64 data", cause=e)
        self.objects.record_reference(result)
        return result

    def read_date(self, *, tz: tzinfo | None = None) -> datetime:
        """Read a date as milliseconds since the epoch.

        Older Haxe versions wrote dates as `YYYY-MM-DD HH:MM:SS` text in local
        time. These are read as naive datetimes, or with `tz` as their timezone.
        """
        result: datetime
        if _LEGACY_DATE.match(self.data, self.pos):
            text = self.data[self.pos : self.pos + 19]
            try:
                result = datetime.strptime(text, _LEGACY_DATE_FORMAT)
            except ValueError as e:
                self.throw(f"Invalid date {text!r}", cause=e)
            if tz is not None:
                result = result.replace(tzinfo=tz)
            self.pos += 19
        else:
            epoch_ms = self.read_float()
            try:
                result = datetime.fromtimestamp(epoch_ms / 1000, tz=tz)
            except (OverflowError, OSError, ValueError) as e:
                self.throw(f"Date is out of range: {epoch_ms}", cause=e)
        self.objects.record_reference(result)
        return result

    def read_string_reference(self) -> str:
        serialized_id = SerializedId(self.read_int())
        try:
            return self.strings.get_object(serialized_id)
        except HxSerializeError as e:
            self.throw(
                "StringReference contains an index which has not been decoded",
                cause=e,
            )

    def read_object_reference(self) -> object:
        serialized_id = SerializedId(self.read_int())
        try:
            return self.objects.get_object(serialized_id)
        except HxSerializeError as e:
            self.throw(
                "ObjectReference contains an index which has not been decoded",
                cause=e,
            )

    def skip_enum_terminator(self) -> None:
        """Advance over the character following an enum instance's arguments.

        The character is not checked. (At the end of the data there's nothing
        to skip.)
        """
        if not self.eof:
            self.pos += 1


@runtime_checkable
class HxCustomUnserializable(Protocol):
    """A class that reads its own instances' data from the stream.

    Instances of classes serialized with Haxe's `hxSerialize()` method are
    written with the `C` tag, followed by whatever data the method wrote. To
    decode them, the Python class needs a `hx_unserialize()` method to read
    the same data.

    `hx_unserialize()` is called on an instance created without calling
    `__init__()`. It must read the instance's data by calling
    `ctx.decode_object()` (and/or reading `ctx.stream` directly).

    Examples
    --------
    >>> class Point:
    ...     def hx_unserialize(self, ctx: DecodeContext) -> None:
    ...         self.x = ctx.decode_object()
    ...         self.y = ctx.decode_object()
    """

    def hx_unserialize(self, ctx: DecodeContext) -> None: ...


class TagReaderFn(Protocol):
    """
    The type of a function that reads tags on behalf of a `TagReader`.

    Typically this is an unbound method of `TagReader`.
    """

    def __call__(
        self, tag_reader: TagReader, tag: str, ctx: DecodeContext, /
    ) -> object: ...


@dataclass(init=False, slots=True)
class TagReaderRegistry:
    """
    A registry of tags and the functions that can read them.

    `TagReader` uses this to dispatch decode calls to an appropriate function.
    """

    index: Mapping[str, TagReaderFn]
    _index: dict[str, TagReaderFn]

    def __init__(self, entries: TagReaderRegistry | None = None) -> None:
        self._index = {}
        self.index = MappingProxyType(self._index)
        if entries:
            self.register_all(entries)

    def register(self, tag: str | Iterable[str], tag_reader: TagReaderFn) -> None:
        """Associate a function with a tag, so that `match()` will return it."""
        tags = [tag] if isinstance(tag, str) else sorted(tag)
        for t in tags:
            self._index[t] = tag_reader

    def register_all(self, registry: TagReaderRegistry) -> None:
        """
        Copy the registrations of another registry into this one.

        Existing registrations that also occur in `registry` are overwritten.
        """
        self._index.update(registry.index)

    def match(self, tag: str) -> TagReaderFn | None:
        """Get the `TagReaderFn` function registered for a tag, or `None`."""
        return self._index.get(tag)


class ReadableTagStreamReadFunction(Protocol):
    """The type of an unbound, argument-less `ReadableTagStream` method."""

    def __call__(self, cls: ReadableTagStream, /) -> object: ...

    @property
    def __name__(self) -> str: ...


def read_stream(rts_fn: ReadableTagStreamReadFunction) -> TagReaderFn:
    """Create a `TagReaderFn` that calls a `read_xxx` function on the stream."""
    read_fn = operator.methodcaller(rts_fn.__name__)

    def read_stream__tag_reader(
        tag_reader: TagReader, tag: str, ctx: DecodeContext
    ) -> object:
        return read_fn(ctx.stream)

    read_stream__tag_reader.__name__ = (
        f"{read_stream__tag_reader.__name__}#{rts_fn.__name__}"
    )
    read_stream__tag_reader.__qualname__ = (
        f"{read_stream__tag_reader.__qualname__}#{rts_fn.__name__}"
    )

    return read_stream__tag_reader


class DecodeContext(Protocol):
    if TYPE_CHECKING:

        @property
        def stream(self) -> ReadableTagStream:
            """The `ReadableTagStream` this context reads from."""

    else:
        stream: ReadableTagStream
        """The `ReadableTagStream` this context reads from."""

    def decode_object(self, *, tag: str | None = ...) -> object:
        """
        Return a value by reading a tag's data from this context's stream.

        If `tag` is None, the stream is positioned on a tag which must be read
        and advanced over. Otherwise `tag` is the tag that the stream is now
        positioned just after.

        Returns
        -------
        :
            A value representing the `tag`.

        Raises
        ------
        UnhandledTagDecodeHxSerializeError
            If it's not possible to read the tag.
        """


class DecodeNextFn(Protocol):
    """
    Delegate to the next decode step in the sequence to read a tag from the stream.

    Raises
    ------
    UnhandledTagDecodeHxSerializeError
        If none of the following decode steps were able to read the tag.
    """

    def __call__(self, tag: str, /) -> object: ...


class DecodeStepFn(Protocol):
    """
    The signature of a function that returns objects to reflect Haxe-serialized data.

    Decode steps can either read the `ctx.stream` directly, or delegate to the
    next decode step by calling `next()`. Steps can modify the value decoded by
    the next step before returning it.
    """

    def __call__(
        self, tag: str, /, ctx: DecodeContext, next: DecodeNextFn
    ) -> object: ...


class DecodeStepObject(Protocol):
    decode: DecodeStepFn
    """The same as `DecodeStepFn`."""


DecodeStep: TypeAlias = "DecodeStepObject | DecodeStepFn"
"""Either a `DecodeStepObject` or `DecodeStepFn`."""


@dataclass(init=False, slots=True)
class DefaultDecodeContext(DecodeContext):
    """
    The default implementation of [`DecodeContext`].

    Values nested more than `max_depth` levels deep are rejected, as each level
    of nesting is decoded by a recursive call. `max_depth=None` disables the
    limit.

    [`DecodeContext`]: `hxserialize.decode.DecodeContext`
    """

    decode_steps: Sequence[DecodeStep]
    stream: ReadableTagStream
    max_depth: int | None
    depth: int

    @overload
    def __init__(
        self,
        *,
        data: None = None,
        stream: ReadableTagStream,
        decode_steps: Iterable[DecodeStep] | None = None,
        max_depth: int | None = DEFAULT_MAX_DEPTH,
    ) -> None: ...

    @overload
    def __init__(
        self,
        *,
        data: str,
        stream: None = None,
        decode_steps: Iterable[DecodeStep] | None = None,
        max_depth: int | None = DEFAULT_MAX_DEPTH,
    ) -> None: ...

    def __init__(
        self,
        *,
        data: str | None = None,
        stream: ReadableTagStream | None = None,
        decode_steps: Iterable[DecodeStep] | None = None,
        max_depth: int | None = DEFAULT_MAX_DEPTH,
    ) -> None:
        if stream is None:
            if data is None:
                raise ValueError("data or stream must be provided")
            stream = ReadableTagStream(data)
        elif data is not None:
            raise ValueError("data and stream cannot both be provided")

        self.stream = stream
        self.decode_steps = list(
            default_decode_steps if decode_steps is None else decode_steps
        )
        self.max_depth = max_depth
        self.depth = 0

    def __decode_tag_with_step(self, tag: str, *, i: int) -> object:
        if i < len(self.decode_steps):
            step = self.decode_steps[i]
            next = partial(self.__decode_tag_with_step, i=i + 1)
            if callable(step):
                return step(tag, ctx=self, next=next)
            else:
                return step.decode(tag, ctx=self, next=next)
        self._report_unhandled_tag(tag)

    def decode_object(self, *, tag: str | None = None) -> object:
        if tag is None:
            tag = self.stream.read_tag()
        self.depth += 1
        try:
            if self.max_depth is not None and self.depth > self.max_depth:
                self.stream.throw(
                    f"Data is nested more than the maximum depth of {self.max_depth}"
                )
            return self.__decode_tag_with_step(tag, i=0)
        finally:
            self.depth -= 1

    def _report_unhandled_tag(self, tag: str) -> Never:
        tag = str(tag)
        # The tag has been read, so it's the previous character.
        position = self.stream.pos - 1
        raise UnhandledTagDecodeHxSerializeError(
            f"Invalid tag {tag!r} at position {position}",
            tag=tag,
            position=position,
            data=self.stream.data,
        )


ObjectType = Callable[[], MutableMapping[str, object]]
ArrayType = Callable[[], HxArray[object]]
ListType = Callable[[], list[object]]
StringMapType = Callable[[], MutableMapping[str, object]]
IntMapType = Callable[[], MutableMapping[int, object]]
ObjectMapType = Callable[[], MutableMapping[object, object]]


def _default_constants() -> dict[str, object]:
    return {
        SerializationTag.kNull: None,
        SerializationTag.kTrue: True,
        SerializationTag.kFalse: False,
        SerializationTag.kZero: 0,
        SerializationTag.kNaN: math.nan,
        SerializationTag.kNegativeInfinity: -math.inf,
        SerializationTag.kPositiveInfinity: math.inf,
    }


@dataclass(init=False, slots=True)
class TagReader(DecodeStepObject):
    """
    Controls how Haxe serialization data is converted to Python values.

    Customise the way Haxe values are represented in Python by creating a
    `TagReader` instance with non-default options, and passing it to the
    `decode_steps` option of `hxserialize.loads()` or `hxserialize.Decoder()`.

    [HxObject]: `hxserialize.hxtypes.HxObject`
    [HxArray]: `hxserialize.hxtypes.HxArray`
    [HxList]: `hxserialize.hxtypes.HxList`
    [HxStringMap]: `hxserialize.hxtypes.HxStringMap`
    [HxIntMap]: `hxserialize.hxtypes.HxIntMap`
    [HxObjectMap]: `hxserialize.hxtypes.HxObjectMap`
    [default_registry]: `hxserialize.resolver.default_registry`
    [datetime]: `datetime.datetime`
    [DEFAULT_MAX_ARRAY_LENGTH]: `hxserialize.constants.DEFAULT_MAX_ARRAY_LENGTH`

    Parameters
    ----------
    tag_readers
        Override the tag reader functions implied by other arguments.
        Default: no overrides.
    resolver
        The `TypeResolver` that decides which classes and enums can be
        created. Default: [default_registry].
    constants
        A dict mapping constant tags (`n`, `t`, `f`, `z`, `k`, `m`, `p`) to the
        values to represent them as. Default: None, True, False, 0, nan, -inf,
        inf.
    object_type
        A function returning an empty mapping to represent anonymous
        structures. Default: [HxObject].
    array_type
        A function returning an empty [HxArray] to represent Array.
        Default: [HxArray].
    list_type
        A function returning an empty list to represent List. Default: [HxList].
    string_map_type
        A function returning an empty mapping to represent StringMap.
        Default: [HxStringMap].
    int_map_type
        A function returning an empty mapping to represent IntMap.
        Default: [HxIntMap].
    object_map_type
        A function returning an empty identity-keyed mapping to represent
        ObjectMap. Default: [HxObjectMap].
    default_timezone
        The timezone to use when creating [datetime] to represent Date.
        Default: datetimes have no timezone.
    skip_enum_terminator
        Advance over the character following each enum instance without
        checking it. Default: True.
    max_array_length
        The longest an Array can be extended to by an `u` fill, or None for no
        limit. Default: [DEFAULT_MAX_ARRAY_LENGTH].
    """

    tag_readers: TagReaderRegistry
    resolver: TypeResolver
    constants: Mapping[str, object]
    object_type: ObjectType
    array_type: ArrayType
    list_type: ListType
    string_map_type: StringMapType
    int_map_type: IntMapType
    object_map_type: ObjectMapType
    default_timezone: tzinfo | None
    skip_enum_terminator: bool
    max_array_length: int | None

    def __init__(
        self,
        tag_readers: TagReaderRegistry | None = None,
        resolver: TypeResolver | None = None,
        constants: Mapping[str, object] | None = None,
        object_type: ObjectType | None = None,
        array_type: ArrayType | None = None,
        list_type: ListType | None = None,
        string_map_type: StringMapType | None = None,
        int_map_type: IntMapType | None = None,
        object_map_type: ObjectMapType | None = None,
        default_timezone: tzinfo | None = None,
        skip_enum_terminator: bool = True,
        max_array_length: int | None = DEFAULT_MAX_ARRAY_LENGTH,
    ) -> None:
        self.resolver = default_registry if resolver is None else resolver
        self.object_type = object_type or HxObject
        self.array_type = array_type or HxArray
        self.list_type = list_type or HxList
        self.string_map_type = string_map_type or HxStringMap
        self.int_map_type = int_map_type or HxIntMap
        self.object_map_type = object_map_type or HxObjectMap
        self.default_timezone = default_timezone
        self.skip_enum_terminator = skip_enum_terminator
        self.max_array_length = max_array_length

        _constants = _default_constants()
        if constants is not None:
            unknown = set(constants) - CONSTANT_TAGS
            if unknown:
                raise ValueError(f"constants contains non-constant tags: {unknown}")
            _constants.update(constants)
        self.constants = _constants

        self.tag_readers = TagReaderRegistry()
        self.register_tag_readers(self.tag_readers)
        if tag_readers:
            self.tag_readers.register_all(tag_readers)

    def register_tag_readers(self, tag_readers: TagReaderRegistry) -> None:
        r = tag_readers.register

        # fmt: off

        # primitives: read the stream directly
        r(SerializationTag.kInt, read_stream(ReadableTagStream.read_int))
        r(SerializationTag.kFloat, read_stream(ReadableTagStream.read_float))
        r(SerializationTag.kString, read_stream(ReadableTagStream.read_string))
        r(SerializationTag.kStringReference, read_stream(ReadableTagStream.read_string_reference))  # noqa: E501
        r(SerializationTag.kObjectReference, read_stream(ReadableTagStream.read_object_reference))  # noqa: E501
        r(SerializationTag.kBytes, read_stream(ReadableTagStream.read_bytes))

        # Tags which require tag-specific behaviour
        r(CONSTANT_TAGS, TagReader.deserialize_constant)
        r(SerializationTag.kBeginArray, TagReader.deserialize_array)
        r(SerializationTag.kBeginObject, TagReader.deserialize_object)
        r(SerializationTag.kBeginList, TagReader.deserialize_list)
        r(SerializationTag.kBeginStringMap, TagReader.deserialize_string_map)
        r(SerializationTag.kBeginIntMap, TagReader.deserialize_int_map)
        r(SerializationTag.kBeginObjectMap, TagReader.deserialize_object_map)
        r(SerializationTag.kDate, TagReader.deserialize_date)
        r(SerializationTag.kException, TagReader.deserialize_exception)
        r(SerializationTag.kClassInstance, TagReader.deserialize_class_instance)
        r(SerializationTag.kCustom, TagReader.deserialize_custom)
        r(SerializationTag.kEnumByName, TagReader.deserialize_enum_by_name)
        r(SerializationTag.kEnumByIndex, TagReader.deserialize_enum_by_index)
        r(UNSUPPORTED_TAGS, TagReader.deserialize_unsupported)

        # fmt: on

    def decode(self, tag: str, /, ctx: DecodeContext, next: DecodeNextFn) -> object:
        read_tag = self.tag_readers.match(tag)
        if not read_tag:
            return next(tag)
        return read_tag(self, tag, ctx)

    def deserialize_constant(self, tag: str, ctx: DecodeContext) -> object:
        return self.constants[tag]

    def deserialize_array(
        self, tag: Literal[SerializationTag.kBeginArray], ctx: DecodeContext
    ) -> HxArray[object]:
        stream = ctx.stream
        array = self.array_type()
        stream.objects.record_reference(array)

        while not stream.consume_if(SerializationTag.kEnd):
            if stream.consume_if(SerializationTag.kArrayFill):
                count = stream.read_int()
                if count < 1:
                    stream.throw(f"Array fill count must be 1 or more: {count}")
                limit = self.max_array_length
                if limit is not None and len(array) + count > limit:
                    stream.throw(
                        f"Array fill of {count} elements exceeds the maximum "
                        f"length of {limit}"
                    )
                array.fill(count)
            else:
                array.append(ctx.decode_object())
        return array

    def deserialize_object(
        self, tag: Literal[SerializationTag.kBeginObject], ctx: DecodeContext
    ) -> MutableMapping[str, object]:
        obj = self.object_type()
        ctx.stream.objects.record_reference(obj)
        self._read_fields(ctx, obj.__setitem__, enclosing_name="Object")
        return obj

    def _read_fields(
        self,
        ctx: DecodeContext,
        set_field: Callable[[str, object], None],
        *,
        enclosing_name: str,
    ) -> None:
        """Read name, value pairs until the `g` end tag."""
        stream = ctx.stream
        while True:
            if stream.eof:
                stream.throw(f"Data truncated: {enclosing_name} has no end tag")
            if stream.consume_if(SerializationTag.kEndObject):
                return
            key = ctx.decode_object()
            if not isinstance(key, str):
                stream.throw(f"{enclosing_name} field name must be a string: {key!r}")
            set_field(key, ctx.decode_object())

    def deserialize_list(
        self, tag: Literal[SerializationTag.kBeginList], ctx: DecodeContext
    ) -> list[object]:
        stream = ctx.stream
        items = self.list_type()
        stream.objects.record_reference(items)
        while not stream.consume_if(SerializationTag.kEnd):
            items.append(ctx.decode_object())
        return items

    def deserialize_string_map(
        self, tag: Literal[SerializationTag.kBeginStringMap], ctx: DecodeContext
    ) -> MutableMapping[str, object]:
        stream = ctx.stream
        map = self.string_map_type()
        stream.objects.record_reference(map)
        while not stream.consume_if(SerializationTag.kEnd):
            key = ctx.decode_object()
            if not isinstance(key, str):
                stream.throw(f"StringMap key must be a string: {key!r}")
            map[key] = ctx.decode_object()
        return map

    def deserialize_int_map(
        self, tag: Literal[SerializationTag.kBeginIntMap], ctx: DecodeContext
    ) -> MutableMapping[int, object]:
        stream = ctx.stream
        map = self.int_map_type()
        stream.objects.record_reference(map)
        char = stream.read_tag()
        while char == SerializationTag.kSeparator:
            key = stream.read_int()
            map[key] = ctx.decode_object()
            char = stream.read_tag()
        if char != SerializationTag.kEnd:
            stream.pos -= 1
            stream.throw(f"Invalid IntMap format: unexpected {str(char)!r}")
        return map

    def deserialize_object_map(
        self, tag: Literal[SerializationTag.kBeginObjectMap], ctx: DecodeContext
    ) -> MutableMapping[object, object]:
        stream = ctx.stream
        map = self.object_map_type()
        stream.objects.record_reference(map)
        while not stream.consume_if(SerializationTag.kEnd):
            key = ctx.decode_object()
            # Primitives have no identity to key by: equal ints and strings
            # decoded separately can be the same Python object.
            if key is None or isinstance(key, (bool, int, float, str)):
                stream.throw(f"ObjectMap key must be an object: {key!r}")
            map[key] = ctx.decode_object()
        return map

    def deserialize_date(
        self, tag: Literal[SerializationTag.kDate], ctx: DecodeContext
    ) -> datetime:
        return ctx.stream.read_date(tz=self.default_timezone)

    def deserialize_exception(
        self, tag: Literal[SerializationTag.kException], ctx: DecodeContext
    ) -> Never:
        value = ctx.decode_object()
        raise ThrownValueHxSerializeError(
            "Serialized data contains a thrown value", value=value
        )

    def _read_type_name(self, ctx: DecodeContext, kind: str) -> str:
        name = ctx.decode_object()
        if not isinstance(name, str):
            ctx.stream.throw(f"{kind} name must be a string: {name!r}")
        return name

    def _resolve_class(self, ctx: DecodeContext) -> type:
        name = self._read_type_name(ctx, "Class")
        cls = self.resolver.resolve_class(name)
        if cls is None:
            raise UnresolvedTypeDecodeHxSerializeError(
                f"Class not found {name!r}",
                type_name=name,
                kind="class",
                position=ctx.stream.pos,
                data=ctx.stream.data,
            )
        return cls

    def _create_bare_instance(self, cls: type, ctx: DecodeContext) -> object:
        # The serialized fields are the instance's state, so __init__ is not
        # called (like pickle and copy do).
        try:
            return cls.__new__(cls)
        except TypeError as e:
            ctx.stream.throw(f"Unable to create an instance of {cls!r}", cause=e)

    def deserialize_class_instance(
        self, tag: Literal[SerializationTag.kClassInstance], ctx: DecodeContext
    ) -> object:
        cls = self._resolve_class(ctx)
        instance = self._create_bare_instance(cls, ctx)
        ctx.stream.objects.record_reference(instance)

        def set_field(name: str, value: object) -> None:
            try:
                object.__setattr__(instance, name, value)
            except (AttributeError, TypeError) as e:
                ctx.stream.throw(
                    f"Unable to set field {name!r} of {cls.__name__} instance",
                    cause=e,
                )

        self._read_fields(ctx, set_field, enclosing_name=f"Class {cls.__name__}")
        return instance

    def deserialize_custom(
        self, tag: Literal[SerializationTag.kCustom], ctx: DecodeContext
    ) -> object:
        cls = self._resolve_class(ctx)
        if not issubclass(cls, HxCustomUnserializable):
            raise UnresolvedTypeDecodeHxSerializeError(
                f"Class {cls.__name__} has no hx_unserialize() method to read its "
                f"custom data",
                type_name=cls.__name__,
                kind="class",
                position=ctx.stream.pos,
                data=ctx.stream.data,
            )
        instance = cast(HxCustomUnserializable, self._create_bare_instance(cls, ctx))
        ctx.stream.objects.record_reference(instance)
        instance.hx_unserialize(ctx)
        # If the end tag is not next, hx_unserialize() read different data to
        # what was written when serializing.
        if not ctx.stream.consume_if(SerializationTag.kEndObject):
            ctx.stream.throw(
                f"Invalid custom data: {cls.__name__}.hx_unserialize() did not "
                f"stop at the end of the data for its instance"
            )
        return instance

    def _resolve_enum(self, ctx: DecodeContext) -> tuple[str, type[EnumType]]:
        name = self._read_type_name(ctx, "Enum")
        enum = self.resolver.resolve_enum(name)
        if enum is None:
            raise UnresolvedTypeDecodeHxSerializeError(
                f"Enum not found {name!r}",
                type_name=name,
                kind="enum",
                position=ctx.stream.pos,
                data=ctx.stream.data,
            )
        return name, enum

    def _resolve_enum_construct(
        self, ctx: DecodeContext, name: str, enum: type[EnumType], key: str | int
    ) -> tuple[int, EnumConstruct]:
        constructs = enum.get_enum_constructs()
        if isinstance(key, int):
            if 0 <= key < len(constructs):
                return key, constructs[key]
        else:
            for index, construct in enumerate(constructs):
                if construct.name == key:
                    return index, construct
        raise UnresolvedEnumConstructDecodeHxSerializeError(
            f"Unknown enum index/name: {key!r}",
            type_name=name,
            construct=key,
            position=ctx.stream.pos,
            data=ctx.stream.data,
        )

    def _read_enum_instance(
        self,
        ctx: DecodeContext,
        enum: type[EnumType],
        index: int,
        construct: EnumConstruct,
    ) -> EnumType:
        stream = ctx.stream
        stream.read_separator("enum instance")
        arg_count = stream.read_int()
        if not 0 <= arg_count <= construct.arity:
            stream.throw(
                f"Enum constructor {construct.name} takes {construct.arity} "
                f"arguments but data contains {arg_count}"
            )
        args = [ctx.decode_object() for _ in range(arg_count)]
        try:
            instance = enum.create(index, args)
        except (TypeError, ValueError) as e:
            stream.throw(
                f"Unable to create enum instance {construct.name} of {enum!r}",
                cause=e,
            )
        # Unlike other values, enum instances are recorded after their contents.
        stream.objects.record_reference(instance)
        if self.skip_enum_terminator:
            stream.skip_enum_terminator()
        return instance

    def deserialize_enum_by_name(
        self, tag: Literal[SerializationTag.kEnumByName], ctx: DecodeContext
    ) -> EnumType:
        name, enum = self._resolve_enum(ctx)
        construct_name = ctx.decode_object()
        if not isinstance(construct_name, str):
            ctx.stream.throw(
                f"Enum constructor name must be a string: {construct_name!r}"
            )
        index, construct = self._resolve_enum_construct(
            ctx, name, enum, construct_name
        )
        return self._read_enum_instance(ctx, enum, index, construct)

    def deserialize_enum_by_index(
        self, tag: Literal[SerializationTag.kEnumByIndex], ctx: DecodeContext
    ) -> EnumType:
        name, enum = self._resolve_enum(ctx)
        ctx.stream.read_separator("enum instance")
        index, construct = self._resolve_enum_construct(
            ctx, name, enum, ctx.stream.read_int()
        )
        return self._read_enum_instance(ctx, enum, index, construct)

    def deserialize_unsupported(
        self,
        tag: Literal[SerializationTag.kClass, SerializationTag.kEnum],
        ctx: DecodeContext,
    ) -> Never:
        kind = "classes" if tag == SerializationTag.kClass else "enums"
        raise UnsupportedFeatureDecodeHxSerializeError(
            f"Decoding {kind} (tag {str(tag)!r}) is not supported",
            position=ctx.stream.pos - 1,
            data=ctx.stream.data,
        )


default_decode_steps: Final[Sequence[DecodeStep]] = (TagReader(),)
"""
The default sequence of decode steps used to map tags to Python objects.

This is a [`TagReader`](`hxserialize.TagReader`) with no options changed from
the defaults, so classes and enums are resolved with the
[`default_registry`](`hxserialize.resolver.default_registry`).
"""


def _as_text(data: str | bytes | bytearray | memoryview) -> str:
    if isinstance(data, str):
        return data
    try:
        return codecs.decode(bytes(data), "utf-8")
    except UnicodeDecodeError as e:
        raise DecodeHxSerializeError(
            "Data is not valid UTF-8 text",
            position=e.start,
            data=codecs.decode(bytes(data), "utf-8", "replace"),
        ) from e


@dataclass(init=False)
class Decoder:
    """
    A re-usable configuration for deserializing Haxe serialization format data.

    The `decode_steps` argument behaves as described for [`loads()`]. The
    `decode()` and `decodes()` methods behave like `loads()` without needing to
    pass the `decode_steps` for every call.

    [`loads()`]: `hxserialize.loads`

    Parameters
    ----------
    decode_steps
        A sequence of decode steps, which are responsible for creating Python
        values to represent the Haxe values found when decoding data.
    max_depth
        The maximum nesting depth of values, or None for no limit.
    """

    decode_steps: Sequence[DecodeStep]
    """The sequence of decode steps that define how to create Python values."""
    max_depth: int | None

    def __init__(
        self,
        decode_steps: Iterable[DecodeStep] | None = default_decode_steps,
        max_depth: int | None = DEFAULT_MAX_DEPTH,
    ) -> None:
        self.decode_steps = (
            default_decode_steps if decode_steps is None else tuple(decode_steps)
        )
        self.max_depth = max_depth

    def decode(self, fp: SupportsRead[str] | SupportsRead[bytes]) -> object:
        """
        Deserialize Haxe serialization format data from a file.

        Parameters
        ----------
        fp
            The text or binary file-like object to read and deserialize.

        Returns
        -------
        :
            The first value in the `fp`.
        """
        return self.decodes(fp.read())

    def decodes(self, data: str | bytes | bytearray | memoryview) -> object:
        """
        Deserialize Haxe serialization format data from a string.

        Parameters
        ----------
        data
            The serialized data, as `str` or UTF-8 bytes.

        Returns
        -------
        :
            The first value in `data`.
        """
        ctx = DefaultDecodeContext(
            stream=ReadableTagStream(_as_text(data)),
            decode_steps=self.decode_steps,
            max_depth=self.max_depth,
        )
        return ctx.decode_object()


@overload
def loads(
    data: str | bytes | bytearray | memoryview,
    *,
    decode_steps: Iterable[DecodeStep] | None = default_decode_steps,
    max_depth: int | None = DEFAULT_MAX_DEPTH,
) -> object: ...


@overload
def loads(
    data: str | bytes | bytearray | memoryview,
    *,
    max_depth: int | None = DEFAULT_MAX_DEPTH,
    resolver: TypeResolver | None = None,
    constants: Mapping[str, object] | None = None,
    object_type: ObjectType | None = None,
    array_type: ArrayType | None = None,
    list_type: ListType | None = None,
    string_map_type: StringMapType | None = None,
    int_map_type: IntMapType | None = None,
    object_map_type: ObjectMapType | None = None,
    default_timezone: tzinfo | None = None,
    skip_enum_terminator: bool | None = None,
    max_array_length: int | None = DEFAULT_MAX_ARRAY_LENGTH,
) -> object: ...


def loads(
    data: str | bytes | bytearray | memoryview,
    *,
    decode_steps: Iterable[DecodeStep] | None = None,
    max_depth: int | None = DEFAULT_MAX_DEPTH,
    resolver: TypeResolver | None = None,
    constants: Mapping[str, object] | None = None,
    object_type: ObjectType | None = None,
    array_type: ArrayType | None = None,
    list_type: ListType | None = None,
    string_map_type: StringMapType | None = None,
    int_map_type: IntMapType | None = None,
    object_map_type: ObjectMapType | None = None,
    default_timezone: tzinfo | None = None,
    skip_enum_terminator: bool | None = None,
    max_array_length: int | None = DEFAULT_MAX_ARRAY_LENGTH,
) -> object:
    """Deserialize a Haxe value encoded in the Haxe serialization format.

    The serialized Haxe types are mapped to Python equivalents according to the
    keyword argument options:

    1. If `decode_steps` is set, the steps are used as-is and no other
        [TagReader] options can also be set.
    2. If `decode_steps` is not set, other options are used to construct
        a [TagReader] to serve as the `decode_steps`.

    [TagReader]: `hxserialize.decode.TagReader`
    [default_registry]: `hxserialize.resolver.default_registry`

    Parameters
    ----------
    data
        The serialized data, as `str` or UTF-8 bytes.
    decode_steps
        A sequence of decode steps, which are responsible for creating Python
        values to represent the Haxe values found in the `data`.
    max_depth
        The maximum nesting depth of values, or None for no limit.
    resolver
        The `TypeResolver` deciding which classes and enums may be created.
        Default: [default_registry].
    constants, object_type, array_type, list_type, string_map_type, \
int_map_type, object_map_type, default_timezone, skip_enum_terminator, \
max_array_length
        See [TagReader].

    Returns
    -------
    :
        The first value in the `data`, as deserialized by the `decode_steps`.

    Raises
    ------
    DecodeHxSerializeError
        When `data` is not well-formed Haxe serialization format data.
    UnresolvedTypeDecodeHxSerializeError
        When `data` contains a class or enum that the resolver does not allow.
    ThrownValueHxSerializeError
        When `data` contains a thrown value.

    Examples
    --------
    >>> loads("oy1:xi5y1:yai1ai2hg")
    HxObject(x=5, y=HxArray([1, 2]))

    Unassigned Array elements are `HxHole`, not `None`:

    >>> loads("au2i3h")
    HxArray([HxHole, None, 3])
    """
    if decode_steps is not None:
        if not (
            resolver is None
            and constants is None
            and object_type is None
            and array_type is None
            and list_type is None
            and string_map_type is None
            and int_map_type is None
            and object_map_type is None
            and default_timezone is None
            and skip_enum_terminator is None
            and max_array_length == DEFAULT_MAX_ARRAY_LENGTH
        ):
            raise TypeError(
                "'decode_steps' argument cannot be passed to loads() with "
                "arguments for TagReader"
            )
        return Decoder(decode_steps=decode_steps, max_depth=max_depth).decodes(data)

    tag_reader = TagReader(
        resolver=resolver,
        constants=constants,
        object_type=object_type,
        array_type=array_type,
        list_type=list_type,
        string_map_type=string_map_type,
        int_map_type=int_map_type,
        object_map_type=object_map_type,
        default_timezone=default_timezone,
        skip_enum_terminator=(
            True if skip_enum_terminator is None else skip_enum_terminator
        ),
        max_array_length=max_array_length,
    )
    return Decoder(decode_steps=[tag_reader], max_depth=max_depth).decodes(data)
