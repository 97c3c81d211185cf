"""Constant values related to the Haxe serialization format."""

from __future__ import annotations

from enum import StrEnum
from typing import Final

DEFAULT_MAX_DEPTH: Final = 100
"""The default limit on how deeply values can be nested when decoding.

Each nested value is decoded by a recursive call, so without a limit,
maliciously deep data would exhaust the Python stack.
"""

DEFAULT_MAX_ARRAY_LENGTH: Final = 1 << 20
"""The default limit on the length of an Array extended by an `u` fill.

A fill of `n` elements occupies `n` list slots but only a few characters of
input, so a fill's count is not bounded by the size of the data.
"""

HX_BASE64_TRANSLATION: Final = str.maketrans({"%": "+", ":": "/"})
"""Maps Haxe's serialization Base64 alphabet to the standard Base64 alphabet.

Haxe replaces `+` and `/` with `%` and `:` so that Base64 output does not need
escaping in URLs.
"""

RESERVED_TYPE_NAMES: Final = frozenset({"", "null", "undefined"})
"""Names that can't identify a serializable class or enum."""


class SerializationTag(StrEnum):
    """1-character tags used to identify the type of the next value.

    Also included are the structural characters that occur within a value's
    payload, such as the end markers of collections.
    """

    # Constants (no data)
    kNull = "n"
    kTrue = "t"
    kFalse = "f"
    kZero = "z"
    kNaN = "k"
    kNegativeInfinity = "m"
    kPositiveInfinity = "p"
    # Integer. Decimal digits, optionally preceded by -
    kInt = "i"
    # Float. Decimal float literal, such as 1.5e-10
    kFloat = "d"
    # String. length:percent-encoded-text
    kString = "y"
    # Reference to a previously-decoded string. index
    kStringReference = "R"
    # Reference to a previously-decoded object. index
    kObjectReference = "r"
    # Array. Values, then kEnd. kArrayFill can occur in place of a value.
    kBeginArray = "a"
    # Array fill. n: append n-1 empty slots and then null
    kArrayFill = "u"
    # Anonymous object. String key, value pairs, then kEndObject
    kBeginObject = "o"
    kEndObject = "g"
    # Thrown value. A single value
    kException = "x"
    # List. Values, then kEnd
    kBeginList = "l"
    # StringMap. String key, value pairs, then kEnd
    kBeginStringMap = "b"
    # IntMap. (: int-key value) items, then kEnd
    kBeginIntMap = "q"
    # ObjectMap. Object key, value pairs, then kEnd
    kBeginObjectMap = "M"
    # End of Array, List and Maps
    kEnd = "h"
    # Date. Milliseconds since epoch as a float, or YYYY-MM-DD HH:MM:SS
    kDate = "v"
    # Bytes. length:modified-base64
    kBytes = "s"
    # Class instance. Class name, then field name, value pairs, then kEndObject
    kClassInstance = "c"
    # Enum instance. Enum name, constructor name, :, arg count, args
    kEnumByName = "w"
    # Enum instance. Enum name, :, constructor index, :, arg count, args
    kEnumByIndex = "j"
    # Custom class instance. Class name, class-specific data, then kEndObject
    kCustom = "C"
    # Class and Enum values themselves (not instances)
    kClass = "A"
    kEnum = "B"
    # Separates parts of a value's data, such as string length and content
    kSeparator = ":"


CONSTANT_TAGS: Final = frozenset(
    {
        SerializationTag.kNull,
        SerializationTag.kTrue,
        SerializationTag.kFalse,
        SerializationTag.kZero,
        SerializationTag.kNaN,
        SerializationTag.kNegativeInfinity,
        SerializationTag.kPositiveInfinity,
    }
)
"""Tags which represent a fixed value, without any further data."""

UNSUPPORTED_TAGS: Final = frozenset({SerializationTag.kClass, SerializationTag.kEnum})
"""Tags which are recognised but not supported when decoding."""
