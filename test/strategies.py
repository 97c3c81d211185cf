"""Hypothesis strategies and helpers to create Haxe serialization format data."""

from __future__ import annotations

import base64
import math
from urllib.parse import quote

from hypothesis import strategies as st

from hxserialize.constants import SerializationTag


def hx_int(value: int) -> str:
    if value == 0:
        return SerializationTag.kZero
    return f"{SerializationTag.kInt}{value}"


def hx_float(value: float) -> str:
    if math.isnan(value):
        return SerializationTag.kNaN
    if math.isinf(value):
        return (
            SerializationTag.kPositiveInfinity
            if value > 0
            else SerializationTag.kNegativeInfinity
        )
    return f"{SerializationTag.kFloat}{value!r}"


def hx_string(value: str) -> str:
    # Haxe encodes strings with encodeURIComponent(), which leaves these
    # characters unescaped.
    encoded = quote(value, safe="-_.!~*'()")
    return f"{SerializationTag.kString}{len(encoded)}:{encoded}"


def hx_bytes(value: bytes) -> str:
    encoded = (
        base64.b64encode(value)
        .decode("ascii")
        .rstrip("=")
        .replace("+", "%")
        .replace("/", ":")
    )
    return f"{SerializationTag.kBytes}{len(encoded)}:{encoded}"


def hx_array(*items: str) -> str:
    return f"{SerializationTag.kBeginArray}{''.join(items)}{SerializationTag.kEnd}"


def hx_object(**fields: str) -> str:
    body = "".join(hx_string(name) + value for name, value in fields.items())
    return f"{SerializationTag.kBeginObject}{body}{SerializationTag.kEndObject}"


hx_ints = st.integers(min_value=-(2**31), max_value=2**31 - 1)
"""Integers in the range of Haxe's 32-bit Int."""

finite_floats = st.floats(allow_nan=False, allow_infinity=False)

text_values = st.text()
"""Strings containing any character, except unpaired surrogates."""
