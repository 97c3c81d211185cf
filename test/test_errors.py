from __future__ import annotations

from dataclasses import dataclass

from hxserialize._errors import (
    DecodeHxSerializeError,
    HxSerializeError,
    ThrownValueHxSerializeError,
    UnhandledTagDecodeHxSerializeError,
    UnresolvedEnumConstructDecodeHxSerializeError,
    UnresolvedTypeDecodeHxSerializeError,
)
from hxserialize.constants import SerializationTag


@dataclass(init=False)
class ExampleHxSerializeError(HxSerializeError):
    level: int
    limit: float

    def __init__(self, message: str, *, level: int, limit: float) -> None:
        super().__init__(message)
        self.level = level
        self.limit = limit


def test_hxserializeerror_str_with_fields() -> None:
    assert (
        str(ExampleHxSerializeError("Level too high", level=3, limit=2.123))
        == "Level too high: level=3, limit=2.123"
    )


def test_hxserializeerror_str_without_fields() -> None:
    assert str(HxSerializeError("Something went wrong")) == "Something went wrong"


def test_DecodeHxSerializeError() -> None:
    err = DecodeHxSerializeError("Msg", position=2, data="ai1")

    assert isinstance(err, ValueError)
    assert err.message == "Msg"
    assert str(err) == "Msg: position=2, data='ai1'"


def test_DecodeHxSerializeError_str_abbreviates_long_data() -> None:
    data = "a" + "i1" * 100
    err = DecodeHxSerializeError("Msg", position=101, data=data)

    assert str(err) == f"Msg: position=101, data=...{data[71:131]!r}..."
    assert err.data == data

    err = DecodeHxSerializeError("Msg", position=0, data=data)
    assert str(err) == f"Msg: position=0, data={data[:30]!r}..."

    err = DecodeHxSerializeError("Msg", position=201, data=data)
    assert str(err) == f"Msg: position=201, data=...{data[171:]!r}"


def test_UnhandledTagDecodeHxSerializeError() -> None:
    err = UnhandledTagDecodeHxSerializeError(
        "Msg", tag=SerializationTag.kEnd, position=0, data="h"
    )

    assert err.tag == "h"
    assert str(err) == "Msg: position=0, data='h', tag=<SerializationTag.kEnd: 'h'>"


def test_UnresolvedEnumConstructDecodeHxSerializeError() -> None:
    err = UnresolvedEnumConstructDecodeHxSerializeError(
        "Msg", type_name="Color", construct=3, position=12, data="jy5:Color:3:0"
    )

    assert isinstance(err, UnresolvedTypeDecodeHxSerializeError)
    assert err.kind == "enum"
    assert err.construct == 3
    assert (
        str(err) == "Msg: position=12, data='jy5:Color:3:0', type_name='Color', "
        "kind='enum', construct=3"
    )


def test_ThrownValueHxSerializeError() -> None:
    err = ThrownValueHxSerializeError("Msg", value=["oops"])

    assert not isinstance(err, DecodeHxSerializeError)
    assert err.value == ["oops"]
    assert str(err) == "Msg: value=['oops']"
