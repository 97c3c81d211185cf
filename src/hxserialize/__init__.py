"""The main public API of hxserialize."""

from __future__ import annotations

from hxserialize._errors import DecodeHxSerializeError as DecodeHxSerializeError
from hxserialize._errors import HxSerializeError as HxSerializeError
from hxserialize._errors import (
    InvalidTypeNameHxSerializeError as InvalidTypeNameHxSerializeError,
)
from hxserialize._errors import (
    ThrownValueHxSerializeError as ThrownValueHxSerializeError,
)
from hxserialize._errors import (
    UnhandledTagDecodeHxSerializeError as UnhandledTagDecodeHxSerializeError,
)
from hxserialize._errors import (
    UnresolvedEnumConstructDecodeHxSerializeError as UnresolvedEnumConstructDecodeHxSerializeError,  # noqa: E501
)
from hxserialize._errors import (
    UnresolvedTypeDecodeHxSerializeError as UnresolvedTypeDecodeHxSerializeError,
)
from hxserialize._errors import (
    UnsupportedFeatureDecodeHxSerializeError as UnsupportedFeatureDecodeHxSerializeError,  # noqa: E501
)
from hxserialize.constants import SerializationTag as SerializationTag
from hxserialize.decode import DecodeContext as DecodeContext
from hxserialize.decode import Decoder as Decoder
from hxserialize.decode import DecodeStep as DecodeStep
from hxserialize.decode import DecodeStepFn as DecodeStepFn
from hxserialize.decode import DecodeStepObject as DecodeStepObject
from hxserialize.decode import HxCustomUnserializable as HxCustomUnserializable
from hxserialize.decode import TagReader as TagReader
from hxserialize.decode import default_decode_steps as default_decode_steps
from hxserialize.decode import loads as loads
from hxserialize.resolver import EnumType as EnumType
from hxserialize.resolver import TypeRegistry as TypeRegistry
from hxserialize.resolver import TypeResolver as TypeResolver
from hxserialize.resolver import default_registry as default_registry
from hxserialize.resolver import (
    register_serializable_class as register_serializable_class,
)
from hxserialize.resolver import (
    register_serializable_enum as register_serializable_enum,
)
from hxserialize.resolver import serializable_class as serializable_class
from hxserialize.resolver import serializable_enum as serializable_enum
