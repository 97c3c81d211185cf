"""Python representations of the Haxe types in the Haxe serialization format."""

from __future__ import annotations

from hxserialize.hxtypes.hxarray import HxArray as HxArray
from hxserialize.hxtypes.hxarray import HxHole as HxHole
from hxserialize.hxtypes.hxarray import HxHoleType as HxHoleType
from hxserialize.hxtypes.hxcollections import HxIntMap as HxIntMap
from hxserialize.hxtypes.hxcollections import HxList as HxList
from hxserialize.hxtypes.hxcollections import HxObjectMap as HxObjectMap
from hxserialize.hxtypes.hxcollections import HxStringMap as HxStringMap
from hxserialize.hxtypes.hxenum import EnumConstruct as EnumConstruct
from hxserialize.hxtypes.hxenum import HxEnum as HxEnum
from hxserialize.hxtypes.hxobject import HxObject as HxObject
