"""Field type catalogue and numeric conversion for DataFlash records.

Every FMT type code maps to one FieldType carrying its on-disk size and
its decode function. size_for() and the accessor's decode step both read
FIELD_TYPES, so a code is either fully supported or not registered.

Values are little-endian and packed with no padding. Scaled codes
(c, C, e, E) decode to the raw stored integer.

Conversion to a requested kind follows C cast semantics:

  integer -> fixed integer kind   two's-complement wrap (300 -> uint8 44)
  float   -> fixed integer kind   truncate toward zero, then wrap
  any     -> float32              round to nearest single precision
  any     -> float / float64      Python float
"""
from __future__ import annotations

import math
import struct
from dataclasses import dataclass
from typing import Callable, Optional, Union

from dflogreader.errors import FieldConversionError

Number = Union[int, float]
Decoder = Callable[[Union[bytes, bytearray, memoryview], int], Union[int, float, bytes]]


@dataclass(frozen=True, slots=True)
class FieldType:
    """One registered FMT type code."""
    code: str
    size: int
    description: str
    decode: Decoder
    is_text: bool = False


def _numeric(code: str, fmt: str, description: str) -> FieldType:
    packer = struct.Struct("<" + fmt)

    def decode(data, offset):
        return packer.unpack_from(data, offset)[0]

    return FieldType(code, packer.size, description, decode)


def _chars(code: str, size: int, description: str) -> FieldType:
    def decode(data, offset):
        return bytes(data[offset:offset + size])

    return FieldType(code, size, description, decode, is_text=True)


FIELD_TYPES: dict[str, FieldType] = {t.code: t for t in (
    _numeric("b", "b", "int8"),
    _numeric("B", "B", "uint8"),
    _numeric("M", "B", "uint8 flight mode"),
    _numeric("h", "h", "int16"),
    _numeric("H", "H", "uint16"),
    _numeric("c", "h", "int16 * 100"),
    _numeric("C", "H", "uint16 * 100"),
    _numeric("i", "i", "int32"),
    _numeric("I", "I", "uint32"),
    _numeric("e", "i", "int32 * 100"),
    _numeric("E", "I", "uint32 * 100"),
    _numeric("L", "i", "int32 latitude/longitude"),
    _numeric("f", "f", "float32"),
    _numeric("q", "q", "int64"),
    _numeric("Q", "Q", "uint64"),
    _chars("n", 4, "char[4]"),
    _chars("N", 16, "char[16]"),
    _chars("Z", 64, "char[64]"),
)}


def field_type(code: str) -> Optional[FieldType]:
    return FIELD_TYPES.get(code)


def size_for(code: str) -> int:
    """Byte size of a type code, or 0 if the code is not registered."""
    ft = FIELD_TYPES.get(code)
    return ft.size if ft is not None else 0


@dataclass(frozen=True, slots=True)
class Kind:
    """A caller-requested value representation."""
    name: str
    bits: int          # 0 = unbounded Python int
    signed: bool
    floating: bool = False


KINDS: dict[str, Kind] = {k.name: k for k in (
    Kind("int8", 8, True),
    Kind("uint8", 8, False),
    Kind("int16", 16, True),
    Kind("uint16", 16, False),
    Kind("int32", 32, True),
    Kind("uint32", 32, False),
    Kind("int64", 64, True),
    Kind("uint64", 64, False),
    Kind("float32", 32, True, floating=True),
    Kind("float64", 64, True, floating=True),
    Kind("int", 0, True),
    Kind("float", 64, True, floating=True),
)}

KIND_NAMES = tuple(KINDS)

KindLike = Union[Kind, str, type]

_FLOAT32 = struct.Struct("<f")


def resolve_kind(kind: KindLike) -> Kind:
    """Accept a Kind, a kind name ("uint8"), or the builtins int/float."""
    if isinstance(kind, Kind):
        return kind
    if kind is int:
        return KINDS["int"]
    if kind is float:
        return KINDS["float"]
    try:
        return KINDS[kind]
    except (KeyError, TypeError):
        raise ValueError(f"Unknown value kind: {kind!r}") from None


def to_float32(value: float) -> float:
    try:
        return _FLOAT32.unpack(_FLOAT32.pack(value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def convert(value: Number, kind: Kind) -> Number:
    """Convert a decoded value to `kind` using C cast rules."""
    if kind.floating:
        value = float(value)
        return to_float32(value) if kind.bits == 32 else value

    if isinstance(value, float):
        if not math.isfinite(value):
            raise FieldConversionError(f"Cannot convert {value} to {kind.name}")
        value = math.trunc(value)

    if kind.bits == 0:
        return value
    value &= (1 << kind.bits) - 1
    if kind.signed and value >= 1 << (kind.bits - 1):
        value -= 1 << kind.bits
    return value
