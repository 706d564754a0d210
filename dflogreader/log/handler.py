"""Field index and by-label accessors for a single DataFlash log format.

A MsgHandler is built once per FMT declaration. It lays the declared
fields out back to back after the record preamble, then answers
by-label queries against raw record buffers:

    handler = MsgHandler(FormatDescriptor("GPS", "BIHBcLLeeEB", "Status,..."))
    lat = handler.field_value(record, "Lat", "int32")       # None if absent
    lat = handler.require_field(record, "Lat", "int32")     # raises if absent
"""
from __future__ import annotations

import logging
import math
from typing import Iterator, Optional, Union

from dflogreader.errors import (
    ConfigurationError,
    FatalError,
    FieldConversionError,
    MalformedRecord,
    RequiredFieldMissing,
)
from dflogreader.log.constants import (
    AXES,
    GROUND_COURSE_SCALE,
    GROUND_SPEED_SCALE,
    MAX_FIELDS,
    OFFSET_ABSENT,
    PREAMBLE_SIZE,
)
from dflogreader.log.geometry import Location, Vector3
from dflogreader.log.records import FieldEntry, FormatDescriptor
from dflogreader.log.types import FIELD_TYPES, FieldType, KindLike, convert, resolve_kind, size_for

log = logging.getLogger(__name__)

Buffer = Union[bytes, bytearray, memoryview]


def build_field_index(descriptor: FormatDescriptor,
                      preamble_size: int = PREAMBLE_SIZE) -> tuple[FieldEntry, ...]:
    """Parse a descriptor into field entries with packed offsets.

    Raises ConfigurationError for more than MAX_FIELDS fields, unknown
    type codes, or per-field sequences that disagree in length.
    """
    name = descriptor.name
    labels = descriptor.label_list
    codes = descriptor.format

    if len(labels) > MAX_FIELDS or len(codes) > MAX_FIELDS:
        raise ConfigurationError(
            f"{name}: {max(len(labels), len(codes))} fields exceeds the maximum of {MAX_FIELDS}"
        )
    if len(labels) != len(codes):
        raise ConfigurationError(
            f"{name}: {len(codes)} field types for {len(labels)} labels "
            f"(format={codes}) (labels={descriptor.labels})"
        )

    for label, code in zip(labels, codes):
        if size_for(code) == 0:
            raise ConfigurationError(f"{name}: unknown field type ({code}) for {label}")

    lengths = descriptor.lengths
    if lengths is None:
        lengths = tuple(size_for(code) for code in codes)
    elif len(lengths) != len(codes):
        raise ConfigurationError(f"{name}: {len(lengths)} field lengths for {len(codes)} fields")

    entries = []
    offset = preamble_size
    for label, code, length in zip(labels, codes, lengths):
        if length != size_for(code):
            raise ConfigurationError(
                f"{name}: field {label} declares {length} bytes but type ({code}) "
                f"is {size_for(code)} bytes"
            )
        entries.append(FieldEntry(label, code, offset, length, present=offset != OFFSET_ABSENT))
        offset += length

    if descriptor.length is not None and descriptor.length != offset:
        raise ConfigurationError(
            f"{name}: declared record length {descriptor.length} but fields end at {offset}"
        )

    log.debug("Built field index for %s: %d fields, %d bytes", name, len(entries), offset)
    return tuple(entries)


class MsgHandler:
    """Decoder for records of one log format.

    The field index is immutable after construction, so one handler may
    be shared between threads for lookups.
    """

    def __init__(self, descriptor: FormatDescriptor, preamble_size: int = PREAMBLE_SIZE):
        self.name = descriptor.name
        self.type = descriptor.type
        self.fields = build_field_index(descriptor, preamble_size)
        self.record_size = preamble_size + sum(entry.length for entry in self.fields)

    def __repr__(self) -> str:
        return f"MsgHandler({self.name!r}, fields={len(self.fields)}, size={self.record_size})"

    def __iter__(self) -> Iterator[FieldEntry]:
        return iter(self.fields)

    def __contains__(self, label: str) -> bool:
        entry = self.find_field(label)
        return entry is not None and entry.present

    @property
    def labels(self) -> list[str]:
        return [entry.label for entry in self.fields]

    def labels_string(self, bufferlen: Optional[int] = None) -> str:
        """Comma-separated labels, cut to fit `bufferlen` bytes with a terminator.

        The limit counts UTF-8 bytes; a character split by the cut is dropped.
        """
        joined = ",".join(self.labels)
        if bufferlen is None:
            return joined
        encoded = joined.encode("utf-8")[:max(bufferlen - 1, 0)]
        return encoded.decode("utf-8", errors="ignore")

    def find_field(self, label: str) -> Optional[FieldEntry]:
        for entry in self.fields:
            if entry.label == label:
                return entry
        return None

    def _lookup(self, label: str) -> Optional[FieldEntry]:
        entry = self.find_field(label)
        if entry is None or not entry.present:
            return None
        return entry

    def _check_bounds(self, msg: Buffer, entry: FieldEntry) -> None:
        if entry.offset + entry.length > len(msg):
            raise MalformedRecord(entry.label, entry.offset, entry.length, len(msg))

    def _decode(self, msg: Buffer, entry: FieldEntry) -> tuple[Union[int, float, bytes], FieldType]:
        self._check_bounds(msg, entry)
        ft = FIELD_TYPES.get(entry.type)
        if ft is None:
            raise FatalError(f"Unhandled format type ({entry.type}) for {self.name}.{entry.label}")
        return ft.decode(msg, entry.offset), ft

    # -- plain lookups: None when the field is not in this format ---------

    def field_value(self, msg: Buffer, label: str, kind: Optional[KindLike] = None):
        """Value of `label` converted to `kind`, or None if the format lacks it.

        With kind=None the native value is returned: int or float for
        numeric codes, raw bytes for character arrays.
        """
        target = resolve_kind(kind) if kind is not None else None
        entry = self._lookup(label)
        if entry is None:
            return None
        value, ft = self._decode(msg, entry)
        if target is None:
            return value
        if ft.is_text:
            raise FieldConversionError(
                f"{self.name}.{label} is a character field ({entry.type}), not {target.name}"
            )
        return convert(value, target)

    def field_vector3(self, msg: Buffer, label: str, kind: KindLike = float) -> Optional[Vector3]:
        """Read labelX, labelY, labelZ; None if any axis is missing."""
        values = []
        for axis in AXES:
            value = self.field_value(msg, label + axis, kind)
            if value is None:
                return None
            values.append(value)
        return Vector3(*values)

    def field_string_into(self, msg: Buffer, label: str, buffer: Union[bytearray, memoryview]) -> bool:
        """Copy a field's raw bytes into `buffer`, always NUL-terminated.

        At most len(buffer) - 1 bytes are copied; the rest of the buffer
        is zeroed. Returns False (buffer untouched) if the field is absent.
        """
        if len(buffer) == 0:
            raise ValueError("buffer must have room for the terminating NUL")
        entry = self._lookup(label)
        if entry is None:
            return False
        self._check_bounds(msg, entry)
        count = min(len(buffer) - 1, entry.length)
        buffer[0:count] = msg[entry.offset:entry.offset + count]
        buffer[count:len(buffer)] = bytes(len(buffer) - count)
        return True

    def field_string(self, msg: Buffer, label: str, bufferlen: Optional[int] = None) -> Optional[str]:
        """Text of a field up to its first NUL, bounded like field_string_into."""
        entry = self._lookup(label)
        if entry is None:
            return None
        buffer = bytearray(entry.length + 1 if bufferlen is None else bufferlen)
        self.field_string_into(msg, label, buffer)
        return buffer.split(b"\x00", 1)[0].decode("utf-8", errors="replace")

    # -- required lookups: RequiredFieldMissing when absent ---------------

    def missing(self, label: str) -> RequiredFieldMissing:
        return RequiredFieldMissing(label, self.name, self.labels)

    def require_field(self, msg: Buffer, label: str, kind: Optional[KindLike] = None):
        value = self.field_value(msg, label, kind)
        if value is None:
            raise self.missing(label)
        return value

    def require_vector3(self, msg: Buffer, label: str, kind: KindLike = float) -> Vector3:
        value = self.field_vector3(msg, label, kind)
        if value is None:
            raise self.missing(label)
        return value

    def require_string(self, msg: Buffer, label: str, bufferlen: Optional[int] = None) -> str:
        value = self.field_string(msg, label, bufferlen)
        if value is None:
            raise self.missing(label)
        return value

    # -- composites --------------------------------------------------------

    def location_from_msg(self, msg: Buffer, label_lat: str, label_lng: str,
                          label_alt: str) -> Location:
        return Location(
            lat=self.require_field(msg, label_lat, "int32"),
            lng=self.require_field(msg, label_lng, "int32"),
            alt=self.require_field(msg, label_alt, "int32"),
        )

    def ground_vel_from_msg(self, msg: Buffer, label_speed: str, label_course: str,
                            label_vz: str) -> Vector3:
        """North-east-down velocity from ground speed, course and climb.

        Speed is in cm/s and course in centidegrees clockwise from north;
        the vertical component is taken as stored.
        """
        ground_speed = self.require_field(msg, label_speed, "uint32")
        ground_course = self.require_field(msg, label_course, "int32")
        vz = self.require_field(msg, label_vz, "float32")

        speed = ground_speed * GROUND_SPEED_SCALE
        course = math.radians(ground_course * GROUND_COURSE_SCALE)
        return Vector3(speed * math.cos(course), speed * math.sin(course), vz)

    def attitude_from_msg(self, msg: Buffer, label_roll: str, label_pitch: str,
                          label_yaw: str) -> Vector3:
        # Units are whatever the format stores; no scaling here
        return Vector3(
            float(self.require_field(msg, label_roll, "int16")),
            float(self.require_field(msg, label_pitch, "int16")),
            float(self.require_field(msg, label_yaw, "uint16")),
        )
