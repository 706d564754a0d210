import struct

import pytest

from dflogreader.log.handler import MsgHandler
from dflogreader.log.records import FormatDescriptor

# Independent of the library's own catalogue
PACK_CODES = {
    "b": "b", "B": "B", "M": "B",
    "h": "h", "H": "H", "c": "h", "C": "H",
    "i": "i", "I": "I", "e": "i", "E": "I", "L": "i",
    "f": "f", "q": "q", "Q": "Q",
    "n": "4s", "N": "16s", "Z": "64s",
}

GPS_LABELS = "Status,TimeMS,Week,NSats,HDop,Lat,Lng,Alt,Spd,GCrs,VZ"


def pack_record(descriptor: FormatDescriptor, **values) -> bytes:
    """Build a record: sync bytes, type id, then each field in order (missing = 0)."""
    out = bytearray([0xA3, 0x95, descriptor.type & 0xFF])
    for label, code in zip(descriptor.label_list, descriptor.format):
        fmt = "<" + PACK_CODES[code]
        default = b"" if fmt.endswith("s") else 0
        out += struct.pack(fmt, values.get(label, default))
    return bytes(out)


@pytest.fixture
def gps_descriptor():
    return FormatDescriptor("GPS", "BIHBcLLeeEB", GPS_LABELS, type=130)


@pytest.fixture
def gps(gps_descriptor):
    return MsgHandler(gps_descriptor)
