"""dflogreader - decode self-describing DataFlash flight-log records."""
from dflogreader.errors import (
    ConfigurationError,
    FatalError,
    FieldConversionError,
    LogDecodeError,
    MalformedRecord,
    RequiredFieldMissing,
)
from dflogreader.log.handler import MsgHandler
from dflogreader.log.records import FormatDescriptor

__all__ = [
    "ConfigurationError",
    "FatalError",
    "FieldConversionError",
    "FormatDescriptor",
    "LogDecodeError",
    "MalformedRecord",
    "MsgHandler",
    "RequiredFieldMissing",
]
