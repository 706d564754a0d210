"""Exceptions raised while building field indexes and decoding records."""
from __future__ import annotations

from typing import Iterable


class LogDecodeError(Exception):
    """Base class for all dflogreader errors."""


class ConfigurationError(LogDecodeError):
    """A format descriptor (or config table) cannot be turned into a field index."""


class MalformedRecord(LogDecodeError):
    """A field read would run past the end of the supplied record buffer."""

    def __init__(self, label: str, offset: int, length: int, size: int):
        self.label = label
        self.offset = offset
        self.length = length
        self.size = size
        super().__init__(
            f"Field ({label}) at offset {offset} needs {length} bytes "
            f"but the record is only {size} bytes"
        )


class RequiredFieldMissing(LogDecodeError):
    """A required field is not part of the record's format."""

    def __init__(self, label: str, format_name: str = "", available: Iterable[str] = ()):
        self.label = label
        self.format_name = format_name
        self.available = tuple(available)
        options = ",".join(self.available) or "(none)"
        super().__init__(
            f"Field ({label}) not found for {format_name or 'format'}; options are: {options}"
        )


class FieldConversionError(LogDecodeError, ValueError):
    """A decoded value cannot be represented in the requested kind."""


class FatalError(LogDecodeError):
    """Internal invariant broken: a field type reached decoding without a decoder."""
