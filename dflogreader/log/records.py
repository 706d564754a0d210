"""Format descriptor and field index entries for DataFlash log formats."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from dflogreader.errors import ConfigurationError


def _is_int(value: Any) -> bool:
    # TOML booleans are ints to Python
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True, slots=True)
class FormatDescriptor:
    """Declaration of one record type, as carried by a FMT record."""
    name: str                                  # Short message name (GPS, ATT, ...)
    format: str                                # One type code per field
    labels: str                                # Comma-separated field labels
    lengths: Optional[tuple[int, ...]] = None  # Per-field byte lengths; derived from codes if None
    type: int = 0                              # Message type id in the preamble
    length: Optional[int] = None               # Total record length, preamble included

    @property
    def label_list(self) -> list[str]:
        """Labels in declaration order. Empty entries are skipped."""
        return [label for label in self.labels.split(",") if label]

    @classmethod
    def from_mapping(cls, name: str, data: Mapping[str, Any]) -> FormatDescriptor:
        """Build a descriptor from a config table ([formats.NAME] in TOML)."""
        try:
            fmt = data["format"]
            labels = data["labels"]
        except KeyError as e:
            raise ConfigurationError(f"Format {name} is missing the '{e.args[0]}' key") from None
        if not isinstance(fmt, str) or not isinstance(labels, str):
            raise ConfigurationError(f"Format {name}: 'format' and 'labels' must be strings")

        lengths = data.get("lengths")
        if lengths is not None:
            if not isinstance(lengths, list) or not all(_is_int(n) for n in lengths):
                raise ConfigurationError(f"Format {name}: 'lengths' must be a list of integers")
            lengths = tuple(lengths)

        type_id = data.get("type", 0)
        length = data.get("length")
        if not _is_int(type_id):
            raise ConfigurationError(f"Format {name}: 'type' must be an integer")
        if length is not None and not _is_int(length):
            raise ConfigurationError(f"Format {name}: 'length' must be an integer")

        return cls(
            name=name,
            format=fmt,
            labels=labels,
            lengths=lengths,
            type=type_id,
            length=length,
        )


@dataclass(frozen=True, slots=True)
class FieldEntry:
    """A parsed field: where it lives in the record and how to decode it."""
    label: str
    type: str       # Single type code
    offset: int     # Byte offset from the start of the record
    length: int     # Byte length
    present: bool = True
