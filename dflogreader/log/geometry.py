"""Position and vector values built from log fields."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator


@dataclass(slots=True)
class Location:
    """Geographic position in the recorder's integer units."""
    lat: int          # degrees * 1e7
    lng: int          # degrees * 1e7
    alt: int          # centimetres
    options: int = 0

    @property
    def lat_deg(self) -> float:
        return self.lat * 1e-7

    @property
    def lng_deg(self) -> float:
        return self.lng * 1e-7

    @property
    def alt_m(self) -> float:
        return self.alt * 0.01


@dataclass(slots=True)
class Vector3:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __iter__(self) -> Iterator[float]:
        return iter((self.x, self.y, self.z))

    def __getitem__(self, index: int) -> float:
        return (self.x, self.y, self.z)[index]

    def length(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)
