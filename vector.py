# vector.py
"""
Immutable 2D point/displacement used for region geometry and settings.

Bulk particle state never goes through this type; it lives in NumPy arrays
inside each Region. Vec2 is for the handful of values that describe a region
(corners, sizes, direction vectors, canvas dimensions).
"""
from dataclasses import dataclass
from typing import Sequence, Tuple


@dataclass(frozen=True)
class Vec2:
    x: float
    y: float

    def add(self, other: "Vec2") -> "Vec2":
        """Returns a new vector, leaving both operands untouched."""
        return Vec2(self.x + other.x, self.y + other.y)

    def __add__(self, other: "Vec2") -> "Vec2":
        return self.add(other)

    def __iter__(self):
        yield self.x
        yield self.y

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    @classmethod
    def from_sequence(cls, values: Sequence[float]) -> "Vec2":
        x, y = values
        return cls(float(x), float(y))
