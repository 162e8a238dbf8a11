"""Triangle helpers shared by the mesh kernel and the exporters."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

from tinymesh.geom import cross, epsilon, mag, sub

Vec3 = Tuple[float, float, float]


@dataclass(frozen=True)
class Triangle:
    """Immutable triangle representation in XYZ space."""

    v0: Vec3
    v1: Vec3
    v2: Vec3

    def area_normal(self) -> Vec3:
        return area_normal(self.v0, self.v1, self.v2)

    def normal(self) -> Vec3 | None:
        return triangle_normal(self.v0, self.v1, self.v2)

    def area(self) -> float:
        return triangle_area(self.v0, self.v1, self.v2)


def area_normal(v0: Sequence[float], v1: Sequence[float], v2: Sequence[float]) -> Vec3:
    """Return ``(v1 - v0) x (v2 - v0)``.

    The result is not normalized: its length is twice the triangle's
    area, so summing these weights larger faces more heavily.
    """

    n = cross(sub(v1, v0), sub(v2, v0))
    return (n[0], n[1], n[2])


def triangle_normal(v0: Sequence[float], v1: Sequence[float], v2: Sequence[float]) -> Vec3 | None:
    """Return the unit normal of a triangle or ``None`` if degenerate."""

    n = area_normal(v0, v1, v2)
    length = mag(n)
    if length <= epsilon:
        return None
    return (n[0] / length, n[1] / length, n[2] / length)


def triangle_area(v0: Sequence[float], v1: Sequence[float], v2: Sequence[float]) -> float:
    """Return the area of a triangle."""

    return 0.5 * mag(area_normal(v0, v1, v2))


__all__ = [
    "Triangle",
    "Vec3",
    "area_normal",
    "triangle_normal",
    "triangle_area",
]
