"""Analytic shape descriptors consumed by the tinymesh generators."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple

from tinymesh.geom import epsilon, isgoodnum, mag, point

Vec3 = Tuple[float, float, float]


def to_vec3(point_like: Sequence[float]) -> Vec3:
    """Return the XYZ components of a point/vector as a tuple."""

    if len(point_like) < 3:
        raise ValueError("value must have at least three components")
    return float(point_like[0]), float(point_like[1]), float(point_like[2])


def _check_radius(r, what="radius") -> float:
    if not isgoodnum(r) or r <= 0.0:
        raise ValueError("bad {}: {}".format(what, r))
    return float(r)


def _check_direction(v, what="direction") -> Vec3:
    v = to_vec3(v)
    if mag(v) < epsilon:
        raise ValueError("zero-length {} not allowed".format(what))
    return v


@dataclass(frozen=True)
class Box:
    """Axis-aligned box spanning corners ``a`` (min) and ``b`` (max)."""

    a: Vec3
    b: Vec3

    def __post_init__(self):
        object.__setattr__(self, "a", to_vec3(self.a))
        object.__setattr__(self, "b", to_vec3(self.b))

    @classmethod
    def cube(cls, r: float) -> "Box":
        """Cube centered on the origin with half-side ``r``."""
        return cls((-r, -r, -r), (r, r, r))

    @classmethod
    def null(cls) -> "Box":
        """The degenerate box used to stand for "no extent"."""
        return cls((0.0, 0.0, 0.0), (0.0, 0.0, 0.0))

    @classmethod
    def from_points(cls, points: Iterable[Sequence[float]]) -> "Box":
        pts = [to_vec3(p) for p in points]
        if not pts:
            return cls.null()
        lo = tuple(min(p[k] for p in pts) for k in range(3))
        hi = tuple(max(p[k] for p in pts) for k in range(3))
        return cls(lo, hi)

    def vertex(self, i: int) -> list:
        """Corner ``i`` in ``0..7``; bit 0 picks x, bit 1 y, bit 2 z from ``b``."""
        if i < 0 or i > 7:
            raise ValueError("bad box vertex index: {}".format(i))
        return point(
            self.b[0] if i & 1 else self.a[0],
            self.b[1] if i & 2 else self.a[1],
            self.b[2] if i & 4 else self.a[2],
        )

    def center(self) -> list:
        return point([(self.a[k] + self.b[k]) * 0.5 for k in range(3)])

    def diagonal(self) -> Vec3:
        return tuple(self.b[k] - self.a[k] for k in range(3))

    def is_null(self) -> bool:
        return self == Box.null()

    def isclose(self, other: "Box", tol: float = epsilon) -> bool:
        return all(abs(x - y) <= tol for x, y in zip(self.a + self.b, other.a + other.b))


@dataclass(frozen=True)
class Cylinder:
    """Capped cylinder: the segment ``a``-``b`` swept by ``radius``."""

    a: Vec3
    b: Vec3
    radius: float

    def __post_init__(self):
        object.__setattr__(self, "a", to_vec3(self.a))
        object.__setattr__(self, "b", to_vec3(self.b))
        object.__setattr__(self, "radius", _check_radius(self.radius))
        _check_direction([self.b[k] - self.a[k] for k in range(3)], "cylinder axis")

    def vertex(self, i: int) -> Vec3:
        if i == 0:
            return self.a
        if i == 1:
            return self.b
        raise ValueError("bad cylinder vertex index: {}".format(i))


@dataclass(frozen=True)
class Disc:
    center: Vec3
    normal: Vec3
    radius: float

    def __post_init__(self):
        object.__setattr__(self, "center", to_vec3(self.center))
        object.__setattr__(self, "normal", _check_direction(self.normal, "disc normal"))
        object.__setattr__(self, "radius", _check_radius(self.radius))


@dataclass(frozen=True)
class Sphere:
    center: Vec3
    radius: float

    def __post_init__(self):
        object.__setattr__(self, "center", to_vec3(self.center))
        object.__setattr__(self, "radius", _check_radius(self.radius))


@dataclass(frozen=True)
class Torus:
    """Torus whose tube of ``minor_radius`` follows the rim of ``disc``."""

    disc: Disc
    minor_radius: float

    def __post_init__(self):
        if not isinstance(self.disc, Disc):
            raise ValueError("bad disc passed to Torus: {}".format(self.disc))
        object.__setattr__(self, "minor_radius", _check_radius(self.minor_radius, "minor radius"))

    @classmethod
    def make(cls, center, normal, radius: float, minor_radius: float) -> "Torus":
        return cls(Disc(center, normal, radius), minor_radius)

    @property
    def center(self) -> Vec3:
        return self.disc.center

    @property
    def normal(self) -> Vec3:
        return self.disc.normal

    @property
    def radius(self) -> float:
        return self.disc.radius


__all__ = ["Vec3", "to_vec3", "Box", "Cylinder", "Disc", "Sphere", "Torus"]
