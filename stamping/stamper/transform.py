# stamping/stamper/transform.py
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Tuple

Rect = Tuple[float, float, float, float]  # (x0, y0, x1, y1)


@dataclass(frozen=True)
class Affine:
    """
    2-D affine matrix in PDF order (a, b, c, d, e, f):

        [a c e]
        [b d f]
        [0 0 1]

    x' = a*x + c*y + e
    y' = b*x + d*y + f
    """
    a: float = 1.0
    b: float = 0.0
    c: float = 0.0
    d: float = 1.0
    e: float = 0.0
    f: float = 0.0

    @classmethod
    def identity(cls) -> "Affine":
        return cls()

    @classmethod
    def translation(cls, tx: float, ty: float) -> "Affine":
        return cls(e=tx, f=ty)

    @classmethod
    def scaling(cls, sx: float, sy: float | None = None) -> "Affine":
        return cls(a=sx, d=sx if sy is None else sy)

    @classmethod
    def rotation(cls, degrees: float, cx: float = 0.0, cy: float = 0.0) -> "Affine":
        """Counter-clockwise rotation about (cx, cy)."""
        rad = math.radians(degrees)
        cos, sin = math.cos(rad), math.sin(rad)
        return cls(
            a=cos,
            b=sin,
            c=-sin,
            d=cos,
            e=cx - (cx * cos - cy * sin),
            f=cy - (cx * sin + cy * cos),
        )

    def then(self, other: "Affine") -> "Affine":
        """Apply self first, then other."""
        return Affine(
            a=other.a * self.a + other.c * self.b,
            b=other.b * self.a + other.d * self.b,
            c=other.a * self.c + other.c * self.d,
            d=other.b * self.c + other.d * self.d,
            e=other.a * self.e + other.c * self.f + other.e,
            f=other.b * self.e + other.d * self.f + other.f,
        )

    def apply(self, x: float, y: float) -> Tuple[float, float]:
        return (self.a * x + self.c * y + self.e, self.b * x + self.d * y + self.f)

    def map_rect(self, rect: Rect) -> Rect:
        """Axis-aligned bounding box of the rect's four transformed corners."""
        x0, y0, x1, y1 = rect
        return bounding_box(self.apply(px, py) for px, py in ((x0, y0), (x1, y0), (x0, y1), (x1, y1)))

    @property
    def ctm(self) -> Tuple[float, float, float, float, float, float]:
        return (self.a, self.b, self.c, self.d, self.e, self.f)


def bounding_box(points: Iterable[Tuple[float, float]]) -> Rect:
    pts = list(points)
    xs = [p[0] for p in pts]
    ys = [p[1] for p in pts]
    return (min(xs), min(ys), max(xs), max(ys))


def stamp_transform(
    x: float,
    y: float,
    scale: float,
    rotation: float,
    width: float,
    height: float,
) -> Affine:
    """
    Content-local space -> page space for a width x height content box:
    rotate about the box centre, then scale, then translate to (x, y).
    """
    m = Affine.identity()
    if rotation % 360:
        m = m.then(Affine.rotation(rotation, width / 2, height / 2))
    if scale != 1.0:
        m = m.then(Affine.scaling(scale))
    return m.then(Affine.translation(x, y))
