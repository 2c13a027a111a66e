"""
2x3 affine matrices in the row-major form ``[[a, c, e], [b, d, f]]``.

The same layout is used by the design tool for ``absoluteTransform`` so
matrices from the input can be passed here unchanged.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence, Tuple

Number = float | int
Matrix = Tuple[Tuple[float, float, float], Tuple[float, float, float]]

IDENTITY: Matrix = ((1.0, 0.0, 0.0), (0.0, 1.0, 0.0))

SINGULAR_EPSILON = 1e-8
ROTATION_EPSILON = 5e-5
REFLECTION_EPSILON = 1e-10


def as_matrix(value: Sequence[Sequence[Number]]) -> Matrix:
    """Return ``value`` as an immutable Matrix of floats."""
    (a, c, e), (b, d, f) = value[0][:3], value[1][:3]
    return ((float(a), float(c), float(e)), (float(b), float(d), float(f)))


def translation(x: Number, y: Number) -> Matrix:
    return ((1.0, 0.0, float(x)), (0.0, 1.0, float(y)))


def is_affine_2x3(value: object) -> bool:
    """True when ``value`` is a 2x3 nested sequence of finite numbers."""
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        return False
    for row in value:
        if not isinstance(row, (list, tuple)) or len(row) != 3:
            return False
        for cell in row:
            if isinstance(cell, bool) or not isinstance(cell, (int, float)):
                return False
            if not math.isfinite(cell):
                return False
    return True


def compose(m1: Matrix, m2: Matrix) -> Matrix:
    """Return ``m1 ∘ m2``: apply ``m2`` first, then ``m1``."""
    (a, c, e), (b, d, f) = m1
    (a2, c2, e2), (b2, d2, f2) = m2
    return (
        (a * a2 + c * b2, a * c2 + c * d2, a * e2 + c * f2 + e),
        (b * a2 + d * b2, b * c2 + d * d2, b * e2 + d * f2 + f),
    )


def determinant(m: Matrix) -> float:
    (a, c, _), (b, d, _) = m
    return a * d - b * c


def invert(m: Matrix) -> Optional[Matrix]:
    """Return the inverse of ``m`` or ``None`` when it is singular."""
    (a, c, e), (b, d, f) = m
    det = a * d - b * c
    if not math.isfinite(det) or abs(det) < SINGULAR_EPSILON:
        return None
    ia = d / det
    ib = -b / det
    ic = -c / det
    id_ = a / det
    ie = -(ia * e + ic * f)
    if_ = -(ib * e + id_ * f)
    return ((ia, ic, ie), (ib, id_, if_))


def apply(m: Matrix, x: Number, y: Number) -> Tuple[float, float]:
    """Map the point ``(x, y)`` through ``m``."""
    (a, c, e), (b, d, f) = m
    return a * x + c * y + e, b * x + d * y + f


def linear_part(m: Matrix) -> Tuple[float, float, float, float]:
    """Return ``(a, b, c, d)`` of ``m``."""
    (a, c, _), (b, d, _) = m
    return a, b, c, d


def translation_part(m: Matrix) -> Tuple[float, float]:
    return m[0][2], m[1][2]


def has_rotation(m: Matrix) -> bool:
    (a, _, _), (b, _, _) = m
    return abs(math.atan2(b, a)) > ROTATION_EPSILON


def has_reflection(m: Matrix) -> bool:
    return determinant(m) < -REFLECTION_EPSILON


def is_identity_linear(a: float, b: float, c: float, d: float, *, eps: float = 1e-6) -> bool:
    return abs(a - 1) < eps and abs(b) < eps and abs(c) < eps and abs(d - 1) < eps


def has_scale(a: float, b: float, c: float, d: float, *, eps: float = 1e-6) -> bool:
    """True when the linear part changes the length of either basis vector."""
    sx = math.hypot(a, b)
    sy = math.hypot(c, d)
    return abs(sx - 1) > eps or abs(sy - 1) > eps


def fmt_matrix_number(value: float) -> str:
    """Compact number for CSS ``matrix()`` arguments."""
    if abs(value) < 1e-10:
        return "0"
    rounded = round(value, 6)
    if rounded == int(rounded):
        return str(int(rounded))
    return f"{rounded:.6f}".rstrip("0").rstrip(".")


def to_css_matrix(a: float, b: float, c: float, d: float, e: float = 0, f: float = 0) -> str:
    """Serialize a linear part (and optional translation) as CSS ``matrix()``."""
    values = ",".join(fmt_matrix_number(v) for v in (a, b, c, d, e, f))
    return f"matrix({values})"


__all__ = [
    "IDENTITY",
    "Matrix",
    "apply",
    "as_matrix",
    "compose",
    "determinant",
    "fmt_matrix_number",
    "has_reflection",
    "has_rotation",
    "has_scale",
    "invert",
    "is_affine_2x3",
    "is_identity_linear",
    "linear_part",
    "to_css_matrix",
    "translation",
    "translation_part",
]
