"""Geometry used by the tessellation and lighting stages of the renderer.

Includes Phong tessellation (Boubekeur and Alexa, SIGGRAPH Asia 2008),
barycentric and bilinear patch interpolation, the shadow-map NDC-to-UV
mapping, and a few simple colouring rules.
"""

from __future__ import annotations

import math
from functools import reduce
from operator import add
from typing import Sequence, TypeVar, Union

from floaterlab.vecmath import Mat4, Vec3, Vec4

T = TypeVar("T")
Number = Union[int, float]

# Outer and inner levels of the fixed quad tessellation test patch.
QUAD_OUTER_LEVELS = (2.0, 4.0, 6.0, 8.0)
QUAD_INNER_LEVELS = (8.0, 8.0)
# Uniform level used by the triangle Phong tessellation control stage.
TRIANGLE_LEVEL = 8.0

# Maps normalised device coordinates in [-1, 1] to texture coordinates and depth in [0, 1].
_NDC_TO_UVD = Mat4.translation(0.5, 0.5, 0.5) @ Mat4.scale(0.5)


def _weights(bary: Sequence[Number]) -> tuple[float, float, float, float]:
    if len(bary) != 3:
        raise ValueError("barycentric coordinates need exactly three weights")
    t1, t2, t3 = (float(t) for t in bary)
    total = t1 + t2 + t3
    if total == 0.0:
        raise ValueError("barycentric weights sum to zero")
    return t1, t2, t3, total


def _three(values: Sequence[T], what: str) -> Sequence[T]:
    if len(values) != 3:
        raise ValueError(f"a triangle patch needs exactly three {what}")
    return values


def barycentric_mix(bary: Sequence[Number], values: Sequence[T]) -> T:
    """Weighted average of three corner values; weights need not sum to one."""
    t1, t2, t3, total = _weights(bary)
    corners = _three(values, "values")
    weighted = reduce(add, (t * v for t, v in zip((t1, t2, t3), corners)))
    return weighted / total


def phong_tessellate(
    bary: Sequence[Number], positions: Sequence[Vec3], normals: Sequence[Vec3]
) -> Vec3:
    """Point on the Phong-tessellated patch at barycentric coordinates ``bary``.

    The flat interpolant is projected onto each corner's tangent plane and the
    projections are interpolated again. Normals need not be unit length.
    """
    a, b, c = _three(positions, "positions")
    units = [n.normalized() for n in _three(normals, "normals")]
    p = barycentric_mix(bary, (a, b, c))
    projected = [p - n * (p - corner).dot(n) for corner, n in zip((a, b, c), units)]
    return barycentric_mix(bary, projected)


def _mix(x: T, y: T, t: float) -> T:
    return x * (1.0 - t) + y * t


def bilinear_quad(u: float, v: float, corners: Sequence[T]) -> T:
    """Bilinear interpolation over a quad patch.

    ``u`` runs from corner 0 to 1 (and 2 to 3); ``v`` runs from the first edge
    to the second.
    """
    if len(corners) != 4:
        raise ValueError("a quad patch needs exactly four corners")
    v0, v1, v2, v3 = corners
    return _mix(_mix(v0, v1, u), _mix(v2, v3, u), v)


def animated_tessellation_level(time: float) -> float:
    """Tessellation level oscillating between 1 and 21 over time."""
    return 10.0 * math.sin(time) + 11.0


def ndc_to_uvd(point: Vec4 | Vec3) -> Vec4:
    """Map a clip-space point to texture coordinates plus depth.

    A ``Vec3`` is taken as a point with w = 1.
    """
    if isinstance(point, Vec3):
        point = Vec4(point.x, point.y, point.z, 1.0)
    return _NDC_TO_UVD @ point


def depth_color(z: float) -> Vec4:
    """Grey shade fading with eye-space depth: brighter towards positive z."""
    shade = 0.5 * math.exp(z)
    return Vec4(shade, shade, shade, 1.0)


def light_intensity(position: Vec3, light_position: Vec3, model_position: Vec3) -> float:
    """Half-Lambert intensity in [0, 1] for a surface point of a round model.

    The normal is taken as pointing outward from ``model_position``.
    Raises ValueError if the point coincides with the light or the model centre.
    """
    light_dir = (light_position - position).normalized()
    normal = (position - model_position).normalized()
    return 0.5 + light_dir.dot(normal) / 2.0