"""Geometry for the orientation gizmo: three arrows drawn in a screen corner."""

from __future__ import annotations

from floaterlab.vecmath import Mat4, Vec3, Vec4

ARROW_LENGTH = 1.0
ARROW_TIP_WIDTH = 0.1
ARROW_BASE = 0.75

# Vertices 0-5 form the tip as a triangle fan; vertices 6-7 form the shaft line.
TIP_VERTEX_COUNT = 6
LINE_FIRST_VERTEX = 6
LINE_VERTEX_COUNT = 2
AXIS_COUNT = 3

_ORTHO_SHRINK = 0.8

_AXIS_COLORS = (
    Vec4(1.0, 0.0, 0.0, 1.0),
    Vec4(0.0, 1.0, 0.0, 1.0),
    Vec4(0.0, 0.0, 1.0, 1.0),
)


def axis_arrow_vertices() -> tuple[Vec3, ...]:
    """The eight vertices of an arrow lying along the x axis."""
    base, tip = ARROW_BASE, ARROW_TIP_WIDTH
    return (
        Vec3(ARROW_LENGTH, 0.0, 0.0),
        Vec3(base, tip, tip),
        Vec3(base, tip, -tip),
        Vec3(base, -tip, -tip),
        Vec3(base, -tip, tip),
        Vec3(base, tip, tip),
        Vec3(0.0, 0.0, 0.0),
        Vec3(base, 0.0, 0.0),
    )


def _check_instance(instance: int) -> None:
    if instance < 0:
        raise ValueError("axis instance must not be negative")


def axis_instance_vertex(position: Vec3, instance: int) -> Vec3:
    """Swizzle an x-axis arrow vertex onto the axis drawn by ``instance``.

    Instance 0 keeps x, instance 1 points along y, any later one along z.
    """
    _check_instance(instance)
    if instance == 0:
        return position
    if instance == 1:
        return Vec3(position.y, position.x, position.z)
    return Vec3(position.y, position.z, position.x)


def axis_instance_color(instance: int) -> Vec4:
    """Colour of the arrow drawn by ``instance``: red, green, then blue."""
    _check_instance(instance)
    return _AXIS_COLORS[min(instance, AXIS_COUNT - 1)]


def axis_ortho_matrix(axis_size: float, width: float, height: float) -> Mat4:
    """Orthographic projection placing a gizmo of ``axis_size`` pixels in a screen corner."""
    if width <= 0 or height <= 0:
        raise ValueError("screen size must be positive")
    pixel_w = axis_size / width
    pixel_h = axis_size / height
    return Mat4((
        pixel_w * _ORTHO_SHRINK, 0.0, 0.0, -1.0 + pixel_w,
        0.0, -pixel_h * _ORTHO_SHRINK, 0.0, 1.0 - pixel_h,
        0.0, 0.0, -0.5, 0.5,
        0.0, 0.0, 0.0, 1.0,
    ))


def axis_model_view(transform: Mat4, axis_size: float, width: float, height: float) -> Mat4:
    """Matrix for drawing the gizmo: ``transform`` without translation, then the corner projection."""
    entries = list(transform.entries)
    for index in (3, 7, 11):
        entries[index] = 0.0
    rotation_only = Mat4(tuple(entries))
    return axis_ortho_matrix(axis_size, width, height) @ rotation_only