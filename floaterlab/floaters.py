"""Simulated eye floaters: sheets of debris that drift after each saccade."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Callable

from floaterlab.vecmath import Mat2, Vec2

Curve = Callable[[float], float]
ImpulseModifier = Callable[[Vec2, Vec2], Vec2]

# Extra damping applied to outward motion when a motion hits its radius.
_WALL_DAMPING = 1.0


@dataclass
class Motion:
    """A damped point confined to a disc, moved by saccade impulses.

    ``curve`` gives the damping rate from the distance to the centre relative
    to the radius; ``impulse_modifier`` maps (position, impulse direction) to a
    velocity change.
    """

    radius: float
    curve: Curve
    impulse_modifier: ImpulseModifier
    position: Vec2 = field(default_factory=Vec2)
    velocity: Vec2 = field(default_factory=Vec2)

    def step(self, dt: float) -> None:
        """Advance the motion by ``dt`` seconds."""
        if self.position.length() > self.radius:
            direction = self.position.normalized()
            self.position = self.radius * direction
            outward = direction.dot(self.velocity)
            if outward > 0:
                self.velocity = self.velocity - outward * direction
                self.velocity = self.velocity * (1 - dt * _WALL_DAMPING)
        damping = self.curve(self.position.length() / self.radius)
        self.velocity = self.velocity * (1 - dt * damping)
        self.position = self.position + dt * self.velocity


@dataclass
class Segment:
    """A strand of floater material drawn as a thick, translucent spline."""

    radius: float
    opacity: float
    points: list[Vec2] = field(default_factory=list)


@dataclass
class FloaterSheet:
    """Segments that move together, displaced by the sum of their motions."""

    impulse_multiplier: float = 1.0
    motions: list[Motion] = field(default_factory=list)
    segments: list[Segment] = field(default_factory=list)

    def offset(self) -> Vec2:
        """Current displacement of the sheet: the sum of motion positions."""
        total = Vec2()
        for motion in self.motions:
            total = total + motion.position
        return total

    def velocity(self) -> Vec2:
        """Current velocity of the sheet: the sum of motion velocities."""
        total = Vec2()
        for motion in self.motions:
            total = total + motion.velocity
        return total

    def reset(self) -> None:
        """Bring every motion to rest at its centre."""
        for motion in self.motions:
            motion.position = Vec2()
            motion.velocity = Vec2()

    def step(self, dt: float) -> Vec2:
        """Advance all motions and return the new offset."""
        for motion in self.motions:
            motion.step(dt)
        return self.offset()

    def apply_impulse(self, angle: float, direction: Vec2) -> None:
        """Push every motion after an eye movement of ``angle`` radians."""
        for motion in self.motions:
            change = motion.impulse_modifier(motion.position, direction)
            motion.velocity = motion.velocity + angle * self.impulse_multiplier * change

    def segment_alpha(self, time_since_saccade: float, brightness: float) -> float:
        """Visibility factor for this sheet's segments, in [0, 1]."""
        alpha = 100 * self.velocity().length() + 0.2
        alpha = min(max(alpha, 0.0), 1.0)
        alpha = max(alpha, 1 - 0.2 * time_since_saccade)
        return alpha * min(brightness + 0.6, 1.0) ** 8

    def screen_points(self, segment: Segment, aspect_ratio: float) -> list[Vec2]:
        """Segment points in normalised screen coordinates around the centre."""
        off = self.offset()
        return [
            Vec2(0.5 + p.x + off.x, 0.5 + (p.y + off.y) / aspect_ratio)
            for p in segment.points
        ]


def uniform_knots(count: int) -> list[float]:
    """``count`` knots spread evenly over [0, 1]; all zero when fewer than two."""
    if count <= 1:
        return [0.0] * max(count, 0)
    return [i / (count - 1) for i in range(count)]


def _constant(value: float) -> Curve:
    return lambda _distance: value


def _walk(
    rng: random.Random,
    points: list[Vec2],
    steps: int,
    scale: float,
    x_offset: float = 1.0,
    y_offset: float = 1.0,
    shift: Vec2 = Vec2(),
) -> None:
    """Extend ``points`` by a random walk."""
    for _ in range(steps):
        step = Vec2(2 * rng.random() - x_offset, 2 * rng.random() - y_offset) + shift
        points.append(points[-1] + step * scale)


def _stretched(y_factor: float, gain: float) -> ImpulseModifier:
    return lambda _pos, impulse: gain * Vec2(impulse.x, impulse.y * y_factor)


def _skewed(_pos: Vec2, impulse: Vec2) -> Vec2:
    return Vec2(0.2 * impulse.x, 0.25 * impulse.y + 0.1 * impulse.x)


def _swirled(_pos: Vec2, impulse: Vec2) -> Vec2:
    return 3 * Vec2(0.2 * impulse.y * impulse.x, 0.25 * impulse.y + 0.1 * impulse.x)


def _weak(_pos: Vec2, impulse: Vec2) -> Vec2:
    return 0.2 * impulse


def _eye_motions(lead_radius: float, lead_curve: float, y_factor: float, gain: float) -> list[Motion]:
    """The four layered motions of the large foreground sheets."""
    return [
        Motion(lead_radius, _constant(lead_curve), _stretched(y_factor, gain)),
        Motion(0.0033, _constant(0.02), _skewed),
        Motion(0.005, _constant(1.0), _swirled),
        Motion(0.01, _constant(0.0001), _weak),
    ]


def _matrix_modifier(matrix: Mat2, multiplier: float) -> ImpulseModifier:
    def modify(_pos: Vec2, impulse: Vec2) -> Vec2:
        size = impulse.length()
        if size == 0.0:
            return Vec2()
        turned = matrix.apply(impulse)
        if turned.length() == 0.0:
            return Vec2()
        return multiplier * turned.normalized() * size

    return modify


def _random_matrix(rng: random.Random) -> Mat2:
    return Mat2(
        1 + 0.1 * (2 * rng.random() - 1),
        0.1 * (2 * rng.random() - 1),
        0.1 * (2 * rng.random() - 1),
        1 + 0.1 * (2 * rng.random() - 1),
    )


def _drift_motion(rng: random.Random, radius: float, gain_scale: float, matrix: Mat2 | None) -> Motion:
    curve_value = 0.5 * (1 + 2 * rng.random())
    multiplier = gain_scale * (5 + 2.5 * rng.random())
    if matrix is None:
        matrix = _random_matrix(rng)
    return Motion(radius, _constant(curve_value), _matrix_modifier(matrix, multiplier))


def _scatter_segments(
    rng: random.Random, radius_scale: float, opacity_scale: float, allow_dense: bool
) -> list[Segment]:
    segments = []
    for _ in range(20):
        radius = radius_scale * (0.005 + rng.random() * 0.002)
        opacity = opacity_scale * (0.2 + rng.random() * 0.2)
        if allow_dense and rng.random() > 0.9:
            opacity = 0.15 + rng.random() * 0.025
            radius *= 0.3
        shift = 0.2 * Vec2(2 * rng.random() - 1, 2 * rng.random() - 1)
        wander = 0.0015 + rng.random() * 0.01
        points = [2 * Vec2(2 * rng.random() - 1, 2 * rng.random() - 1)]
        _walk(rng, points, int(rng.random() * 100), 0.001)
        _walk(rng, points, 30, wander, shift=shift)
        segments.append(Segment(radius, opacity, points))
    return segments


def build_sheets(rng: random.Random) -> list[FloaterSheet]:
    """Generate the full set of floater sheets using ``rng`` for randomness."""
    sheets: list[FloaterSheet] = []

    # Prominent foreground floater.
    front = FloaterSheet(0.1, _eye_motions(0.16, 4.0, 0.2, 5.0))
    points = [Vec2(0.026, 0.0)]
    _walk(rng, points, 100, 0.001)
    _walk(rng, points, 30, 0.0015, x_offset=0.3, y_offset=0.77)
    front.segments.append(Segment(0.01, 0.5, points))
    points = [Vec2(0.026, 0.0)]
    _walk(rng, points, 30, 0.0015, x_offset=0.3, y_offset=1.33)
    front.segments.append(Segment(0.04, 0.2, points))
    for _ in range(10):
        radius = 0.01 + rng.random() * 0.02
        opacity = 0.4 * (0.2 + rng.random() * 0.1)
        points = [Vec2(0.026, 0.0)]
        shift = Vec2(rng.random(), 2 * rng.random() - 1)
        wander = 0.0015 + rng.random() * 0.01
        _walk(rng, points, 30, wander, shift=shift)
        front.segments.append(Segment(radius, opacity, points))
    sheets.append(front)

    # Faint background debris.
    for _ in range(160):
        sheet = FloaterSheet(1.0, [_drift_motion(rng, 1.0, 0.25, None)])
        sheet.segments = _scatter_segments(rng, 15.0, 0.4 * 0.08, allow_dense=True)
        sheets.append(sheet)

    # Wide haze sheets.
    for _ in range(3):
        sheet = FloaterSheet(1.0, [_drift_motion(rng, 1.0, 0.25, None)])
        num = 50
        haze = [Vec2(-10 + 20 * i / num, 0.01 * (2 * rng.random() - 1)) for i in range(num)]
        sheet.segments.append(Segment(1.0, 0.066, haze))
        sheets.append(sheet)

    # Small, quickly moving clusters.
    for _ in range(10):
        radius = 0.1 + rng.random() * 0.05
        sheet = FloaterSheet(1.0, [_drift_motion(rng, radius, 1.0, Mat2.identity())])
        sheet.segments = _scatter_segments(rng, 1.0, 0.4 * 0.5, allow_dense=False)
        sheets.append(sheet)

    # A second large, faint foreground floater.
    back = FloaterSheet(0.1, _eye_motions(0.25, 16.0, 0.5, 15.0))
    points = [Vec2(-0.06, 0.015)]
    _walk(rng, points, 100, 0.0015)
    _walk(rng, points, 30, 0.0015, x_offset=1.5, y_offset=1.1)
    back.segments.append(Segment(0.015, 0.07, points))
    sheets.append(back)

    return sheets