"""An eye looking around a skybox while floaters drift across its view."""

from __future__ import annotations

import math
import os
import random
from dataclasses import dataclass, field
from typing import Union

from floaterlab.events import Key, KeyAction, KeyboardEvent
from floaterlab.floaters import FloaterSheet, build_sheets
from floaterlab.measurements import read_measurements, write_measurements
from floaterlab.vecmath import Mat4, Quaternion, Vec2, Vec3, Vec4

PathLike = Union[str, "os.PathLike[str]"]

WORLD_UP = Vec3(0.0, 1.0, 0.0)
CAMERA_FORWARD = Vec3(0.0, 0.0, -1.0)
DEFAULT_FOV_ANGLE = math.pi / 3.25
DEFAULT_ASPECT_RATIO = 0.566
SACCADE_THRESHOLD = 0.02
HEAD_SNAP_RATE = 10.0
REPLAY_RATE = 6.0
BOOK_PAGE_ASPECT = 0.461
BRIGHTNESS_STEP = 0.1


def _clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


def book_model_matrix() -> Mat4:
    """Placement of the book page: tilted, scaled down and set below the eye."""
    tilt = Quaternion.from_axis_angle(Vec3(1.0, 0.0, 0.0)).matrix()
    return Mat4.translation(0.0, -0.5, 0.2) @ tilt @ Mat4.scale(0.25)


def breathing_offset(time: float) -> Vec3:
    """Small head displacement caused by breathing at ``time`` seconds."""
    return 0.18 * Vec3(
        0.0,
        0.025 * math.sin(time) + 0.01 * math.sin(2.2 * time),
        0.005 * math.cos(0.666 * time),
    )


def _side_axis(forward: Vec3) -> Vec3:
    return forward.cross(WORLD_UP).normalized()


def _look_rotation(target: Vec3) -> Quaternion:
    """Rotation turning the camera's forward axis onto ``target`` with no roll."""
    t = target.normalized()
    azimuth = math.atan2(-t.x, -t.z)
    pitch = math.asin(_clamp(t.y, -1.0, 1.0))
    side = Vec3(math.cos(azimuth), 0.0, -math.sin(azimuth))
    return Quaternion.from_axis_angle(side, pitch) * Quaternion.from_axis_angle(WORLD_UP, azimuth)


def _cube_exit(origin: Vec3, direction: Vec3) -> float:
    """Ray parameter where a ray from inside the [-1, 1] cube leaves it."""
    ts = [((-1.0 if d < 0 else 1.0) - o) / d for o, d in zip(origin, direction) if d != 0.0]
    if not ts:
        raise ValueError("ray direction is zero")
    return min(ts)


@dataclass
class SaccadeWidget:
    """A small on-screen disc for choosing eye directions within the field of view."""

    radius: float = 0.05
    margin: float = 0.025

    def _origin(self, aspect_ratio: float) -> tuple[float, float]:
        return 1.0 - self.radius - self.margin, (self.radius + self.margin) / aspect_ratio

    def _distance(self, x: float, y: float, aspect_ratio: float) -> float:
        ox, oy = self._origin(aspect_ratio)
        return math.sqrt((x - ox) ** 2 + (y - oy) ** 2 * aspect_ratio ** 2)

    def contains(self, x: float, y: float, aspect_ratio: float) -> bool:
        """Whether the screen point lies inside the widget disc."""
        return self._distance(x, y, aspect_ratio) < self.radius

    def direction(
        self, x: float, y: float, aspect_ratio: float, head_forward: Vec3, fov_angle: float
    ) -> Vec3:
        """Eye direction for a click at (x, y); the rim maps to the edge of the field of view."""
        dist = self._distance(x, y, aspect_ratio)
        if dist >= self.radius:
            raise ValueError("point lies outside the saccade widget")
        if dist == 0.0:
            return head_forward
        ox, oy = self._origin(aspect_ratio)
        angle = fov_angle * dist / self.radius
        axis_x = _side_axis(head_forward)
        axis_y = axis_x.cross(head_forward)
        theta = math.acos(_clamp((x - ox) / dist, -1.0, 1.0))
        if y < oy:
            theta = -theta
        return math.cos(angle) * head_forward + math.sin(angle) * (
            math.cos(theta) * axis_x + math.sin(theta) * axis_y
        )


@dataclass
class EyeSimulation:
    """Head, eyes and floaters of a viewer reading a book inside a skybox."""

    sheets: list[FloaterSheet] = field(default_factory=lambda: build_sheets(random.Random()))
    head_forward: Vec3 = field(default_factory=lambda: Vec3(0.0, 0.0, 1.0))
    head_forward_to: Vec3 = field(default_factory=Vec3)
    eyes_forward: Vec3 = field(default_factory=lambda: Vec3(0.0, 0.0, 1.0))
    fov_angle: float = DEFAULT_FOV_ANGLE
    aspect_ratio: float = DEFAULT_ASPECT_RATIO
    brightness: float = 1.0
    time_since_saccadic_motion: float = 0.0
    camera_position: Vec3 = field(default_factory=Vec3)
    camera_rotation: Quaternion = field(default_factory=Quaternion)
    book_matrix: Mat4 = field(default_factory=book_model_matrix)
    widget: SaccadeWidget = field(default_factory=SaccadeWidget)
    measuring: bool = False
    measured_positions: list[Vec2] = field(default_factory=list)
    measured_intersections: list[Vec3] = field(default_factory=list)
    replaying: list[Vec2] = field(default_factory=list)
    replay_start_time: float = 0.0
    time: float = 0.0
    replay_path: PathLike = "page_read.txt"
    measurements_path: PathLike = "measurements.txt"

    def __post_init__(self) -> None:
        self.look(self.eyes_forward)

    def _head_up(self) -> Vec3:
        return self.head_forward.cross(WORLD_UP).cross(self.head_forward).normalized()

    def saccadic_motion(self, source: Vec3, target: Vec3) -> None:
        """Kick every floater sheet after the eyes turn from ``source`` to ``target``."""
        angle = math.acos(_clamp(source.dot(target), 0.0, 1.0))
        if angle > SACCADE_THRESHOLD:
            self.time_since_saccadic_motion = 0.0
        axis_x = _side_axis(source)
        axis_y = axis_x.cross(source)
        planar = Vec2(target.dot(axis_x), target.dot(axis_y))
        direction = planar.normalized() if planar.length() > 0.0 else Vec2()
        for sheet in self.sheets:
            sheet.apply_impulse(angle, direction)

    def clamp_to_fov(self, direction: Vec3) -> Vec3:
        """Pull ``direction`` back onto the edge of the field of view if it lies outside."""
        angle = math.acos(_clamp(self.head_forward.dot(direction), -1.0, 1.0))
        if angle <= self.fov_angle:
            return direction
        line = direction.cross(self.head_forward).normalized()
        right = self.head_forward.cross(line)
        return math.cos(self.fov_angle) * self.head_forward + math.sin(self.fov_angle) * right

    def look(self, direction: Vec3) -> Quaternion:
        """Orient the camera along ``direction``, keeping the head's roll."""
        up = self._head_up()
        tilt = math.acos(_clamp(up.dot(WORLD_UP), -1.0, 1.0))
        tilt_axis = self.head_forward.cross(up).normalized()
        q = Quaternion.from_axis_angle(tilt * tilt_axis)
        self.camera_rotation = q.inverse() * _look_rotation(q.rotate(direction))
        return self.camera_rotation

    def _turn_eyes(self, direction: Vec3) -> None:
        self.look(direction)
        self.saccadic_motion(self.eyes_forward, direction)
        self.eyes_forward = direction

    def keyboard_handler(self, event: KeyboardEvent) -> None:
        """React to brightness, quit, head-snap, replay and measuring keys."""
        if event.action is not KeyAction.PRESS:
            return
        key = event.key
        if key is Key.UP_ARROW:
            self.brightness = min(self.brightness + BRIGHTNESS_STEP, 1.0)
        elif key is Key.DOWN_ARROW:
            self.brightness = max(self.brightness - BRIGHTNESS_STEP, 0.0)
        elif key is Key.Q:
            raise SystemExit(0)
        elif key is Key.E:
            self.head_forward_to = self.eyes_forward
            for sheet in self.sheets:
                sheet.reset()
        elif key in (Key.P, Key.O):
            if self.replaying:
                self.replaying.clear()
            else:
                path = self.replay_path if key is Key.P else self.measurements_path
                self.start_replay(path, self.time)
        elif key is Key.R:
            self.toggle_measuring(self.measurements_path)

    def start_replay(self, path: PathLike, time: float) -> None:
        """Load recorded page positions to be looked at in turn from ``time`` on."""
        try:
            self.replaying = read_measurements(path)
        except FileNotFoundError:
            self.replaying = []
        self.replay_start_time = time

    def toggle_measuring(self, path: PathLike) -> bool:
        """Start a measurement run, or end one and save it to ``path``; return the new state."""
        if self.measuring:
            write_measurements(path, self.measured_positions)
            self.measuring = False
        else:
            self.measured_positions.clear()
            self.measured_intersections.clear()
            self.measuring = True
        return self.measuring

    def measure(self) -> Vec2 | None:
        """Record where the gaze meets the book page, in page coordinates."""
        if not self.measuring:
            return None
        m = self.book_matrix
        normal = (m @ Vec4(0.0, 0.0, 1.0, 0.0)).xyz()
        origin = (m @ Vec4(0.0, 0.0, 0.0, 1.0)).xyz()
        facing = self.eyes_forward.dot(normal)
        if facing == 0.0:
            raise ValueError("gaze is parallel to the book page")
        t = -(self.camera_position - origin).dot(normal) / facing
        hit = self.camera_position + t * self.eyes_forward
        local = (m.inverse() @ Vec4(hit.x, hit.y, hit.z, 1.0)).xyz()
        measurement = Vec2(local.x, local.y * (1.0 / BOOK_PAGE_ASPECT))
        self.measured_positions.append(measurement)
        self.measured_intersections.append(hit)
        return measurement

    def step(self, time: float, dt: float) -> None:
        """Advance the head, floaters, breathing and any replay to ``time``."""
        self.time = time
        self.head_forward = (self.head_forward + HEAD_SNAP_RATE * dt * self.head_forward_to).normalized()

        for sheet in self.sheets:
            sheet.step(dt)

        before = self.camera_position
        after = breathing_offset(time)
        t = _cube_exit(before, self.eyes_forward)
        new_eyes = (before + t * self.eyes_forward - after).normalized()
        self._turn_eyes(new_eyes)
        self.camera_position = after

        if self.replaying:
            index = int((time - self.replay_start_time) * REPLAY_RATE)
            if index >= len(self.replaying):
                self.replaying.clear()
            else:
                pos = self.replaying[index]
                target = (self.book_matrix @ Vec4(pos.x, pos.y, 0.0, 1.0)).xyz()
                self._turn_eyes((target - self.camera_position).normalized())

        self.time_since_saccadic_motion += dt