"""First-person camera controls driven by keyboard and mouse."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import AbstractSet

from floaterlab.events import Key, KeyAction, KeyboardEvent, MouseAction, MouseEvent
from floaterlab.vecmath import Quaternion, Vec3

BASE_MOUSE_SENSITIVITY = 1.22

MOVE_FORWARD = Key.W
MOVE_BACK = Key.S
MOVE_LEFT = Key.A
MOVE_RIGHT = Key.D
VIEW_UP = Key.K
VIEW_DOWN = Key.J
VIEW_LEFT = Key.H
VIEW_RIGHT = Key.L
LIFT_UP = Key.SPACE
LIFT_DOWN = Key.LEFT_SHIFT
TOGGLE_MOUSE_VIEW = Key.E


@dataclass
class Transform:
    """Position and orientation of an entity."""

    position: Vec3 = field(default_factory=Vec3)
    rotation: Quaternion = field(default_factory=Quaternion)


@dataclass
class CameraController:
    """Mouse-look and WASD movement for a camera transform."""

    strafe_speed: float = 4.0
    forward_speed: float = 4.0
    lift_speed: float = 4.0
    key_view_speed_horizontal: float = 2.0
    key_view_speed_vertical: float = 1.5
    azimuth: float = 0.0
    angle: float = 0.0
    min_angle: float = -math.pi / 2.0 + 0.15
    max_angle: float = math.pi / 2.0 - 0.15
    view_with_mouse: bool = True
    mouse_sensitivity: float = 2.0

    def lock_angle(self) -> None:
        """Clamp the vertical view angle to its limits."""
        self.angle = min(max(self.angle, self.min_angle), self.max_angle)

    def keyboard_handler(self, event: KeyboardEvent) -> None:
        """Toggle mouse-look on a press of the toggle key."""
        if event.action is KeyAction.PRESS and event.key is TOGGLE_MOUSE_VIEW:
            self.view_with_mouse = not self.view_with_mouse

    def mouse_handler(self, event: MouseEvent, dt: float) -> None:
        """Turn the view on movement and rescale speeds on scroll."""
        if self.view_with_mouse and event.action is MouseAction.MOVE:
            gain = BASE_MOUSE_SENSITIVITY * self.mouse_sensitivity
            self.azimuth -= gain * event.dx
            self.angle += gain * event.dy
            self.lock_angle()
        if event.action is MouseAction.SCROLL:
            factor = 1.0 + dt * event.scroll_y
            self.strafe_speed *= factor
            self.forward_speed *= factor
            self.lift_speed *= factor

    def update(self, transform: Transform, keys_down: AbstractSet[Key], dt: float) -> Transform:
        """Move and orient ``transform`` for one frame given the keys held down."""
        forward_movement = 0.0
        side_movement = 0.0
        lift = 0.0
        if MOVE_FORWARD in keys_down:
            forward_movement += self.forward_speed
        if MOVE_BACK in keys_down:
            forward_movement -= self.forward_speed
        if MOVE_LEFT in keys_down:
            side_movement -= self.strafe_speed
        if MOVE_RIGHT in keys_down:
            side_movement += self.strafe_speed

        if not self.view_with_mouse:
            if VIEW_LEFT in keys_down:
                self.azimuth += self.key_view_speed_horizontal * dt
            if VIEW_RIGHT in keys_down:
                self.azimuth -= self.key_view_speed_horizontal * dt
            if VIEW_DOWN in keys_down:
                self.angle -= self.key_view_speed_vertical * dt
            if VIEW_UP in keys_down:
                self.angle += self.key_view_speed_vertical * dt

        if LIFT_UP in keys_down:
            lift += self.lift_speed
        if LIFT_DOWN in keys_down:
            lift -= self.lift_speed

        self.lock_angle()
        cos_a = math.cos(self.azimuth)
        sin_a = math.sin(self.azimuth)
        forward = Vec3(-sin_a, 0.0, -cos_a)
        side = Vec3(cos_a, 0.0, -sin_a)

        position = transform.position + dt * (side_movement * side + forward_movement * forward)
        transform.position = position + Vec3(0.0, dt * lift, 0.0)

        yaw = Quaternion.from_axis_angle(Vec3(0.0, 1.0, 0.0), self.azimuth)
        pitch = Quaternion.from_axis_angle(side, self.angle)
        transform.rotation = pitch * yaw
        return transform