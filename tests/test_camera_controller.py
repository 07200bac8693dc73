import math

import pytest

from floaterlab.camera_controller import BASE_MOUSE_SENSITIVITY, CameraController, Transform
from floaterlab.events import Key, KeyAction, KeyboardEvent, MouseAction, MouseEvent
from floaterlab.vecmath import Vec3


def make_transform():
    return Transform(position=Vec3(0, 0, 2))


def test_defaults_follow_initialisation():
    c = CameraController()
    assert (c.strafe_speed, c.forward_speed, c.lift_speed) == (4, 4, 4)
    assert c.min_angle == pytest.approx(-math.pi / 2 + 0.15)
    assert c.max_angle == pytest.approx(math.pi / 2 - 0.15)
    assert c.view_with_mouse is True


def test_lock_angle_clamps_both_ways():
    c = CameraController(angle=10.0)
    c.lock_angle()
    assert c.angle == c.max_angle
    c.angle = -10.0
    c.lock_angle()
    assert c.angle == c.min_angle


def test_toggle_key_switches_mouse_view():
    c = CameraController()
    c.keyboard_handler(KeyboardEvent(KeyAction.PRESS, Key.E))
    assert c.view_with_mouse is False
    c.keyboard_handler(KeyboardEvent(KeyAction.RELEASE, Key.E))
    c.keyboard_handler(KeyboardEvent(KeyAction.PRESS, Key.W))
    assert c.view_with_mouse is False
    c.keyboard_handler(KeyboardEvent(KeyAction.PRESS, Key.E))
    assert c.view_with_mouse is True


def test_mouse_move_turns_view():
    c = CameraController()
    c.mouse_handler(MouseEvent(MouseAction.MOVE, dx=0.01, dy=0.02), dt=0.1)
    gain = BASE_MOUSE_SENSITIVITY * c.mouse_sensitivity
    assert c.azimuth == pytest.approx(-gain * 0.01)
    assert c.angle == pytest.approx(gain * 0.02)


def test_mouse_move_angle_is_clamped():
    c = CameraController()
    c.mouse_handler(MouseEvent(MouseAction.MOVE, dy=100.0), dt=0.1)
    assert c.angle == c.max_angle


def test_mouse_move_ignored_without_mouse_view():
    c = CameraController(view_with_mouse=False)
    c.mouse_handler(MouseEvent(MouseAction.MOVE, dx=1.0, dy=1.0), dt=0.1)
    assert (c.azimuth, c.angle) == (0.0, 0.0)


def test_scroll_scales_all_speeds_equally():
    c = CameraController()
    c.mouse_handler(MouseEvent(MouseAction.SCROLL, scroll_y=2.0), dt=0.5)
    assert c.strafe_speed == pytest.approx(4 * (1 + 0.5 * 2.0))
    assert c.strafe_speed == c.forward_speed == c.lift_speed


def test_forward_moves_along_negative_z():
    c = CameraController()
    t = c.update(make_transform(), {Key.W}, dt=0.1)
    assert t.position.isclose(Vec3(0, 0, 2 - 0.1 * 4))


def test_opposite_keys_cancel():
    c = CameraController()
    t = c.update(make_transform(), {Key.W, Key.S, Key.A, Key.D, Key.SPACE, Key.LEFT_SHIFT}, dt=0.1)
    assert t.position.isclose(Vec3(0, 0, 2))


def test_lift_moves_up():
    c = CameraController()
    t = c.update(make_transform(), {Key.SPACE}, dt=0.25)
    assert t.position.isclose(Vec3(0, 0.25 * 4, 2))


def test_strafe_is_perpendicular_to_forward():
    c = CameraController(azimuth=0.8)
    start = make_transform()
    t_side = c.update(Transform(position=start.position), {Key.D}, dt=0.1)
    t_fwd = c.update(Transform(position=start.position), {Key.W}, dt=0.1)
    side = t_side.position - start.position
    fwd = t_fwd.position - start.position
    assert side.dot(fwd) == pytest.approx(0.0, abs=1e-12)


def test_rotation_identity_at_rest():
    c = CameraController()
    t = c.update(make_transform(), set(), dt=0.1)
    v = Vec3(0.3, -1.2, 4.0)
    assert t.rotation.rotate(v).isclose(v)


def test_keyboard_view_only_without_mouse_view():
    c = CameraController()
    c.update(make_transform(), {Key.H, Key.K}, dt=0.1)
    assert (c.azimuth, c.angle) == (0.0, 0.0)
    c.view_with_mouse = False
    c.update(make_transform(), {Key.H, Key.K}, dt=0.1)
    assert c.azimuth == pytest.approx(2 * 0.1)
    assert c.angle == pytest.approx(1.5 * 0.1)


def test_rotation_is_unit_quaternion():
    c = CameraController(azimuth=1.1, angle=0.4)
    t = c.update(make_transform(), set(), dt=0.1)
    assert t.rotation.norm() == pytest.approx(1.0)