import math

import pytest

from floaterlab.eye import (
    EyeSimulation,
    SaccadeWidget,
    book_model_matrix,
    breathing_offset,
)
from floaterlab.events import Key, KeyAction, KeyboardEvent
from floaterlab.floaters import FloaterSheet, Motion
from floaterlab.measurements import read_measurements, write_measurements
from floaterlab.vecmath import Vec2, Vec3, Vec4


def press(key):
    return KeyboardEvent(KeyAction.PRESS, key)


def make_sheet(multiplier=2.0):
    motion = Motion(1.0, lambda _d: 0.0, lambda _p, impulse: impulse)
    return FloaterSheet(multiplier, [motion])


def make_sim(**kwargs):
    kwargs.setdefault("sheets", [])
    return EyeSimulation(**kwargs)


def test_book_matrix_places_origin():
    m = book_model_matrix()
    origin = (m @ Vec4(0, 0, 0, 1)).xyz()
    assert origin.isclose(Vec3(0.0, -0.5, 0.2))


def test_book_matrix_axes_are_scaled_and_orthogonal():
    m = book_model_matrix()
    axes = [(m @ Vec4(*v, 0)).xyz() for v in ((1, 0, 0), (0, 1, 0), (0, 0, 1))]
    for axis in axes:
        assert axis.length() == pytest.approx(0.25)
    assert axes[0].dot(axes[1]) == pytest.approx(0.0, abs=1e-12)
    assert axes[1].dot(axes[2]) == pytest.approx(0.0, abs=1e-12)


def test_book_matrix_inverse_round_trip():
    m = book_model_matrix()
    p = Vec4(0.3, -0.2, 0.0, 1.0)
    assert (m.inverse() @ (m @ p)).isclose(p)


def test_breathing_offset_is_vertical_and_small():
    assert breathing_offset(0.0).y == 0.0
    for t in (0.0, 0.7, 3.1, 10.0):
        offset = breathing_offset(t)
        assert offset.x == 0.0
        assert abs(offset.y) <= 0.18 * 0.035 + 1e-12
        assert abs(offset.z) <= 0.18 * 0.005 + 1e-12


def test_widget_contains_its_origin_but_not_screen_centre():
    widget = SaccadeWidget()
    ox, oy = widget._origin(0.566)
    assert widget.contains(ox, oy, 0.566)
    assert not widget.contains(0.5, 0.5, 0.566)


def test_widget_centre_gives_head_direction():
    widget = SaccadeWidget()
    head = Vec3(0, 0, 1)
    ox, oy = widget._origin(0.566)
    assert widget.direction(ox, oy, 0.566, head, 0.9).isclose(head)


def test_widget_direction_angle_scales_with_distance():
    widget = SaccadeWidget()
    head = Vec3(0, 0, 1)
    fov = math.pi / 3.25
    ox, oy = widget._origin(0.566)
    d = widget.direction(ox + widget.radius / 2, oy, 0.566, head, fov)
    assert d.length() == pytest.approx(1.0)
    assert d.dot(head) == pytest.approx(math.cos(fov / 2))
    assert d.y == pytest.approx(0.0, abs=1e-12)


def test_widget_direction_outside_raises():
    widget = SaccadeWidget()
    with pytest.raises(ValueError):
        widget.direction(0.5, 0.5, 0.566, Vec3(0, 0, 1), 0.9)


def test_clamp_to_fov_keeps_directions_inside():
    sim = make_sim()
    d = Vec3(0.1, 0.0, 1.0).normalized()
    assert sim.clamp_to_fov(d) == d


def test_clamp_to_fov_limits_wide_directions():
    sim = make_sim()
    clamped = sim.clamp_to_fov(Vec3(1.0, 0.0, 0.0))
    assert clamped.dot(sim.head_forward) == pytest.approx(math.cos(sim.fov_angle))
    assert clamped.x > 0
    assert clamped.y == pytest.approx(0.0, abs=1e-12)


@pytest.mark.parametrize("direction", [Vec3(0, 0, 1), Vec3(1, 0, 1), Vec3(-0.3, 0.4, 1.0), Vec3(0, -0.5, -1)])
def test_look_points_camera_along_direction(direction):
    sim = make_sim()
    rotation = sim.look(direction)
    assert rotation.rotate(Vec3(0, 0, -1)).isclose(direction.normalized(), 1e-9)
    assert sim.camera_rotation == rotation


def test_saccade_pushes_sheets_and_resets_timer():
    sheet = make_sheet()
    sim = make_sim(sheets=[sheet])
    sim.time_since_saccadic_motion = 5.0
    angle = 0.3
    sim.saccadic_motion(Vec3(0, 0, 1), Vec3(math.sin(angle), 0, math.cos(angle)))
    assert sim.time_since_saccadic_motion == 0.0
    assert sheet.motions[0].velocity.isclose(Vec2(-2.0 * angle, 0.0))


def test_tiny_saccade_keeps_timer_and_rest():
    sheet = make_sheet()
    sim = make_sim(sheets=[sheet])
    sim.time_since_saccadic_motion = 5.0
    sim.saccadic_motion(Vec3(0, 0, 1), Vec3(0, 0, 1))
    assert sim.time_since_saccadic_motion == 5.0
    assert sheet.motions[0].velocity == Vec2()


def test_brightness_keys_clamp():
    sim = make_sim()
    sim.keyboard_handler(press(Key.UP_ARROW))
    assert sim.brightness == 1.0
    sim.keyboard_handler(press(Key.DOWN_ARROW))
    assert sim.brightness == pytest.approx(0.9)
    for _ in range(20):
        sim.keyboard_handler(press(Key.DOWN_ARROW))
    assert sim.brightness == 0.0


def test_release_is_ignored():
    sim = make_sim()
    sim.keyboard_handler(KeyboardEvent(KeyAction.RELEASE, Key.DOWN_ARROW))
    assert sim.brightness == 1.0


def test_quit_key_exits():
    sim = make_sim()
    with pytest.raises(SystemExit) as info:
        sim.keyboard_handler(press(Key.Q))
    assert info.value.code == 0


def test_e_key_resets_floaters_and_targets_eyes():
    sheet = make_sheet()
    sheet.motions[0].velocity = Vec2(1.0, 1.0)
    sheet.motions[0].position = Vec2(0.2, 0.1)
    sim = make_sim(sheets=[sheet])
    sim.eyes_forward = Vec3(1, 0, 1).normalized()
    sim.keyboard_handler(press(Key.E))
    assert sim.head_forward_to == sim.eyes_forward
    assert sheet.velocity() == Vec2()
    assert sheet.offset() == Vec2()


def test_measuring_round_trip_through_file(tmp_path):
    path = tmp_path / "measurements.txt"
    sim = make_sim(measurements_path=path)
    assert sim.measure() is None
    sim.keyboard_handler(press(Key.R))
    assert sim.measuring
    centre = (sim.book_matrix @ Vec4(0, 0, 0, 1)).xyz()
    sim.eyes_forward = (centre - sim.camera_position).normalized()
    first = sim.measure()
    assert first.isclose(Vec2(0.0, 0.0), 1e-9)
    assert sim.measured_intersections[0].isclose(centre, 1e-9)
    sim.keyboard_handler(press(Key.R))
    assert not sim.measuring
    assert read_measurements(path) == [Vec2(0.0, 0.0)]


def test_measure_scales_page_height():
    sim = make_sim()
    sim.toggle_measuring("unused.txt")
    target = (sim.book_matrix @ Vec4(0.5, 0.2, 0, 1)).xyz()
    sim.eyes_forward = (target - sim.camera_position).normalized()
    result = sim.measure()
    assert result.isclose(Vec2(0.5, 0.2 / 0.461), 1e-9)


def test_step_applies_breathing_and_timer():
    sim = make_sim()
    sim.step(1.5, 0.1)
    assert sim.camera_position.isclose(breathing_offset(1.5))
    assert sim.time_since_saccadic_motion == pytest.approx(0.1)
    assert sim.eyes_forward.length() == pytest.approx(1.0)


def test_step_keeps_gaze_on_skybox_point():
    sim = make_sim()
    before = sim.eyes_forward
    sim.step(2.0, 0.05)
    # The gaze still hits the same skybox point on the z = 1 face.
    hit = sim.camera_position + ((1.0 - sim.camera_position.z) / sim.eyes_forward.z) * sim.eyes_forward
    assert hit.isclose(before, 1e-9)


def test_replay_looks_at_book_points_then_stops(tmp_path):
    path = tmp_path / "page_read.txt"
    write_measurements(path, [Vec2(0.5, 0.5), Vec2(-0.5, 0.5)])
    sim = make_sim(replay_path=path)
    sim.step(1.0, 0.01)
    sim.keyboard_handler(press(Key.P))
    assert sim.replaying == [Vec2(0.5, 0.5), Vec2(-0.5, 0.5)]
    assert sim.replay_start_time == 1.0
    sim.step(1.0, 0.01)
    target = (sim.book_matrix @ Vec4(0.5, 0.5, 0, 1)).xyz()
    to_target = (target - sim.camera_position).normalized()
    assert sim.eyes_forward.isclose(to_target, 1e-9)
    sim.step(5.0, 0.01)
    assert sim.replaying == []


def test_replay_key_toggles_off(tmp_path):
    path = tmp_path / "page_read.txt"
    write_measurements(path, [Vec2(0.1, 0.1)])
    sim = make_sim(replay_path=path)
    sim.keyboard_handler(press(Key.P))
    assert len(sim.replaying) == 1
    sim.keyboard_handler(press(Key.P))
    assert sim.replaying == []


def test_missing_replay_file_gives_empty_replay(tmp_path):
    sim = make_sim()
    sim.start_replay(tmp_path / "absent.txt", 3.0)
    assert sim.replaying == []
    assert sim.replay_start_time == 3.0