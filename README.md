# floaterlab

floaterlab is a small Python library for simulating eye floaters. Eye floaters
are the drifting specks and strands that appear in the field of view and lag
behind each eye movement. The library also includes the vector math, a
free-flying camera controller and the geometry helpers that go with the
simulation. It uses only the standard library.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

### `floaterlab.vecmath`

- `Vec2`, `Vec3` and `Vec4` are immutable vectors. They support `+`, `-`,
  unary `-`, scalar `*` and `/`, `dot`, `length`, `normalized` and `isclose`.
  `normalized` raises `ValueError` for a zero vector.
- `Vec3` also has `cross`.
- `Vec4` also has `xyz()`, which returns the first three components.
- `Mat2` is a 2x2 matrix. It provides `identity()`, `apply(v)`, and `@` with
  another `Mat2` or a `Vec2`.
- `Mat4` is a 4x4 matrix stored in row-major order. It provides:
  - `identity()`, `translation(x, y, z)` and `scale(s)`.
  - `transform(v)`, and `@` with another `Mat4` or a `Vec4`.
  - `inverse()`, which raises `ValueError` for a singular matrix.
- `Quaternion` is a rotation. It provides:
  - `from_axis_angle(axis, angle)`. If you leave out `angle`, the length of
    `axis` is used as the angle.
  - `*`, `inverse`, `rotate(v)` and `matrix()`.

### `floaterlab.events`

This module defines keyboard and mouse input:

- the enums `Key`, `KeyAction`, `MouseAction` and `MouseButton`;
- the frozen dataclasses `KeyboardEvent` and `MouseEvent`.

### `floaterlab.camera_controller`

- `Transform` holds a position and a rotation.
- `CameraController` is a fly camera:
  - W/A/S/D move the camera, and Space/Left Shift raise and lower it.
  - The view turns with the mouse. Pressing E switches to keyboard look, where
    H/J/K/L turn the view.
  - Pitch is clamped to just under ±90°.
  - Scrolling scales all movement speeds.
  - `update(transform, keys_down, dt)` moves and orients the transform for one
    frame and returns it.

### `floaterlab.floaters`

- `Motion` is a damped point confined to a disc and pushed by saccade impulses.
- `Segment` is a strand of points with a radius and an opacity.
- `FloaterSheet` groups motions and segments. It provides:
  - `offset()`, `velocity()`, `reset()` and `step(dt)`;
  - `apply_impulse(angle, direction)`;
  - `segment_alpha(time_since_saccade, brightness)`;
  - `screen_points(segment, aspect_ratio)`, which maps a segment's points to
    normalised screen coordinates.
- `build_sheets(rng)` generates the full set of sheets from a `random.Random`.
- `uniform_knots(count)` returns `count` evenly spaced values over [0, 1].

### `floaterlab.eye`

`EyeSimulation` models a head and eyes looking around while floaters drift.
It provides:

- `look(direction)`, which orients the camera.
- `clamp_to_fov(direction)`, which keeps a direction inside the field of view.
- `saccadic_motion(source, target)`, which kicks every floater sheet.
- `step(time, dt)`, which advances head snapping, floaters, breathing and
  replay.
- `keyboard_handler(event)`:
  - Up/Down arrows change brightness.
  - E snaps the head and resets the floaters.
  - P and O start or stop a replay.
  - R toggles measuring.
  - Q raises `SystemExit`.
- `start_replay(path, time)` loads recorded page positions to look at in turn.
  A missing file gives an empty replay.
- `toggle_measuring(path)` starts a measurement run, or ends one and saves it
  to `path`.
- `measure()` records where the gaze meets the book page.

P replays `page_read.txt` and O replays `measurements.txt`; R saves to
`measurements.txt`. You can change these paths through the `replay_path` and
`measurements_path` fields.

The module also provides:

- `SaccadeWidget`, a small on-screen disc that maps a click to an eye direction
  within the field of view;
- `book_model_matrix()`, which places the book page;
- `breathing_offset(time)`, which gives the small head movement caused by
  breathing.

### `floaterlab.measurements`

- `write_measurements(path, positions)` stores gaze samples as `x y` lines with
  five decimals.
- `read_measurements(path)` reads them back. It raises `ValueError` for
  malformed content.

### `floaterlab.tessellation`

This module provides:

- `phong_tessellate`, `barycentric_mix` and `bilinear_quad` for patch
  interpolation;
- `animated_tessellation_level(time)`;
- `ndc_to_uvd(point)`, which maps clip space to texture coordinates and depth;
- `depth_color(z)`;
- `light_intensity(position, light_position, model_position)`, a half-Lambert
  term.

### `floaterlab.gizmos`

This module gives the geometry for an XYZ axis gizmo:

- `axis_arrow_vertices()` returns the arrow's vertices;
- `axis_instance_vertex(position, instance)` places a vertex on the axis drawn
  by an instance;
- `axis_instance_color(instance)` returns the colour for an instance;
- `axis_ortho_matrix(axis_size, width, height)` returns the corner
  orthographic matrix;
- `axis_model_view(transform, axis_size, width, height)` returns the matrix for
  drawing the gizmo.

## Example

```python
import random

from floaterlab.floaters import build_sheets
from floaterlab.vecmath import Mat4, Vec2, Vec4

sheets = build_sheets(random.Random(1))
for sheet in sheets:
    sheet.apply_impulse(0.3, Vec2(1.0, 0.0))

dt = 1 / 60
for _ in range(60):
    for sheet in sheets:
        sheet.step(dt)

first = sheets[0]
print(first.offset(), first.segment_alpha(0.0, 1.0))

print(Mat4.translation(1.0, 2.0, 3.0) @ Vec4(0.0, 0.0, 0.0, 1.0))
```

## What the package does not do

floaterlab computes state and geometry only. It opens no window and draws
nothing. It does not load images, skyboxes or meshes, and it compiles no
shaders. It installs no command-line program. To see the floaters or the
gizmo, feed the points, colours and matrices the library returns into a
renderer of your own, together with your own input events.