"""Eye floater simulation with vector math, camera control and geometry helpers."""

__version__ = "0.1.0"

__all__ = [
    "events",
    "vecmath",
    "camera_controller",
    "floaters",
    "measurements",
    "eye",
    "tessellation",
    "gizmos",
]