"""Input event types delivered to behaviours and applications."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class Key(Enum):
    """Keyboard keys the simulations react to."""

    W = auto()
    A = auto()
    S = auto()
    D = auto()
    E = auto()
    H = auto()
    J = auto()
    K = auto()
    L = auto()
    O = auto()
    P = auto()
    Q = auto()
    R = auto()
    NINE = auto()
    SPACE = auto()
    LEFT_SHIFT = auto()
    UP_ARROW = auto()
    DOWN_ARROW = auto()


class KeyAction(Enum):
    """What happened to a key."""

    PRESS = auto()
    RELEASE = auto()


class MouseAction(Enum):
    """What the mouse did."""

    MOVE = auto()
    SCROLL = auto()
    BUTTON_PRESS = auto()
    BUTTON_RELEASE = auto()


class MouseButton(Enum):
    """Mouse buttons."""

    LEFT = auto()
    RIGHT = auto()
    MIDDLE = auto()


@dataclass(frozen=True)
class KeyboardEvent:
    """A key being pressed or released."""

    action: KeyAction
    key: Key


@dataclass(frozen=True)
class MouseEvent:
    """A mouse movement, scroll or button event.

    Cursor coordinates are normalised screen coordinates; ``dx``/``dy`` are the
    movement since the previous event.
    """

    action: MouseAction
    x: float = 0.0
    y: float = 0.0
    dx: float = 0.0
    dy: float = 0.0
    scroll_y: float = 0.0
    button: MouseButton | None = None