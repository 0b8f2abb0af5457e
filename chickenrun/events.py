"""Input events delivered to game and viewer modes."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import FrozenSet


class Key(enum.Enum):
    """Keyboard keys the modes react to."""

    A = "a"
    D = "d"
    W = "w"
    S = "s"
    SPACE = "space"
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"
    PRINTSCREEN = "printscreen"
    OTHER = "other"


class MouseButton(enum.Enum):
    """Mouse buttons."""

    LEFT = 1
    MIDDLE = 2
    RIGHT = 3


@dataclass(frozen=True)
class KeyDown:
    """A key was pressed."""

    key: Key


@dataclass(frozen=True)
class KeyUp:
    """A key was released."""

    key: Key


@dataclass(frozen=True)
class MouseButtonDown:
    """A mouse button was pressed."""

    button: MouseButton


@dataclass(frozen=True)
class MouseMotion:
    """The mouse moved by ``(xrel, yrel)`` window pixels while ``buttons`` were held."""

    xrel: float
    yrel: float
    buttons: FrozenSet[MouseButton] = field(default_factory=frozenset)


@dataclass(frozen=True)
class MouseWheel:
    """The mouse wheel turned by ``y`` notches (positive away from the user)."""

    y: float