"""Snake body, headings, and direction control."""

from __future__ import annotations

import enum
import logging
from collections import deque
from collections.abc import Iterable

from snake_client.grid import Coordinate

logger = logging.getLogger(__name__)


class Direction(enum.Enum):
    """Cardinal headings with (dx, dy) deltas on the tile grid."""

    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def opposite(self) -> Direction:
        return _OPPOSITES[self]

    @classmethod
    def from_wire(cls, name: str) -> Direction:
        """Parse an ``UP``/``DOWN``/``LEFT``/``RIGHT`` string."""
        try:
            return cls[name.upper()]
        except KeyError:
            raise ValueError(f"Unknown direction {name!r}.") from None


# Pairs that would cause an instant 180° reversal.
_OPPOSITES: dict[Direction, Direction] = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}

# Arrow key names as reported by ``pygame.key.name``.
KEY_DIRECTIONS: dict[str, Direction] = {
    "up": Direction.UP,
    "down": Direction.DOWN,
    "left": Direction.LEFT,
    "right": Direction.RIGHT,
}


def try_change_direction(current: Direction, key: str) -> Direction:
    """Map *key* to a heading, keeping *current* on unknown keys or reversals."""
    candidate = KEY_DIRECTIONS.get(key)
    if candidate is None or candidate is current.opposite:
        return current
    return candidate


class DirectionController:
    """Holds the current heading and applies key presses immediately.

    There is no input buffer: a key pressed after this tick's head was
    computed takes effect on the next tick.
    """

    def __init__(self, direction: Direction = Direction.RIGHT) -> None:
        self.direction = direction

    def handle_key(self, key: str) -> bool:
        """Apply a key press. Returns True if the heading changed."""
        new_direction = try_change_direction(self.direction, key)
        if new_direction is self.direction:
            return False
        logger.debug("Heading %s -> %s", self.direction.name, new_direction.name)
        self.direction = new_direction
        return True


class Snake:
    """A snake represented as an ordered deque of (x, y) body segments.

    The head is ``body[0]``; the tail is ``body[-1]``.
    """

    def __init__(self, body: Iterable[Coordinate]) -> None:
        self.body: deque[Coordinate] = deque(body)
        if not self.body:
            raise ValueError("Snake length must be at least 1.")

    @property
    def head(self) -> Coordinate:
        """Return the head coordinate."""
        return self.body[0]

    def __len__(self) -> int:
        return len(self.body)

    def next_head(self, direction: Direction) -> Coordinate:
        """Compute the next head position without moving."""
        dx, dy = direction.value
        x, y = self.head
        return x + dx, y + dy

    def advance(self, direction: Direction, grow: bool = False) -> Coordinate | None:
        """Move the snake one step forward.

        Returns the vacated tail cell, or ``None`` if the snake grew.
        """
        self.body.appendleft(self.next_head(direction))
        if grow:
            return None
        return self.body.pop()

    def occupies(self, coord: Coordinate) -> bool:
        """Check whether the snake occupies a given cell."""
        return coord in self.body

    def segments(self) -> tuple[Coordinate, ...]:
        return tuple(self.body)

    def to_dict(self) -> dict:
        """Serialize the body in wire format."""
        return {"body": [{"x": x, "y": y} for x, y in self.body]}
