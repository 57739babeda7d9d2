"""Local movement prediction for the player's own snake."""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from snake_client.food import FoodSpawner
from snake_client.grid import (
    Coordinate,
    Grid,
    cross_snake_collision,
    is_out_of_bounds,
    self_collision,
)
from snake_client.snake import Direction, Snake

logger = logging.getLogger(__name__)


class StepOutcome(enum.Enum):
    MOVED = "moved"
    ATE = "ate"
    COLLIDED = "collided"


class CollisionKind(enum.Enum):
    """What the head ran into."""

    WALL = "wall"
    SELF = "self"
    SNAKE = "snake"


@dataclass(frozen=True)
class StepResult:
    """Outcome of a single simulation tick."""

    outcome: StepOutcome
    head: Coordinate
    collision: CollisionKind | None = None

    @property
    def collided(self) -> bool:
        return self.outcome is StepOutcome.COLLIDED


class LocalSimulator:
    """Step-based prediction of the local snake.

    The simulator owns the local body, the food target, and the local
    score. Each call to :meth:`step` advances the snake by one tile. A
    collision is terminal: later steps return the same result and never
    touch the body again.
    """

    def __init__(
        self,
        grid: Grid,
        body: Iterable[Coordinate],
        spawner: FoodSpawner,
        local_id: str = "local",
        food: Coordinate | None = None,
    ) -> None:
        self.grid = grid
        self.snake = Snake(body)
        self.spawner = spawner
        self.local_id = local_id
        self.food = food
        self.score = 0
        self.tick = 0
        self._terminal: StepResult | None = None

    @property
    def game_over(self) -> bool:
        return self._terminal is not None

    @property
    def body(self) -> tuple[Coordinate, ...]:
        return self.snake.segments()

    def spawn_food(self) -> Coordinate | None:
        """Place a new food target away from the local body."""
        self.food = self.spawner.spawn(self.snake.body)
        return self.food

    def step(
        self,
        direction: Direction,
        remote_bodies: Mapping[str, Iterable[Coordinate]] | None = None,
    ) -> StepResult:
        """Advance the local snake by one tick."""
        if self._terminal is not None:
            return self._terminal

        candidate = self.snake.next_head(direction)

        # --- collision checks, in priority order ---
        if is_out_of_bounds(candidate, self.grid.width, self.grid.height):
            return self._collide(candidate, CollisionKind.WALL)
        if self_collision(candidate, self.snake.body):
            return self._collide(candidate, CollisionKind.SELF)
        if remote_bodies and cross_snake_collision(
            candidate, remote_bodies, self.local_id,
        ):
            return self._collide(candidate, CollisionKind.SNAKE)

        self.tick += 1
        if self.food is not None and candidate == self.food:
            self.snake.advance(direction, grow=True)
            self.score += 1
            self.spawn_food()
            logger.debug(
                "Ate food at %s; length %d, score %d.",
                candidate, len(self.snake), self.score,
            )
            return StepResult(StepOutcome.ATE, candidate)

        self.snake.advance(direction)
        return StepResult(StepOutcome.MOVED, candidate)

    def _collide(self, candidate: Coordinate, kind: CollisionKind) -> StepResult:
        self._terminal = StepResult(StepOutcome.COLLIDED, candidate, kind)
        logger.info(
            "Local snake hit %s at %s after %d ticks with score %d.",
            kind.value, candidate, self.tick, self.score,
        )
        return self._terminal
