"""Client configuration."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path

from snake_client.grid import Grid
from snake_client.snake import Direction

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClientConfig:
    """Full client configuration.

    Supports JSON serialization so a setup can be saved and reloaded.
    """

    # Transport
    server_url: str = "ws://localhost:8080/game"
    local_id: str = "local"

    # Board
    canvas_width: int = 800
    canvas_height: int = 800
    tile_size: int = 20

    # Timing
    tick_interval_ms: int = 100
    reset_delay_s: float = 2.0

    # Session start
    start_x: int = 5
    start_y: int = 5
    start_direction: str = "RIGHT"
    seed: int | None = None

    # Sounds
    crash_sound: str | None = None
    food_eaten_sound: str | None = None

    def __post_init__(self) -> None:
        if self.tick_interval_ms <= 0:
            raise ValueError("tick_interval_ms must be positive.")
        if self.reset_delay_s < 0:
            raise ValueError("reset_delay_s must be >= 0.")
        if not self.local_id:
            raise ValueError("local_id must not be empty.")
        grid = self.grid
        if not grid.in_bounds((self.start_x, self.start_y)):
            raise ValueError(
                f"Start position ({self.start_x}, {self.start_y}) is outside "
                f"the {grid.width}x{grid.height} grid."
            )
        Direction.from_wire(self.start_direction)

    @property
    def grid(self) -> Grid:
        return Grid.from_canvas(self.canvas_width, self.canvas_height, self.tile_size)

    @property
    def direction(self) -> Direction:
        return Direction.from_wire(self.start_direction)

    @property
    def tick_interval(self) -> float:
        """Tick period in seconds."""
        return self.tick_interval_ms / 1000.0

    def to_dict(self) -> dict:
        return asdict(self)

    def save(self, path: str | Path) -> None:
        """Write config to a JSON file."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(self.to_dict(), indent=2))
        logger.info("Config saved to %s", p)

    @classmethod
    def load(cls, path: str | Path) -> ClientConfig:
        """Load config from a JSON file."""
        raw = json.loads(Path(path).read_text())
        return cls(**raw)
