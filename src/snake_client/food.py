"""Food placement logic."""

from __future__ import annotations

import logging
from collections.abc import Collection
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from snake_client.grid import Coordinate, Grid

logger = logging.getLogger(__name__)


class FoodSpawner:
    """Places food on interior cells that the local snake does not occupy.

    Uses a seeded NumPy RNG for deterministic, reproducible placement.
    """

    def __init__(
        self,
        grid: Grid,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.grid = grid
        self.rng = rng if rng is not None else np.random.default_rng()

    def spawn(self, occupied: Collection[Coordinate]) -> Coordinate | None:
        """Sample a free interior coordinate by rejection sampling.

        Returns ``None`` if every interior cell is occupied.
        """
        taken = set(occupied)
        free = sum(1 for cell in self.grid.interior_cells() if cell not in taken)
        if free == 0:
            logger.warning("No free interior cells available for food.")
            return None

        while True:
            x = int(self.rng.integers(1, self.grid.width - 1))
            y = int(self.rng.integers(1, self.grid.height - 1))
            if (x, y) not in taken:
                logger.debug("Food generated at (%d, %d).", x, y)
                return x, y
