"""Tile grid bounds and pure collision checks."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

Coordinate = tuple[int, int]


def is_out_of_bounds(coord: Coordinate, grid_width: int, grid_height: int) -> bool:
    """Return True if either axis lies outside ``[0, dimension)``."""
    x, y = coord
    return x < 0 or x >= grid_width or y < 0 or y >= grid_height


def intersects(coord: Coordinate, body: Iterable[Coordinate]) -> bool:
    """Return True if *coord* equals any segment of *body*."""
    return any(seg == coord for seg in body)


def self_collision(candidate: Coordinate, body: Iterable[Coordinate]) -> bool:
    """Check a candidate head against the snake's pre-move body.

    The tail counts as occupied even though it would be vacated this tick.
    """
    return intersects(candidate, body)


def cross_snake_collision(
    candidate: Coordinate,
    bodies: Mapping[str, Iterable[Coordinate]],
    excluding_id: str,
) -> bool:
    """Check a candidate head against every body except *excluding_id*."""
    return any(
        intersects(candidate, body)
        for snake_id, body in bodies.items()
        if snake_id != excluding_id
    )


class Grid:
    """Fixed-size tile grid.

    Coordinates use (x, y) ordering: ``x`` is the column and grows to the
    right, ``y`` is the row and grows downwards.
    """

    def __init__(self, width: int = 40, height: int = 40) -> None:
        if width < 3 or height < 3:
            raise ValueError("Grid dimensions must be at least 3×3.")
        self.width = width
        self.height = height

    @classmethod
    def from_canvas(
        cls, canvas_width: int, canvas_height: int, tile_size: int,
    ) -> Grid:
        """Derive tile bounds from a pixel canvas."""
        if canvas_width <= 0 or canvas_height <= 0 or tile_size <= 0:
            raise ValueError("Canvas and tile sizes must be positive.")
        if canvas_width % tile_size or canvas_height % tile_size:
            raise ValueError(
                f"Canvas {canvas_width}x{canvas_height} is not a multiple "
                f"of tile size {tile_size}."
            )
        return cls(canvas_width // tile_size, canvas_height // tile_size)

    def in_bounds(self, coord: Coordinate) -> bool:
        """Check whether a coordinate lies within the grid."""
        return not is_out_of_bounds(coord, self.width, self.height)

    def is_interior(self, coord: Coordinate) -> bool:
        """Check whether a coordinate lies strictly inside the border."""
        x, y = coord
        return 0 < x < self.width - 1 and 0 < y < self.height - 1

    def interior_cells(self) -> list[Coordinate]:
        """Return every coordinate that is not on the boundary."""
        return [
            (x, y)
            for y in range(1, self.height - 1)
            for x in range(1, self.width - 1)
        ]
