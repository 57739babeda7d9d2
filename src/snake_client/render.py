"""Pygame based renderer for the game client."""

from __future__ import annotations

from typing import Protocol

import pygame

from snake_client.grid import Coordinate
from snake_client.store import GameSnapshot, display_score

BACKGROUND_COLOR = (0x1C, 0x17, 0x43)
SNAKE_COLOR = (0xF6, 0x26, 0x49)
FOOD_COLOR = (0xF6, 0xF1, 0x4B)
TEXT_COLOR = (255, 255, 255)


class RenderSink(Protocol):
    def render(self, snapshot: GameSnapshot) -> None: ...


def score_lines(snapshot: GameSnapshot) -> list[str]:
    """Return one score line per player in sorted id order."""
    return [
        f"Player {index + 1}: {display_score(snapshot.scores[player_id])}"
        for index, player_id in enumerate(sorted(snapshot.scores))
    ]


class Renderer:
    """Draws a :class:`GameSnapshot` as filled tiles on a surface."""

    def __init__(self, screen: pygame.Surface, tile_size: int = 20) -> None:
        self.screen = screen
        self.tile_size = tile_size
        self.font = pygame.font.Font(None, 20)
        self.frames = 0

    def render(self, snapshot: GameSnapshot) -> None:
        self.clear()
        for body in snapshot.snakes.values():
            self.draw_snake(body)
        if snapshot.food is not None:
            self.draw_tile(snapshot.food, FOOD_COLOR)
        self.draw_scores(snapshot)
        self.present()
        self.frames += 1

    def clear(self) -> None:
        self.screen.fill(BACKGROUND_COLOR)

    def draw_tile(self, coord: Coordinate, color: tuple[int, int, int]) -> None:
        x, y = coord
        size = self.tile_size
        pygame.draw.rect(self.screen, color, pygame.Rect(x * size, y * size, size, size))

    def draw_snake(self, body: tuple[Coordinate, ...]) -> None:
        for segment in body:
            self.draw_tile(segment, SNAKE_COLOR)

    def draw_scores(self, snapshot: GameSnapshot) -> None:
        y = 20
        for line in score_lines(snapshot):
            surface = self.font.render(line, True, TEXT_COLOR)
            self.screen.blit(surface, (10, y))
            y += 30

    def present(self) -> None:
        if pygame.display.get_init() and self.screen is pygame.display.get_surface():
            pygame.display.flip()
