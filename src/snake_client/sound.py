"""Fire-and-forget sound effects."""

from __future__ import annotations

import logging
from typing import Protocol

import pygame

logger = logging.getLogger(__name__)

CRASH_SOUND = "crash"
FOOD_EATEN_SOUND = "food_eaten"


class SoundSink(Protocol):
    def play(self, sound_id: str) -> None: ...


class SoundPlayer:
    """Plays sound files through ``pygame.mixer``.

    Playback problems are logged and never propagated to the caller.
    """

    def __init__(self, paths: dict[str, str | None] | None = None) -> None:
        self.paths = {k: v for k, v in (paths or {}).items() if v}
        self._cache: dict[str, pygame.mixer.Sound] = {}

    def play(self, sound_id: str) -> None:
        path = self.paths.get(sound_id)
        if path is None:
            logger.debug("No sound configured for %r.", sound_id)
            return
        try:
            sound = self._cache.get(sound_id)
            if sound is None:
                sound = pygame.mixer.Sound(path)
                self._cache[sound_id] = sound
            sound.play()
        except (pygame.error, OSError) as exc:
            logger.warning("Error playing sound %r: %s", sound_id, exc)
