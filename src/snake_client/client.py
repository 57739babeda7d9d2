"""Pygame runner that plays sessions back to back until the window closes."""

from __future__ import annotations

import asyncio
import logging

import pygame

from snake_client.channel import WebSocketChannel
from snake_client.config import ClientConfig
from snake_client.render import Renderer
from snake_client.session import GameSession
from snake_client.sound import CRASH_SOUND, FOOD_EATEN_SOUND, SoundPlayer

logger = logging.getLogger(__name__)

_EVENT_POLL_INTERVAL = 1 / 60  # seconds


def _init_mixer() -> None:
    try:
        pygame.mixer.init()
    except pygame.error as exc:
        logger.warning("Audio unavailable, sounds disabled: %s", exc)


def pump_events(session: GameSession) -> bool:
    """Forward pending pygame events to *session*. Returns True on quit."""
    for event in pygame.event.get():
        if event.type == pygame.QUIT:
            return True
        if event.type == pygame.KEYDOWN:
            session.handle_key(pygame.key.name(event.key))
    return False


async def play_session(session: GameSession) -> bool:
    """Run one session until it resets. Returns True if the user quit."""
    reset = asyncio.create_task(session.wait_for_reset())
    session.start()
    try:
        while not reset.done():
            if pump_events(session):
                return True
            await asyncio.sleep(_EVENT_POLL_INTERVAL)
        return False
    finally:
        reset.cancel()
        session.close()


async def run_client(config: ClientConfig) -> None:
    """Open the window and keep starting fresh sessions after each game over."""
    pygame.init()
    _init_mixer()
    screen = pygame.display.set_mode((config.canvas_width, config.canvas_height))
    pygame.display.set_caption("Snake Arena")
    renderer = Renderer(screen, tile_size=config.tile_size)
    sound = SoundPlayer({
        CRASH_SOUND: config.crash_sound,
        FOOD_EATEN_SOUND: config.food_eaten_sound,
    })

    sessions = 0
    try:
        while True:
            channel = WebSocketChannel(config.server_url)
            session = GameSession(config, channel, renderer, sound)
            await channel.connect(session.handle_message, session.adapter.on_open)
            sessions += 1
            logger.info("Session %d connected to %s.", sessions, config.server_url)
            try:
                quit_requested = await play_session(session)
            finally:
                await channel.close()
            if quit_requested:
                break
            logger.info("Session %d ended; starting a new one.", sessions)
    finally:
        pygame.quit()
