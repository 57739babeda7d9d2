"""One game session: prediction, reconciliation, and the tick loop."""

from __future__ import annotations

import asyncio
import logging

import numpy as np

from snake_client.channel import ChannelAdapter, MessageChannel
from snake_client.config import ClientConfig
from snake_client.food import FoodSpawner
from snake_client.grid import Coordinate
from snake_client.render import RenderSink
from snake_client.simulator import LocalSimulator, StepOutcome
from snake_client.snake import DirectionController
from snake_client.sound import CRASH_SOUND, FOOD_EATEN_SOUND, SoundSink
from snake_client.store import GameSnapshot, RemoteStateStore, merge

logger = logging.getLogger(__name__)


class GameSession:
    """All mutable state for a single game.

    A session is driven by three kinds of events: key presses
    (:meth:`handle_key`), inbound frames (:meth:`handle_message`) and timer
    ticks (:meth:`tick`). It is built once per game and discarded on reset;
    nothing is carried over to the next session.
    """

    def __init__(
        self,
        config: ClientConfig,
        channel: MessageChannel,
        renderer: RenderSink,
        sound: SoundSink,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.config = config
        self.renderer = renderer
        self.sound = sound

        grid = config.grid
        spawner = FoodSpawner(
            grid, rng=rng if rng is not None else np.random.default_rng(config.seed),
        )
        self.controller = DirectionController(config.direction)
        self.simulator = LocalSimulator(
            grid,
            [(config.start_x, config.start_y)],
            spawner,
            local_id=config.local_id,
        )
        self.simulator.spawn_food()
        self.store = RemoteStateStore()
        self.adapter = ChannelAdapter(channel, self)

        self.last_frame: GameSnapshot | None = None
        self.game_over = False
        self._game_over_event = asyncio.Event()
        self._timer: asyncio.Task | None = None

    # --- external events ---

    def handle_key(self, key: str) -> bool:
        """Feed a key press to the direction controller."""
        if self.game_over:
            return False
        return self.controller.handle_key(key)

    def handle_message(self, raw: str | bytes) -> None:
        self.adapter.dispatch(raw)

    def tick(self) -> GameSnapshot:
        """Advance one frame: simulate, merge, render, emit heading."""
        direction = self.controller.direction
        result = self.simulator.step(direction, self.store.snapshot.snakes)

        if result.outcome is StepOutcome.ATE:
            self.sound.play(FOOD_EATEN_SOUND)
            self.adapter.send_food_eaten(self.config.local_id)

        frame = merge(
            self.store.snapshot,
            self.config.local_id,
            self.simulator.body,
            self.simulator.food,
            self.simulator.score,
        )
        self.renderer.render(frame)
        self.adapter.send_play(direction)
        self.last_frame = frame

        if result.collided:
            self._end_game()
        return frame

    # --- inbound message handlers ---

    def on_collision(self) -> None:
        logger.info("Server reported a collision.")
        self._end_game()

    def on_food_eaten(self) -> None:
        self.sound.play(FOOD_EATEN_SOUND)

    def on_state(self, snakes: dict[str, list[Coordinate]], food: Coordinate) -> None:
        self.store.replace_state(snakes, food)
        self.simulator.food = food

    def on_scores(self, scores: dict[str, int | None]) -> None:
        self.store.replace_scores(scores)

    # --- lifecycle ---

    def start(self) -> None:
        """Start the fixed-period tick loop on the running event loop."""
        if self._timer is not None or self.game_over:
            return
        self._timer = asyncio.create_task(self._tick_loop())
        logger.info(
            "Session started (tick %d ms, grid %dx%d).",
            self.config.tick_interval_ms,
            self.simulator.grid.width,
            self.simulator.grid.height,
        )

    async def _tick_loop(self) -> None:
        interval = self.config.tick_interval
        try:
            while not self.game_over:
                await asyncio.sleep(interval)
                self.tick()
        except asyncio.CancelledError:
            logger.debug("Tick loop cancelled.")
        except Exception:
            logger.exception("Tick loop error.")
            self._end_game()

    async def wait_for_reset(self) -> None:
        """Return once the game has ended and the grace delay has passed."""
        await self._game_over_event.wait()
        await asyncio.sleep(self.config.reset_delay_s)

    def close(self) -> None:
        """Stop ticking without a game over, e.g. when the window closes."""
        self._cancel_timer()

    def _cancel_timer(self) -> None:
        timer, self._timer = self._timer, None
        if timer is not None and not timer.done():
            timer.cancel()

    def _end_game(self) -> None:
        """Enter the terminal state. Runs at most once per session."""
        if self.game_over:
            return
        self.game_over = True
        self._cancel_timer()
        self.sound.play(CRASH_SOUND)
        self._game_over_event.set()
        logger.info(
            "Game over with score %d; resetting in %.1fs.",
            self.simulator.score,
            self.config.reset_delay_s,
        )
