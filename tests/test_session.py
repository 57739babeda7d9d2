"""Tests for GameSession: tick ordering, reconciliation, and game over."""

from __future__ import annotations

import asyncio
import json

import numpy as np
import pytest

from snake_client.config import ClientConfig
from snake_client.session import GameSession
from snake_client.snake import Direction
from snake_client.sound import CRASH_SOUND, FOOD_EATEN_SOUND


def _session(channel, renderer, sound, **overrides) -> GameSession:
    config = ClientConfig(
        canvas_width=400, canvas_height=400, tile_size=20, seed=0, **overrides,
    )
    return GameSession(
        config, channel, renderer, sound, rng=np.random.default_rng(0),
    )


def _state_frame(snakes: dict, food: tuple[int, int]) -> str:
    return json.dumps({
        "snakes": {
            sid: {"body": [{"x": x, "y": y} for x, y in body]}
            for sid, body in snakes.items()
        },
        "foodPosition": {"x": food[0], "y": food[1]},
    })


class TestSessionInit:
    def test_initial_state(self, channel, renderer, sound):
        s = _session(channel, renderer, sound)
        assert s.simulator.body == ((5, 5),)
        assert s.controller.direction is Direction.RIGHT
        assert s.simulator.food is not None
        assert s.simulator.food not in s.simulator.body
        assert not s.game_over

    def test_sessions_share_nothing(self, channel, renderer, sound):
        a = _session(channel, renderer, sound)
        b = _session(channel, renderer, sound)
        a.handle_key("down")
        a.tick()
        assert b.controller.direction is Direction.RIGHT
        assert b.simulator.body == ((5, 5),)


class TestTick:
    def test_tick_order_render_then_send(self, channel, renderer, sound):
        s = _session(channel, renderer, sound)
        s.simulator.food = (15, 15)
        frame = s.tick()
        assert renderer.frames == [frame]
        assert frame.snakes["local"] == ((6, 5),)
        assert channel.messages == [{"method": "play", "direction": "RIGHT"}]

    def test_eating_food_scenario(self, channel, renderer, sound):
        s = _session(channel, renderer, sound)
        s.simulator.food = (6, 5)
        frame = s.tick()
        assert frame.snakes["local"] == ((6, 5), (5, 5))
        assert frame.scores["local"] == 1
        assert sound.played == [FOOD_EATEN_SOUND]
        assert channel.messages == [
            {"method": "foodEaten", "playerId": "local"},
            {"method": "play", "direction": "RIGHT"},
        ]

    def test_reversal_rejected_scenario(self, channel, renderer, sound):
        s = _session(channel, renderer, sound)
        s.simulator.food = (15, 15)
        s.simulator.snake.body.append((4, 5))
        assert not s.handle_key("left")
        s.tick()
        assert s.simulator.body == ((6, 5), (5, 5))

    def test_key_applies_on_next_tick(self, channel, renderer, sound):
        s = _session(channel, renderer, sound)
        s.simulator.food = (15, 15)
        s.handle_key("down")
        s.tick()
        assert s.simulator.body == ((5, 6),)
        assert channel.messages[-1]["direction"] == "DOWN"

    def test_closed_channel_drops_send(self, channel, renderer, sound, caplog):
        channel.is_open = False
        s = _session(channel, renderer, sound)
        s.tick()
        assert channel.sent == []
        assert len(renderer.frames) == 1
        assert "not open" in caplog.text


class TestReconciliation:
    def test_remote_snakes_rendered_with_local_prediction(
        self, channel, renderer, sound,
    ):
        s = _session(channel, renderer, sound)
        s.handle_message(_state_frame({"p1": [(10, 10)], "local": [(1, 1)]}, (12, 12)))
        frame = s.tick()
        assert frame.snakes["p1"] == ((10, 10),)
        assert frame.snakes["local"] == ((6, 5),)
        assert frame.food == (12, 12)

    def test_server_food_becomes_target(self, channel, renderer, sound):
        s = _session(channel, renderer, sound)
        s.handle_message(_state_frame({}, (6, 5)))
        s.tick()
        assert s.simulator.score == 1

    def test_scores_only_message(self, channel, renderer, sound):
        s = _session(channel, renderer, sound)
        s.handle_message(_state_frame({"p1": [(10, 10)]}, (12, 12)))
        s.handle_message(json.dumps({"scores": {"p1": 5, "p2": "x"}}))
        frame = s.tick()
        assert frame.snakes["p1"] == ((10, 10),)
        assert frame.food == (12, 12)
        assert frame.scores["p1"] == 5
        assert frame.scores["p2"] is None

    def test_snakes_without_food_ignored(self, channel, renderer, sound):
        s = _session(channel, renderer, sound)
        s.handle_message(json.dumps({"snakes": {"p1": {"body": [{"x": 1, "y": 1}]}}}))
        assert dict(s.store.snapshot.snakes) == {}

    def test_collision_with_remote_snake(self, channel, renderer, sound):
        s = _session(channel, renderer, sound)
        s.handle_message(_state_frame({"p1": [(6, 5)]}, (12, 12)))
        s.tick()
        assert s.game_over
        assert sound.played == [CRASH_SOUND]

    def test_remote_food_eaten_plays_sound_only(self, channel, renderer, sound):
        s = _session(channel, renderer, sound)
        s.handle_message(json.dumps({"foodEaten": True}))
        assert sound.played == [FOOD_EATEN_SOUND]
        assert channel.sent == []


class TestGameOver:
    def test_wall_collision_scenario(self, channel, renderer, sound):
        s = _session(channel, renderer, sound)
        s.controller.direction = Direction.LEFT
        s.simulator.snake.body.clear()
        s.simulator.snake.body.append((0, 5))
        s.tick()
        assert s.game_over
        assert sound.played == [CRASH_SOUND]
        # The final frame is still drawn.
        assert len(renderer.frames) == 1

    def test_server_collision_ends_once(self, channel, renderer, sound):
        s = _session(channel, renderer, sound)
        s.handle_message(json.dumps({"collision": True}))
        s.handle_message(json.dumps({"collision": True}))
        assert s.game_over
        assert sound.played == [CRASH_SOUND]

    def test_keys_ignored_after_game_over(self, channel, renderer, sound):
        s = _session(channel, renderer, sound)
        s.on_collision()
        assert not s.handle_key("up")
        assert s.controller.direction is Direction.RIGHT


class TestTickLoop:
    @pytest.mark.asyncio
    async def test_loop_ticks_until_collision_then_resets(
        self, channel, renderer, sound,
    ):
        s = _session(
            channel, renderer, sound, tick_interval_ms=5, reset_delay_s=0.05,
        )
        s.simulator.food = None
        s.start()
        # Start at x=5 heading right on a 20-wide grid: 14 moves, then the wall.
        await asyncio.wait_for(s.wait_for_reset(), timeout=5)
        assert s.game_over
        assert s.simulator.body == ((19, 5),)
        assert len(renderer.frames) == 15
        assert sound.played == [CRASH_SOUND]
        await asyncio.sleep(0.02)
        assert len(renderer.frames) == 15

    @pytest.mark.asyncio
    async def test_reset_waits_for_grace_delay(self, channel, renderer, sound):
        s = _session(channel, renderer, sound, reset_delay_s=0.2)
        waiter = asyncio.create_task(s.wait_for_reset())
        s.on_collision()
        await asyncio.sleep(0.05)
        assert not waiter.done()
        await asyncio.wait_for(waiter, timeout=2)

    @pytest.mark.asyncio
    async def test_close_stops_loop(self, channel, renderer, sound):
        s = _session(channel, renderer, sound, tick_interval_ms=5)
        s.simulator.food = None
        s.start()
        await asyncio.sleep(0.02)
        s.close()
        count = len(renderer.frames)
        await asyncio.sleep(0.03)
        assert len(renderer.frames) == count
        assert not s.game_over
