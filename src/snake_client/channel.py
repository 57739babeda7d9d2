"""Duplex message channel and the adapter that speaks the game protocol."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Protocol

from websockets.asyncio.client import ClientConnection, connect
from websockets.exceptions import ConnectionClosed, WebSocketException
from websockets.protocol import State

from snake_client.grid import Coordinate
from snake_client.protocol import (
    FoodEatenMessage,
    PlayMessage,
    RequestStateMessage,
    decode,
    encode,
)
from snake_client.snake import Direction

logger = logging.getLogger(__name__)


class MessageChannel(Protocol):
    """Anything that can carry text frames to the server."""

    @property
    def is_open(self) -> bool: ...

    def send(self, text: str) -> None: ...


class MessageHandlers(Protocol):
    def on_collision(self) -> None: ...

    def on_food_eaten(self) -> None: ...

    def on_state(
        self, snakes: dict[str, list[Coordinate]], food: Coordinate,
    ) -> None: ...

    def on_scores(self, scores: dict[str, int | None]) -> None: ...


class ChannelAdapter:
    """Translates inbound frames into handler calls and outbound intents
    into wire messages.
    """

    def __init__(self, channel: MessageChannel, handlers: MessageHandlers) -> None:
        self.channel = channel
        self.handlers = handlers
        self._handshake_sent = False

    def on_open(self) -> None:
        """Request the initial snapshot, once per connection."""
        if self._handshake_sent:
            return
        self._handshake_sent = True
        self._send(encode(RequestStateMessage()))

    def dispatch(self, raw: str | bytes) -> None:
        """Route each present field of an inbound frame to its handler."""
        msg = decode(raw)
        if msg is None:
            return

        if msg.collision:
            self.handlers.on_collision()
        if msg.food_eaten:
            self.handlers.on_food_eaten()
        if msg.has_state:
            assert msg.snakes is not None and msg.food_position is not None  # noqa: S101
            snakes = {sid: s.coordinates() for sid, s in msg.snakes.items()}
            self.handlers.on_state(snakes, msg.food_position.as_coordinate())
        if msg.scores is not None:
            self.handlers.on_scores(msg.scores)

    def send_play(self, direction: Direction) -> None:
        self._send(encode(PlayMessage(direction=direction.name)))

    def send_food_eaten(self, player_id: str) -> None:
        self._send(encode(FoodEatenMessage(player_id=player_id)))

    def _send(self, text: str) -> None:
        if not self.channel.is_open:
            logger.warning("Channel not open. Dropping outbound message %s.", text)
            return
        self.channel.send(text)


class WebSocketChannel:
    """Long-lived websocket connection with fire-and-forget sends.

    Outbound frames are queued and drained by a sender task; inbound frames
    are fed to *on_message* from a receiver task on the same event loop.
    There is no reconnection: once the socket drops, sends are dropped.
    """

    def __init__(self, uri: str, open_timeout: float = 5.0) -> None:
        self.uri = uri
        self.open_timeout = open_timeout
        self.websocket: ClientConnection | None = None
        self._outgoing: asyncio.Queue[str] = asyncio.Queue()
        self._receiver_task: asyncio.Task[None] | None = None
        self._sender_task: asyncio.Task[None] | None = None

    @property
    def is_open(self) -> bool:
        return self.websocket is not None and self.websocket.state is State.OPEN

    async def connect(
        self,
        on_message: Callable[[str | bytes], None],
        on_open: Callable[[], None] | None = None,
    ) -> bool:
        """Open the connection. Failures are logged, not raised."""
        try:
            self.websocket = await connect(self.uri, open_timeout=self.open_timeout)
        except (OSError, TimeoutError, WebSocketException) as exc:
            logger.warning("Could not connect to %s: %s", self.uri, exc)
            return False

        logger.info("Connected to %s.", self.uri)
        self._sender_task = asyncio.create_task(self._sender_loop())
        self._receiver_task = asyncio.create_task(self._receiver_loop(on_message))
        if on_open is not None:
            on_open()
        return True

    def send(self, text: str) -> None:
        if not self.is_open:
            logger.warning("WebSocket not open. Dropping outbound message.")
            return
        self._outgoing.put_nowait(text)

    async def _sender_loop(self) -> None:
        assert self.websocket is not None  # noqa: S101
        while True:
            text = await self._outgoing.get()
            try:
                await self.websocket.send(text)
            except ConnectionClosed:
                logger.warning("WebSocket closed. Outbound message dropped.")

    async def _receiver_loop(self, on_message: Callable[[str | bytes], None]) -> None:
        assert self.websocket is not None  # noqa: S101
        try:
            async for message in self.websocket:
                on_message(message)
        except ConnectionClosed as exc:
            logger.warning("WebSocket connection lost: %s", exc)
        except Exception:
            logger.exception("Error handling inbound message.")
        finally:
            logger.info("Receiver for %s stopped.", self.uri)

    async def close(self) -> None:
        """Stop both tasks and close the socket."""
        for task in (self._sender_task, self._receiver_task):
            if task is not None and not task.done():
                task.cancel()
        tasks = [t for t in (self._sender_task, self._receiver_task) if t is not None]
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        if self.websocket is not None:
            await self.websocket.close()
        logger.info("Channel to %s closed.", self.uri)
