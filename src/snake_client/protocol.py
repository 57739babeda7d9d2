"""Pydantic models for the client/server wire messages."""

from __future__ import annotations

import json
import logging
import math
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from snake_client.grid import Coordinate

logger = logging.getLogger(__name__)


class Point(BaseModel):
    """A tile coordinate as sent on the wire."""

    x: int
    y: int

    def as_coordinate(self) -> Coordinate:
        return self.x, self.y


class SnakePayload(BaseModel):
    """One player's snake inside a state message."""

    model_config = ConfigDict(populate_by_name=True)

    body: list[Point]
    direction: str | None = None
    alive: bool = Field(default=True, alias="isAlive")

    def coordinates(self) -> list[Coordinate]:
        return [p.as_coordinate() for p in self.body]


def _coerce_score(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return int(value) if value >= 0 else None
    return None


class InboundMessage(BaseModel):
    """Server-to-client message. Every field is optional."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    collision: bool = False
    food_eaten: bool = Field(default=False, alias="foodEaten")
    player_id: str | None = Field(default=None, alias="playerId")
    snakes: dict[str, SnakePayload] | None = None
    food_position: Point | None = Field(default=None, alias="foodPosition")
    scores: dict[str, int | None] | None = None

    @field_validator("scores", mode="before")
    @classmethod
    def _lenient_scores(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return value
        return {str(k): _coerce_score(v) for k, v in value.items()}

    @property
    def has_state(self) -> bool:
        return self.snakes is not None and self.food_position is not None


class PlayMessage(BaseModel):
    method: Literal["play"] = "play"
    direction: Literal["UP", "DOWN", "LEFT", "RIGHT"]


class FoodEatenMessage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    method: Literal["foodEaten"] = "foodEaten"
    player_id: str = Field(alias="playerId")


class RequestStateMessage(BaseModel):
    method: Literal["requestState"] = "requestState"


def encode(message: BaseModel) -> str:
    """Serialize an outbound message to compact JSON."""
    return message.model_dump_json(by_alias=True)


def decode(raw: str | bytes) -> InboundMessage | None:
    """Parse an inbound frame.

    Returns ``None`` for non-JSON or non-object payloads. A field that fails
    validation is dropped on its own; the other fields still come through.
    """
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.warning("Dropping non-JSON message: %.80r", raw)
        return None
    if not isinstance(data, dict):
        logger.warning("Dropping non-object message: %.80r", raw)
        return None

    try:
        return InboundMessage.model_validate(data)
    except ValidationError as exc:
        bad_fields = {err["loc"][0] for err in exc.errors() if err["loc"]}
        logger.warning(
            "Ignoring malformed fields %s in inbound message.",
            sorted(map(str, bad_fields)),
        )
        cleaned = {k: v for k, v in data.items() if k not in bad_fields}
    try:
        return InboundMessage.model_validate(cleaned)
    except ValidationError:
        logger.warning("Dropping unparseable message: %.80r", raw)
        return None
