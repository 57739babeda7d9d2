"""Authoritative server state and the merged per-frame view."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType

from snake_client.grid import Coordinate

logger = logging.getLogger(__name__)

# A score is either a whole number or None when absent/invalid on the wire.
Score = int | None


def display_score(value: Score) -> int:
    """Return the score to show on screen, falling back to 0."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return 0


def _frozen(mapping: Mapping) -> Mapping:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class GameSnapshot:
    """One frame's view of all players, the food, and the scores."""

    snakes: Mapping[str, tuple[Coordinate, ...]] = field(
        default_factory=lambda: _frozen({}),
    )
    food: Coordinate | None = None
    scores: Mapping[str, Score] = field(default_factory=lambda: _frozen({}))


class RemoteStateStore:
    """Holds the latest snapshot pushed by the server.

    Every update builds a new immutable :class:`GameSnapshot` and swaps it
    in, so readers never observe a half-applied message.
    """

    def __init__(self) -> None:
        self._snapshot = GameSnapshot()

    @property
    def snapshot(self) -> GameSnapshot:
        return self._snapshot

    def replace_state(
        self,
        snakes: Mapping[str, Iterable[Coordinate]],
        food: Coordinate,
    ) -> GameSnapshot:
        """Replace all player bodies and the food position wholesale."""
        bodies = {sid: tuple(body) for sid, body in snakes.items()}
        self._snapshot = replace(
            self._snapshot, snakes=_frozen(bodies), food=food,
        )
        logger.debug("State replaced: %d snakes, food at %s.", len(bodies), food)
        return self._snapshot

    def replace_scores(self, scores: Mapping[str, Score]) -> GameSnapshot:
        """Replace the score table wholesale."""
        self._snapshot = replace(self._snapshot, scores=_frozen(scores))
        return self._snapshot


def merge(
    snapshot: GameSnapshot,
    local_id: str,
    body: Iterable[Coordinate],
    food: Coordinate | None,
    score: int,
) -> GameSnapshot:
    """Overlay the local prediction on a server snapshot.

    The local id always takes the predicted body and score; every other id
    keeps what the server sent.
    """
    snakes = dict(snapshot.snakes)
    snakes[local_id] = tuple(body)
    scores = dict(snapshot.scores)
    scores[local_id] = score
    return GameSnapshot(
        snakes=_frozen(snakes),
        food=food if food is not None else snapshot.food,
        scores=_frozen(scores),
    )
