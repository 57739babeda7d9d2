"""Snake Arena: client-side prediction and reconciliation engine."""

from snake_client.config import ClientConfig
from snake_client.grid import Grid
from snake_client.session import GameSession
from snake_client.simulator import CollisionKind, LocalSimulator, StepOutcome
from snake_client.snake import Direction, DirectionController, Snake
from snake_client.store import GameSnapshot, RemoteStateStore

__all__ = [
    "ClientConfig",
    "CollisionKind",
    "Direction",
    "DirectionController",
    "GameSession",
    "GameSnapshot",
    "Grid",
    "LocalSimulator",
    "RemoteStateStore",
    "Snake",
    "StepOutcome",
]
