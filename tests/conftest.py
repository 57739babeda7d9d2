"""Shared fixtures: headless pygame and fake sinks."""

from __future__ import annotations

import json
import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pytest  # noqa: E402


class FakeChannel:
    """In-memory channel that records every frame it is asked to send."""

    def __init__(self, is_open: bool = True) -> None:
        self.is_open = is_open
        self.sent: list[str] = []

    def send(self, text: str) -> None:
        self.sent.append(text)

    @property
    def messages(self) -> list[dict]:
        return [json.loads(s) for s in self.sent]


class FakeRenderer:
    def __init__(self) -> None:
        self.frames: list = []

    def render(self, snapshot) -> None:
        self.frames.append(snapshot)


class FakeSound:
    def __init__(self) -> None:
        self.played: list[str] = []

    def play(self, sound_id: str) -> None:
        self.played.append(sound_id)


@pytest.fixture()
def channel():
    return FakeChannel()


@pytest.fixture()
def renderer():
    return FakeRenderer()


@pytest.fixture()
def sound():
    return FakeSound()
