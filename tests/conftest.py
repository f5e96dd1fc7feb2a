import os
import random

import pytest

# pygame must not open a real window or audio device under test.
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

from snake.model import GameModel, Snake  # noqa: E402


class FixedRandom(random.Random):
    """Random whose randrange replays a fixed sequence of values."""

    def __init__(self, values):
        super().__init__(0)
        self._values = list(values)

    def randrange(self, *args, **kwargs):
        return self._values.pop(0)


@pytest.fixture
def model():
    return GameModel(rng=random.Random(1234))


@pytest.fixture
def running_model():
    """A running game with a known layout."""
    m = GameModel(rng=random.Random(1234))
    m.start()
    return m


def place(model, body, direction, food):
    """Put the running model into an exact position."""
    model.snake = Snake(body, direction)
    model.food = food
    return model


@pytest.fixture
def place_snake():
    return place


@pytest.fixture
def fixed_random():
    return FixedRandom
