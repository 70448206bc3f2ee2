import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("ALGORITHM", "HS256")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
from fastapi.testclient import TestClient

from app.database import InMemoryStore
from app.games.service import GameService
from app.leaderboard.service import LeaderboardService
from app.main import create_app

START = 1_700_000_000_000


class FakeClock:
    def __init__(self, now: int = START):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture()
def store():
    return InMemoryStore()


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def game_service(store, clock):
    return GameService(store, clock=clock)


@pytest.fixture()
def leaderboard_service(store):
    return LeaderboardService(store)


@pytest.fixture()
def app(store, clock):
    return create_app(store=store, clock=clock)


@pytest.fixture()
def client(app):
    return TestClient(app)


def play(game_service, clock, user_id, duration_ms):
    """Start and stop one session that lasts `duration_ms`."""
    game_service.start_game(user_id)
    clock.advance(duration_ms)
    return game_service.stop_game(user_id)
