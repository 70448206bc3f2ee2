from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class User:
    id: str
    username: str
    password_hash: str
    created_at: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class GameSession:
    """A single timing attempt.

    `start_time` and `end_time` are epoch milliseconds. A session is active
    while `is_completed` is False; completing it sets `end_time` and
    `deviation` together and the record is never changed afterwards.
    """

    id: str
    user_id: str
    start_time: int
    end_time: Optional[int] = None
    deviation: Optional[float] = None
    is_completed: bool = False
    created_at: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class LeaderboardEntry:
    user_id: str
    username: str
    total_games: int
    average_deviation: float
    best_deviation: float
