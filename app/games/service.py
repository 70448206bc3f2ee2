"""Session lifecycle: start, stop, expiry and per-user statistics."""
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from app.config import SESSION_TIMEOUT_MS, TARGET_DURATION_MS
from app.database import InMemoryStore
from app.errors import ForbiddenError, InvalidStateError, NotFoundError, SessionExpiredError
from app.models import GameSession, User
from app.utils import (
    calculate_average,
    calculate_deviation,
    current_timestamp_ms,
    format_time,
    get_minimum,
    is_number,
    is_session_expired,
    round2,
)

logger = logging.getLogger(__name__)

START_MESSAGE = "Game session started! Try to stop the timer exactly at 10 seconds."

# Inclusive upper bounds in ms
FEEDBACK_TIERS = [
    (50, "Excellent! Perfect timing!"),
    (200, "Great job! Very close to the target."),
    (500, "Good effort! Try to get closer to 10 seconds."),
    (1000, "Not bad! Keep practicing to improve your timing."),
]
FALLBACK_FEEDBACK = "Keep trying! Focus on counting to 10 seconds."


def feedback_message(deviation: float) -> str:
    for upper_bound, message in FEEDBACK_TIERS:
        if deviation <= upper_bound:
            return message
    return FALLBACK_FEEDBACK


@dataclass
class GameStart:
    session_id: str
    start_time: int
    message: str = START_MESSAGE


@dataclass
class GameResult:
    session_id: str
    start_time: int
    end_time: int
    actual_duration: int
    deviation: float
    message: str
    target_duration: int = TARGET_DURATION_MS


@dataclass
class UserStats:
    total_games: int
    completed_games: int
    average_deviation: float
    best_deviation: float
    recent_sessions: List[GameSession]


def _most_recent(sessions: List[GameSession]) -> Optional[GameSession]:
    if not sessions:
        return None
    return max(sessions, key=lambda s: s.start_time)


class GameService:
    def __init__(self, store: InMemoryStore, clock: Callable[[], int] = current_timestamp_ms):
        self.store = store
        self.clock = clock

    def _require_user(self, user_id: str) -> User:
        user = self.store.get_user_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def _expire(self, session: GameSession) -> GameSession:
        logger.info("Session %s for user %s expired", session.id, session.user_id)
        return self.store.update_game_session(
            session.id,
            is_completed=True,
            end_time=session.start_time + SESSION_TIMEOUT_MS,
            deviation=SESSION_TIMEOUT_MS,
        )

    def start_game(self, user_id: str) -> GameStart:
        self._require_user(user_id)

        now = self.clock()
        for session in self.store.get_active_user_sessions(user_id):
            if is_session_expired(session.start_time, now):
                self._expire(session)

        # No lock here: concurrent starts for one user may each create a session.
        session = self.store.create_game_session(user_id, now)
        logger.info("User %s started session %s", user_id, session.id)
        return GameStart(session_id=session.id, start_time=session.start_time)

    def stop_game(self, user_id: str, session_id: Optional[str] = None) -> GameResult:
        self._require_user(user_id)

        with self.store.transaction():
            if session_id:
                session = self._owned_session(user_id, session_id)
            else:
                session = _most_recent(self.store.get_active_user_sessions(user_id))
                if session is None:
                    raise InvalidStateError("No active game session found. Please start a game first.")

            if session.is_completed:
                raise InvalidStateError("Game session already completed")

            end_time = self.clock()
            if is_session_expired(session.start_time, end_time):
                self._expire(session)
                raise SessionExpiredError("Game session expired. Please start a new game.")

            actual_duration = end_time - session.start_time
            deviation = calculate_deviation(actual_duration, TARGET_DURATION_MS)
            self.store.update_game_session(
                session.id, end_time=end_time, deviation=deviation, is_completed=True
            )

        logger.info("User %s stopped session %s off by %s", user_id, session.id, format_time(deviation))
        return GameResult(
            session_id=session.id,
            start_time=session.start_time,
            end_time=end_time,
            actual_duration=actual_duration,
            deviation=deviation,
            message=feedback_message(deviation),
        )

    def _owned_session(self, user_id: str, session_id: str) -> GameSession:
        session = self.store.get_game_session_by_id(session_id)
        if session is None:
            raise NotFoundError("Game session not found")
        if session.user_id != user_id:
            raise ForbiddenError("Unauthorized: Session does not belong to user")
        return session

    def get_user_stats(self, user_id: str) -> UserStats:
        self._require_user(user_id)

        sessions = self.store.get_user_sessions(user_id)
        completed = [s for s in sessions if s.is_completed]
        # Timed-out sessions carry a pinned deviation and are left out of scoring
        deviations = [
            s.deviation for s in completed if is_number(s.deviation) and s.deviation < SESSION_TIMEOUT_MS
        ]

        return UserStats(
            total_games=len(sessions),
            completed_games=len(completed),
            average_deviation=round2(calculate_average(deviations)),
            best_deviation=round2(get_minimum(deviations)),
            recent_sessions=list(reversed(sessions[-10:])),
        )

    def get_active_session(self, user_id: str) -> Optional[GameSession]:
        self._require_user(user_id)
        return _most_recent(self.store.get_active_user_sessions(user_id))

    def get_session_details(self, user_id: str, session_id: str) -> GameSession:
        self._require_user(user_id)
        return self._owned_session(user_id, session_id)

    def cleanup_expired_sessions(self) -> int:
        now = self.clock()
        cleaned = 0
        with self.store.transaction():
            for session in self.store.get_all_sessions():
                if not session.is_completed and is_session_expired(session.start_time, now):
                    self._expire(session)
                    cleaned += 1
        logger.info("Cleaned up %d expired sessions", cleaned)
        return cleaned
