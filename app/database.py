"""In-memory storage for users and game sessions.

The store is a plain keyed map with secondary indexes. Each public method is
atomic with respect to the others; sequences of calls are not, unless the
caller holds `transaction()`.
"""
import dataclasses
import logging
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from fastapi import Request

from app.models import GameSession, LeaderboardEntry, User
from app.utils import calculate_average, generate_id, get_minimum, is_number, round2

logger = logging.getLogger(__name__)


class InMemoryStore:
    def __init__(self):
        self._lock = threading.RLock()
        self._users: Dict[str, User] = {}
        self._users_by_username: Dict[str, User] = {}
        self._game_sessions: Dict[str, GameSession] = {}
        self._user_sessions: Dict[str, List[str]] = {}

    @contextmanager
    def transaction(self) -> Iterator["InMemoryStore"]:
        with self._lock:
            yield self

    # Users

    def create_user(self, username: str, password_hash: str) -> User:
        with self._lock:
            if username in self._users_by_username:
                raise ValueError(f"username {username!r} already exists")
            user = User(id=generate_id(), username=username, password_hash=password_hash)
            self._users[user.id] = user
            self._users_by_username[username] = user
            return user

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        return self._users_by_username.get(username)

    def get_all_users(self) -> List[User]:
        with self._lock:
            return list(self._users.values())

    # Game sessions

    def create_game_session(self, user_id: str, start_time: int) -> GameSession:
        with self._lock:
            session = GameSession(id=generate_id(), user_id=user_id, start_time=start_time)
            self._game_sessions[session.id] = session
            self._user_sessions.setdefault(user_id, []).append(session.id)
            return session

    def get_game_session_by_id(self, session_id: str) -> Optional[GameSession]:
        return self._game_sessions.get(session_id)

    def update_game_session(self, session_id: str, **updates) -> Optional[GameSession]:
        with self._lock:
            session = self._game_sessions.get(session_id)
            if session is None:
                return None
            updated = dataclasses.replace(session, **updates)
            self._game_sessions[session_id] = updated
            return updated

    def get_user_sessions(self, user_id: str) -> List[GameSession]:
        with self._lock:
            session_ids = self._user_sessions.get(user_id, [])
            return [self._game_sessions[sid] for sid in session_ids if sid in self._game_sessions]

    def get_active_user_sessions(self, user_id: str) -> List[GameSession]:
        return [s for s in self.get_user_sessions(user_id) if not s.is_completed]

    def get_completed_user_sessions(self, user_id: str) -> List[GameSession]:
        return [s for s in self.get_user_sessions(user_id) if s.is_completed]

    def get_all_sessions(self) -> List[GameSession]:
        with self._lock:
            return list(self._game_sessions.values())

    # Leaderboard

    def generate_leaderboard(self, limit: int = 10) -> List[LeaderboardEntry]:
        """Rank users by average deviation, lowest first.

        Only users with at least one completed, numeric deviation appear.
        Python's sort is stable, so ties keep registration order.
        """
        leaderboard = []
        with self._lock:
            for user in self._users.values():
                completed = self.get_completed_user_sessions(user.id)
                if not completed:
                    continue
                deviations = [s.deviation for s in completed if is_number(s.deviation)]
                if not deviations:
                    continue
                leaderboard.append(
                    LeaderboardEntry(
                        user_id=user.id,
                        username=user.username,
                        total_games=len(completed),
                        average_deviation=round2(calculate_average(deviations)),
                        best_deviation=round2(get_minimum(deviations)),
                    )
                )

        leaderboard.sort(key=lambda entry: entry.average_deviation)
        return leaderboard[:limit]

    # Counters

    def get_total_users(self) -> int:
        return len(self._users)

    def get_total_sessions(self) -> int:
        return len(self._game_sessions)

    def get_total_completed_sessions(self) -> int:
        return sum(1 for s in self.get_all_sessions() if s.is_completed)

    def clear_all_data(self) -> None:
        with self._lock:
            self._users.clear()
            self._users_by_username.clear()
            self._game_sessions.clear()
            self._user_sessions.clear()
        logger.debug("store cleared")


def get_db(request: Request) -> InMemoryStore:
    return request.app.state.store
