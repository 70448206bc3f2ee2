import logging
from typing import Optional

from app.database import InMemoryStore
from app.utils import round2

logger = logging.getLogger(__name__)

# Large enough to cover every ranked user
FULL_LEADERBOARD_LIMIT = 1000
TOP_PERFORMERS_SIZE = 10


class LeaderboardService:
    """Read-only views derived from the store on every call."""

    def __init__(self, store: InMemoryStore):
        self.store = store

    def _full_leaderboard(self):
        leaderboard = self.store.generate_leaderboard(FULL_LEADERBOARD_LIMIT)
        logger.debug("Built leaderboard with %d ranked users", len(leaderboard))
        return leaderboard

    @staticmethod
    def _index_of(leaderboard, user_id: str) -> Optional[int]:
        for index, entry in enumerate(leaderboard):
            if entry.user_id == user_id:
                return index
        return None

    def get_leaderboard(self, limit: int = 10) -> dict:
        leaderboard = self.store.generate_leaderboard(limit)
        return {"leaderboard": leaderboard, "total_entries": len(leaderboard)}

    def get_user_position(self, user_id: str) -> dict:
        leaderboard = self._full_leaderboard()
        index = self._index_of(leaderboard, user_id)
        if index is None:
            return {"position": 0, "entry": None, "total_users": len(leaderboard)}
        return {"position": index + 1, "entry": leaderboard[index], "total_users": len(leaderboard)}

    def get_leaderboard_around_user(self, user_id: str, range_: int = 5) -> dict:
        leaderboard = self._full_leaderboard()
        index = self._index_of(leaderboard, user_id)
        if index is None:
            return {"leaderboard": [], "user_position": 0, "total_users": len(leaderboard)}

        start = max(0, index - range_)
        end = min(len(leaderboard), index + range_ + 1)
        return {
            "leaderboard": leaderboard[start:end],
            "user_position": index + 1,
            "total_users": len(leaderboard),
        }

    def get_leaderboard_stats(self) -> dict:
        total_users = self.store.get_total_users()
        leaderboard = self._full_leaderboard()

        if not leaderboard:
            return {
                "total_users": total_users,
                "total_games": 0,
                "average_deviation": 0,
                "best_overall_deviation": 0,
                "most_active_user": None,
            }

        # Mean of per-user averages, not of raw sessions
        overall_average = sum(e.average_deviation for e in leaderboard) / len(leaderboard)
        # max() keeps the first entry among equals
        most_active = max(leaderboard, key=lambda e: e.total_games)

        return {
            "total_users": total_users,
            "total_games": sum(e.total_games for e in leaderboard),
            "average_deviation": round2(overall_average),
            "best_overall_deviation": round2(min(e.best_deviation for e in leaderboard)),
            "most_active_user": {"username": most_active.username, "game_count": most_active.total_games},
        }

    def get_top_performers(self) -> dict:
        entries = self._full_leaderboard()
        return {
            "top_by_average": entries[:TOP_PERFORMERS_SIZE],
            "top_by_best": sorted(entries, key=lambda e: e.best_deviation)[:TOP_PERFORMERS_SIZE],
            "top_by_games": sorted(entries, key=lambda e: e.total_games, reverse=True)[:TOP_PERFORMERS_SIZE],
        }

    def get_user_percentile(self, user_id: str) -> float:
        leaderboard = self._full_leaderboard()
        index = self._index_of(leaderboard, user_id)
        if index is None or not leaderboard:
            return 0
        return round2((len(leaderboard) - index) / len(leaderboard) * 100)
