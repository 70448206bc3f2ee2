from typing import List, Optional

from pydantic import BaseModel
from pydantic.config import ConfigDict


class LeaderboardEntryOut(BaseModel):
    user_id: str
    username: str
    total_games: int
    average_deviation: float
    best_deviation: float

    model_config = ConfigDict(from_attributes=True)


class LeaderboardResponse(BaseModel):
    leaderboard: List[LeaderboardEntryOut]
    total_entries: int


class UserPositionResponse(BaseModel):
    position: int
    entry: Optional[LeaderboardEntryOut] = None
    total_users: int


class LeaderboardAroundUserResponse(BaseModel):
    leaderboard: List[LeaderboardEntryOut]
    user_position: int
    total_users: int


class MostActiveUser(BaseModel):
    username: str
    game_count: int


class LeaderboardStatsResponse(BaseModel):
    total_users: int
    total_games: int
    average_deviation: float
    best_overall_deviation: float
    most_active_user: Optional[MostActiveUser] = None


class TopPerformersResponse(BaseModel):
    top_by_average: List[LeaderboardEntryOut]
    top_by_best: List[LeaderboardEntryOut]
    top_by_games: List[LeaderboardEntryOut]


class PercentileResponse(BaseModel):
    user_id: str
    percentile: float
