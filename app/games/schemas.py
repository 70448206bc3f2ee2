from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel
from pydantic.config import ConfigDict


class GameSessionOut(BaseModel):
    id: str
    user_id: str
    start_time: int
    end_time: Optional[int] = None
    deviation: Optional[float] = None
    is_completed: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class GameStartResponse(BaseModel):
    session_id: str
    start_time: int
    message: str

    model_config = ConfigDict(from_attributes=True)


class GameStopRequest(BaseModel):
    session_id: Optional[str] = None


class GameStopResponse(BaseModel):
    session_id: str
    start_time: int
    end_time: int
    actual_duration: int
    target_duration: int
    deviation: float
    message: str

    model_config = ConfigDict(from_attributes=True)


class UserStatsResponse(BaseModel):
    total_games: int
    completed_games: int
    average_deviation: float
    best_deviation: float
    recent_sessions: List[GameSessionOut]

    model_config = ConfigDict(from_attributes=True)


class CleanupResponse(BaseModel):
    message: str
    cleaned_count: int
