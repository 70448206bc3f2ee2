from fastapi import APIRouter, Depends, Query

from app.database import InMemoryStore, get_db
from app.leaderboard import schemas
from app.leaderboard.service import LeaderboardService

router = APIRouter()


def get_leaderboard_service(db: InMemoryStore = Depends(get_db)) -> LeaderboardService:
    return LeaderboardService(db)


@router.get("/", response_model=schemas.LeaderboardResponse, summary="Top players by average deviation")
async def get_leaderboard(
    limit: int = Query(10, ge=1, le=100),
    service: LeaderboardService = Depends(get_leaderboard_service),
):
    return service.get_leaderboard(limit)


@router.get("/stats", response_model=schemas.LeaderboardStatsResponse)
async def get_leaderboard_stats(service: LeaderboardService = Depends(get_leaderboard_service)):
    return service.get_leaderboard_stats()


@router.get("/top-performers", response_model=schemas.TopPerformersResponse)
async def get_top_performers(service: LeaderboardService = Depends(get_leaderboard_service)):
    return service.get_top_performers()


@router.get("/user/{user_id}", response_model=schemas.UserPositionResponse)
async def get_user_position(user_id: str, service: LeaderboardService = Depends(get_leaderboard_service)):
    return service.get_user_position(user_id)


@router.get("/user/{user_id}/around", response_model=schemas.LeaderboardAroundUserResponse)
async def get_leaderboard_around_user(
    user_id: str,
    range_: int = Query(5, ge=1, le=50, alias="range"),
    service: LeaderboardService = Depends(get_leaderboard_service),
):
    return service.get_leaderboard_around_user(user_id, range_)


@router.get("/user/{user_id}/percentile", response_model=schemas.PercentileResponse)
async def get_user_percentile(user_id: str, service: LeaderboardService = Depends(get_leaderboard_service)):
    return {"user_id": user_id, "percentile": service.get_user_percentile(user_id)}
