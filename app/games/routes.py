from typing import Optional

from fastapi import APIRouter, Body, Depends, Request, status

from app.auth.auth_dependencies import get_current_user, validate_user_access
from app.games import schemas
from app.games.service import GameService
from app.models import User

router = APIRouter()


def get_game_service(request: Request) -> GameService:
    return GameService(request.app.state.store, clock=request.app.state.clock)


@router.post("/cleanup", response_model=schemas.CleanupResponse, summary="Complete every expired session")
async def cleanup_expired_sessions(
    service: GameService = Depends(get_game_service),
    current_user: User = Depends(get_current_user),
):
    cleaned = service.cleanup_expired_sessions()
    return {"message": "Expired sessions cleaned up successfully", "cleaned_count": cleaned}


@router.post("/{user_id}/start", response_model=schemas.GameStartResponse, status_code=status.HTTP_201_CREATED)
async def start_game(
    user_id: str,
    service: GameService = Depends(get_game_service),
    current_user: User = Depends(validate_user_access),
):
    return service.start_game(user_id)


@router.post("/{user_id}/stop", response_model=schemas.GameStopResponse)
async def stop_game(
    user_id: str,
    body: Optional[schemas.GameStopRequest] = Body(None),
    service: GameService = Depends(get_game_service),
    current_user: User = Depends(validate_user_access),
):
    session_id = body.session_id if body else None
    return service.stop_game(user_id, session_id)


@router.get("/{user_id}/stats", response_model=schemas.UserStatsResponse, summary="User game statistics")
async def get_user_stats(
    user_id: str,
    service: GameService = Depends(get_game_service),
    current_user: User = Depends(validate_user_access),
):
    return service.get_user_stats(user_id)


@router.get("/{user_id}/active", response_model=Optional[schemas.GameSessionOut])
async def get_active_session(
    user_id: str,
    service: GameService = Depends(get_game_service),
    current_user: User = Depends(validate_user_access),
):
    return service.get_active_session(user_id)


@router.get("/{user_id}/sessions/{session_id}", response_model=schemas.GameSessionOut)
async def get_session_details(
    user_id: str,
    session_id: str,
    service: GameService = Depends(get_game_service),
    current_user: User = Depends(validate_user_access),
):
    return service.get_session_details(user_id, session_id)
