from typing import Annotated, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Request, status

from app.auth import schemas
from app.auth.auth_dependencies import get_current_user, oauth2_scheme
from app.auth.service import AuthService
from app.database import InMemoryStore, get_db
from app.errors import AuthenticationError
from app.limiter import auth_rate_limit, limiter
from app.models import User

router = APIRouter()


def get_auth_service(db: InMemoryStore = Depends(get_db)) -> AuthService:
    return AuthService(db)


@router.post("/register", response_model=schemas.AuthResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(auth_rate_limit)
async def register(request: Request, user: Annotated[
        schemas.UserCredentials,
        Body(
            examples=[
                {
                    "username": "alice",
                    "password": "secret1"
                }
            ],
        ),
    ], service: AuthService = Depends(get_auth_service)):
    return service.register(user.username, user.password)


@router.post("/login", response_model=schemas.AuthResponse)
@limiter.limit(auth_rate_limit)
async def login(request: Request, user: Annotated[
        schemas.UserCredentials,
        Body(
            examples=[
                {
                    "username": "alice",
                    "password": "secret1"
                }
            ],
        ),
    ], service: AuthService = Depends(get_auth_service)):
    return service.login(user.username, user.password)


@router.post("/refresh", response_model=schemas.TokenRefresh)
async def refresh(token: Optional[str] = Depends(oauth2_scheme), service: AuthService = Depends(get_auth_service)):
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="No token provided")
    try:
        new_token = service.refresh_token(token)
    except AuthenticationError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=exc.detail)
    return {"token": new_token}


@router.get("/me", response_model=schemas.UserOut)
async def me(current_user: User = Depends(get_current_user)):
    return {"id": current_user.id, "username": current_user.username}


@router.post("/logout", response_model=schemas.MessageOut)
async def logout(current_user: User = Depends(get_current_user)):
    # Tokens are stateless; the client discards its copy
    return {"message": "Logged out successfully. Please discard your token on the client side."}
