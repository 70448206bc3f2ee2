from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from app.auth.service import AuthService
from app.database import InMemoryStore, get_db
from app.models import User

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


async def get_current_user(token: Optional[str] = Depends(oauth2_scheme), db: InMemoryStore = Depends(get_db)) -> User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if not token:
        raise credentials_exception
    user = AuthService(db).get_user_from_token(token)
    if user is None:
        raise credentials_exception
    return user


async def validate_user_access(user_id: str, current_user: User = Depends(get_current_user)) -> User:
    """Only the owner may act on /games/{user_id}/... routes."""
    if current_user.id != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied. You can only access your own resources.",
        )
    return current_user
