import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.config import settings
from app.database import InMemoryStore
from app.errors import AuthenticationError, ConflictError, ValidationError
from app.models import User
from app.utils import is_valid_password, is_valid_username

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.BCRYPT_ROUNDS)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password, hashed_password):
    return pwd_context.verify(plain_password, hashed_password)


class AuthService:
    def __init__(self, store: InMemoryStore):
        self.store = store

    def register(self, username: str, password: str) -> dict:
        if not is_valid_username(username):
            raise ValidationError(
                "Invalid username format. Username must be 3-20 characters long "
                "and contain only letters, numbers, and underscores."
            )
        if not is_valid_password(password):
            raise ValidationError("Invalid password. Password must be at least 6 characters long.")

        if self.store.get_user_by_username(username):
            raise ConflictError("Username already exists")

        try:
            user = self.store.create_user(username, hash_password(password))
        except ValueError:
            # Lost a race with a concurrent registration of the same name
            raise ConflictError("Username already exists")

        logger.info("Registered user %s (%s)", user.username, user.id)
        return self._auth_response(user)

    def login(self, username: str, password: str) -> dict:
        user = self.store.get_user_by_username(username)
        if not user or not verify_password(password, user.password_hash):
            logger.warning("Failed login for %s", username)
            raise AuthenticationError("Invalid credentials")
        return self._auth_response(user)

    def _auth_response(self, user: User) -> dict:
        return {
            "token": self.generate_token(user),
            "user": {"id": user.id, "username": user.username},
        }

    def generate_token(self, user: User, expires_delta: Optional[timedelta] = None) -> str:
        if expires_delta is None:
            expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        to_encode = {
            "sub": user.id,
            "user_id": user.id,
            "username": user.username,
            "exp": datetime.now(timezone.utc) + expires_delta,
        }
        return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

    def verify_token(self, token: str) -> dict:
        try:
            payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        except JWTError:
            raise AuthenticationError("Invalid or expired token")
        if not payload.get("user_id"):
            raise AuthenticationError("Invalid or expired token")
        return payload

    def get_user_from_token(self, token: str) -> Optional[User]:
        try:
            payload = self.verify_token(token)
        except AuthenticationError:
            return None
        return self.store.get_user_by_id(payload["user_id"])

    def refresh_token(self, token: str) -> str:
        payload = self.verify_token(token)
        user = self.store.get_user_by_id(payload["user_id"])
        if user is None:
            raise AuthenticationError("User not found")
        return self.generate_token(user)
