from slowapi import Limiter
from slowapi.util import get_remote_address

from app.config import settings


def auth_rate_limit() -> str:
    # Evaluated per request
    return settings.RATE_LIMIT_AUTH


limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.RATE_LIMIT_DEFAULT],
    enabled=settings.RATE_LIMIT_ENABLED,
)
