import logging
import time
from datetime import datetime, timezone
from typing import Callable, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from app.auth.routes import router as auth_router
from app.config import ACCEPTABLE_DEVIATION_MS, SESSION_TIMEOUT_MS, TARGET_DURATION_MS, settings
from app.database import InMemoryStore
from app.errors import GameError
from app.games.routes import router as games_router
from app.leaderboard.routes import router as leaderboard_router
from app.limiter import limiter
from app.utils import current_timestamp_ms

logger = logging.getLogger(__name__)


def configure_logging(level: str = settings.LOG_LEVEL) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


async def game_error_handler(request: Request, exc: GameError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


def create_app(store: Optional[InMemoryStore] = None, clock: Optional[Callable[[], int]] = None) -> FastAPI:
    configure_logging()

    app = FastAPI(title="Time It Right 🎯", version="1.0.0")
    app.state.store = store if store is not None else InMemoryStore()
    app.state.clock = clock or current_timestamp_ms
    app.state.started_at = time.monotonic()

    # Rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(GameError, game_error_handler)

    app.include_router(auth_router, prefix="/auth", tags=["Auth"])
    app.include_router(games_router, prefix="/games", tags=["Games"])
    app.include_router(leaderboard_router, prefix="/leaderboard", tags=["Leaderboard"])

    @app.get("/health", tags=["Meta"])
    async def health():
        return {
            "status": "OK",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "uptime": time.monotonic() - app.state.started_at,
            "environment": settings.ENVIRONMENT,
        }

    @app.get("/api", tags=["Meta"])
    async def api_info():
        return {
            "name": "Time It Right Game API",
            "version": app.version,
            "description": "A game timer system where users try to stop a timer exactly at 10 seconds",
            "game_rules": {
                "target_ms": TARGET_DURATION_MS,
                "session_timeout_ms": SESSION_TIMEOUT_MS,
                "acceptable_deviation_ms": ACCEPTABLE_DEVIATION_MS,
                "scoring": "Lower average deviation from 10 seconds is better",
            },
        }

    logger.info("Time It Right API ready (environment=%s)", settings.ENVIRONMENT)
    return app


app = create_app()
