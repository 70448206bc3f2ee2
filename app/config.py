import os

from dotenv import load_dotenv

load_dotenv()

TARGET_DURATION_MS = 10000
SESSION_TIMEOUT_MS = 30 * 60 * 1000
ACCEPTABLE_DEVIATION_MS = 500


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
    SECRET_KEY = os.getenv("SECRET_KEY") or "your-secret-key-change-in-production"
    ALGORITHM = os.getenv("ALGORITHM") or "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "1440"))
    BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))
    ALLOWED_ORIGINS = [
        origin.strip()
        for origin in os.getenv("ALLOWED_ORIGINS", "http://localhost:3000").split(",")
        if origin.strip()
    ]
    # Rate limits use the `limits` string syntax
    RATE_LIMIT_ENABLED = _as_bool(os.getenv("RATE_LIMIT_ENABLED", "true"))
    RATE_LIMIT_DEFAULT = os.getenv("RATE_LIMIT_DEFAULT", "100 per 15 minutes")
    RATE_LIMIT_AUTH = os.getenv("RATE_LIMIT_AUTH", "10 per 15 minutes")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()
