import math
import re
import secrets
import time
from typing import List

from app.config import SESSION_TIMEOUT_MS

USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_]{3,20}$")


def generate_id() -> str:
    """Random 128-bit identifier, hex encoded."""
    return secrets.token_hex(16)


def current_timestamp_ms() -> int:
    return int(time.time() * 1000)


def calculate_deviation(actual_duration: int, target_duration: int) -> int:
    return abs(actual_duration - target_duration)


def is_session_expired(start_time: int, now: int, timeout_ms: int = SESSION_TIMEOUT_MS) -> bool:
    return (now - start_time) > timeout_ms


def round2(value: float) -> float:
    """Round half up to two decimals."""
    return math.floor(value * 100 + 0.5) / 100


def is_valid_username(username: str) -> bool:
    return bool(USERNAME_PATTERN.match(username or ""))


def is_valid_password(password: str) -> bool:
    return len(password or "") >= 6


def is_number(value) -> bool:
    return value is not None and not math.isnan(value)


def calculate_average(numbers: List[float]) -> float:
    if not numbers:
        return 0
    return sum(numbers) / len(numbers)


def get_minimum(numbers: List[float]) -> float:
    if not numbers:
        return 0
    return min(numbers)


def format_time(ms: float) -> str:
    if ms < 1000:
        return f"{ms}ms"
    return f"{ms / 1000:.2f}s"
