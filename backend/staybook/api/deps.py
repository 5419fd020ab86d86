"""Common API dependencies."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import date

from fastapi import Depends, Request, Response
from fastapi_limiter import FastAPILimiter
from fastapi_limiter.depends import RateLimiter
from sqlalchemy.ext.asyncio import AsyncSession

from staybook.core import clock
from staybook.core.config import get_settings
from staybook.db.session import get_session

_SECONDS = {
    "second": 1,
    "seconds": 1,
    "minute": 60,
    "minutes": 60,
    "hour": 3600,
    "hours": 3600,
    "day": 86400,
    "days": 86400,
}


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide an async database session."""
    async for session in get_session():
        yield session


def get_today() -> date:
    """Current calendar date; tests override this dependency to pin the clock."""
    return clock.today()


def parse_rate(value: str, *, fallback: tuple[int, int]) -> tuple[int, int]:
    """Turn ``"100/minute"`` into ``(100, 60)``; malformed values use ``fallback``."""
    try:
        count_str, window_str = value.split("/", 1)
        count = int(count_str.strip())
    except ValueError:
        return fallback
    return count, _SECONDS.get(window_str.strip().lower(), fallback[1])


def rate_limited(limit: str | None = None):
    """Rate-limit dependency that is a no-op until the limiter has Redis."""
    times, seconds = parse_rate(
        limit or get_settings().rate_limit_default, fallback=(100, 60)
    )

    async def _dependency(request: Request, response: Response) -> None:
        if FastAPILimiter.redis is None:
            return None
        limiter = RateLimiter(times=times, seconds=seconds)
        await limiter(request, response)

    return Depends(_dependency)
