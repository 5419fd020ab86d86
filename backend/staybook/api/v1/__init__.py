"""Versioned API router."""

from fastapi import APIRouter

from . import availability, health, room_types

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(availability.router, tags=["availability"])
router.include_router(room_types.router, tags=["room-types"])

__all__ = ["router"]
