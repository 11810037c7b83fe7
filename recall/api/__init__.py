"""API router for v1 endpoints."""

from fastapi import APIRouter

from recall.api import brands, competitors, notifications

router = APIRouter()

# Brand scoring, history and comparison
router.include_router(brands.router, tags=["brands"])

# Competitor analysis
router.include_router(competitors.router, tags=["competitors"])

# Score notification preferences and history
router.include_router(notifications.router, tags=["notifications"])
