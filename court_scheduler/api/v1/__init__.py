"""Versioned API router."""

from fastapi import APIRouter

from . import closures, courts, health, rates, reservations

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(courts.router, prefix="/courts", tags=["courts"])
router.include_router(reservations.router, prefix="/reservations", tags=["reservations"])
router.include_router(closures.router, prefix="/closures", tags=["closures"])
router.include_router(rates.router, prefix="/rates", tags=["rates"])
