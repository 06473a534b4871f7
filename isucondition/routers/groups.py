from fastapi import APIRouter

from . import auth, conditions, initialize, isu, trend

API_ROUTERS: tuple[APIRouter, ...] = (
    auth.router,
    isu.router,
    conditions.router,
    trend.router,
)

ADMIN_ROUTERS: tuple[APIRouter, ...] = (initialize.router,)

ALL_ROUTERS: tuple[APIRouter, ...] = API_ROUTERS + ADMIN_ROUTERS

__all__ = ["API_ROUTERS", "ADMIN_ROUTERS", "ALL_ROUTERS"]
