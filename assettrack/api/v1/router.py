"""
Aggregates all v1 API routers into a single APIRouter.
"""
from __future__ import annotations

from fastapi import APIRouter

from assettrack.api.v1 import activity_logs, dashboard, owners, properties

api_router = APIRouter()

api_router.include_router(owners.router)
api_router.include_router(properties.router)
api_router.include_router(activity_logs.router)
api_router.include_router(dashboard.router)
