"""Main API router for v1."""
from fastapi import APIRouter

from festgate.api.v1.endpoints import admin, auth, checkin, dashboard, events, food, teams

api_router = APIRouter(prefix="/api/v1")

# Include all endpoint routers
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(events.router, prefix="/events", tags=["Events"])
api_router.include_router(teams.router, prefix="/teams", tags=["Teams"])
api_router.include_router(checkin.router, prefix="/checkin", tags=["Check-in"])
api_router.include_router(food.router, prefix="/food", tags=["Food"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])
api_router.include_router(admin.router, prefix="/admin", tags=["Admin"])
