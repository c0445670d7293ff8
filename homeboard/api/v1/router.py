"""
API v1 Router - combines all route modules
"""
from fastapi import APIRouter

from homeboard.api.v1.endpoints import messages, schedules, users, weeks

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(weeks.router, prefix="/weeks", tags=["Weeks"])
api_router.include_router(schedules.router, prefix="/schedules", tags=["Schedules"])
api_router.include_router(messages.router, prefix="/messages", tags=["Messages"])
