from fastapi import APIRouter
from pomodoro_backend.api import health
from pomodoro_backend.features.timer.api import router as timer_router

api_router = APIRouter()

# Include all sub-routers
api_router.include_router(health.router)
api_router.include_router(timer_router)
