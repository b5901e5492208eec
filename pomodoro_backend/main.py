import logging

# Log configuration (before other imports)
# ruff: noqa: E402
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    force=True
)

from contextlib import asynccontextmanager  # noqa: E402

from fastapi import FastAPI  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402
from pomodoro_backend.api.base import api_router  # noqa: E402
from pomodoro_backend.config import CORS_ALLOW_ORIGINS, DB_CREATE_TABLES  # noqa: E402
from pomodoro_backend.db import init_db  # noqa: E402


@asynccontextmanager
async def lifespan(app: FastAPI):
    if DB_CREATE_TABLES:
        await init_db()
    yield


app = FastAPI(
    title="Pomodoro Backend API",
    description="Backend API for the Pomodoro focus timer and its settings",
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include all API routes
app.include_router(api_router)


@app.get("/")
def read_root():
    return {
        "message": "Pomodoro Backend API",
        "docs": "/docs",
        "version": "1.0.0"
    }
