"""Database package"""

from pomodoro_backend.db.session import get_db, SessionLocal, engine, init_db

__all__ = ["get_db", "SessionLocal", "engine", "init_db"]
