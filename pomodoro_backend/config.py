import os
import logging
from dotenv import load_dotenv

load_dotenv(dotenv_path=".env")

logger = logging.getLogger(__name__)

APP_ENV = os.getenv("APP_ENV", "development")

# Database
DATABASE_URL = os.getenv("DATABASE_URL")
DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "5"))
DB_MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", "10"))
DB_POOL_TIMEOUT = int(os.getenv("DB_POOL_TIMEOUT", "30"))
DB_POOL_RECYCLE = int(os.getenv("DB_POOL_RECYCLE", "3600"))
DB_CREATE_TABLES = os.getenv("DB_CREATE_TABLES", "false").lower() in ("1", "true", "yes")

# Session cookie
_DEFAULT_SESSION_SECRET = "complex_password_at_least_32_characters_long_replace_me"
SESSION_SECRET = os.getenv("SESSION_SECRET", _DEFAULT_SESSION_SECRET)
SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "pomodoro-session")
SESSION_ALGORITHM = os.getenv("SESSION_ALGORITHM", "HS256")

if APP_ENV == "production" and SESSION_SECRET == _DEFAULT_SESSION_SECRET:
    logger.warning(
        "Using the default SESSION_SECRET in production is insecure! "
        "Set a strong secret in the environment."
    )

# CORS
CORS_ALLOW_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",")
    if origin.strip()
]

# Timer defaults (minutes) for lazily created settings
DEFAULT_POMODORO_MINUTES = 25
DEFAULT_BREAK_MINUTES = 5
DEFAULT_LONG_BREAK_MINUTES = 15
DEFAULT_LONG_BREAK_INTERVAL = 4
DEFAULT_NOTIFICATION_SOUND = (
    "https://commondatastorage.googleapis.com/codeskulptor-demos/"
    "riceracer_assets/music/start.ogg"
)
