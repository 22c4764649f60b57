import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./carecycle.db")

# "development", "production" or "test"
ENVIRONMENT = os.getenv("ENVIRONMENT", "development").lower()
IS_PRODUCTION = ENVIRONMENT == "production"
IS_DEVELOPMENT = ENVIRONMENT == "development"

# Timezone used to decide what "today" is for due dates
APP_TIMEZONE = os.getenv("APP_TIMEZONE", "UTC")

# Bearer token required on /api routes when set
API_TOKEN = os.getenv("API_TOKEN")
if IS_PRODUCTION and not API_TOKEN:
    import warnings

    warnings.warn(
        "API_TOKEN not set in production! All API routes are unauthenticated",
        RuntimeWarning,
        stacklevel=2,
    )

ALLOWED_ORIGINS = os.getenv(
    "ALLOWED_ORIGINS",
    "http://localhost:3000,http://localhost:5173",
).split(",")

# Redis (dashboard cache and change notifications). Optional - everything fails open.
REDIS_URL = os.getenv("REDIS_URL")
REDIS_HOST = os.getenv("REDIS_HOST", "localhost")
REDIS_PORT = int(os.getenv("REDIS_PORT", "6379"))
REDIS_PASSWORD = os.getenv("REDIS_PASSWORD")
REDIS_DB = int(os.getenv("REDIS_DB", "0"))
CACHE_ENABLED = os.getenv("CACHE_ENABLED", "true").lower() == "true"
DASHBOARD_CACHE_TTL = int(os.getenv("DASHBOARD_CACHE_TTL", "60"))  # seconds

# Insert the default items and care items on startup
SEED_DEFAULT_DATA = os.getenv("SEED_DEFAULT_DATA", "true").lower() == "true"

SECURITY_HEADERS_ENABLED = os.getenv("SECURITY_HEADERS_ENABLED", "true").lower() == "true"
