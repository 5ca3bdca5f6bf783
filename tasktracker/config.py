import os

from dotenv import load_dotenv

load_dotenv()

# No fallback: a missing signing key must stop the app before it serves requests
SECRET_KEY = os.environ.get("SECRET_KEY", "").strip()
if not SECRET_KEY:
    raise RuntimeError("SECRET_KEY environment variable is required")

ALGORITHM = os.environ.get("ALGORITHM", "HS256")
# 7 days
ACCESS_TOKEN_EXPIRE_MINUTES = float(os.environ.get("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 24 * 7))

# Default to local SQLite for dev/tests; override via env in Docker/Prod
DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///./tasktracker.db")

ENVIRONMENT = os.environ.get("ENVIRONMENT", "development")
COOKIE_SECURE = ENVIRONMENT == "production"

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

HOST = os.environ.get("HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", "8000"))
RELOAD = os.environ.get("RELOAD", "false").lower() == "true"
