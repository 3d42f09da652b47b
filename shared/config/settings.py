"""
Runtime configuration, read once from the environment (and a local .env file).
"""
import os
import warnings

from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes", "on")


APP_ENV = os.getenv("APP_ENV", "development")
IS_PRODUCTION = APP_ENV == "production"

# --- Database ---
POSTGRES_HOST = os.getenv("POSTGRES_HOST")
if POSTGRES_HOST:
    DB_USER = os.getenv("POSTGRES_USER", "postgres")
    DB_PASSWORD = os.getenv("POSTGRES_PASSWORD", "postgres")
    DB_PORT = os.getenv("POSTGRES_PORT", "5432")
    DB_NAME = os.getenv("POSTGRES_DB", "storefront")
    _default_url = f"postgresql+asyncpg://{DB_USER}:{DB_PASSWORD}@{POSTGRES_HOST}:{DB_PORT}/{DB_NAME}"
else:
    _default_url = "sqlite+aiosqlite:///./storefront.db"

DATABASE_URL = os.getenv("DATABASE_URL", _default_url)
SQL_ECHO = _flag("SQL_ECHO")

# --- Tokens ---
_JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "")
if not _JWT_SECRET_KEY:
    warnings.warn(
        "JWT_SECRET_KEY is not set. Using an insecure development default. "
        "Set this env var in production!",
        stacklevel=2,
    )
    _JWT_SECRET_KEY = "insecure-dev-secret-change-me"

JWT_SECRET_KEY: str = _JWT_SECRET_KEY
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))

# --- Rate limiting ---
RATE_LIMIT_ENABLED = _flag("RATE_LIMIT_ENABLED", "1")
RATE_LIMIT_DEFAULT = os.getenv(
    "RATE_LIMIT_DEFAULT", "100/15 minutes" if IS_PRODUCTION else "1000/15 minutes"
)
AUTH_RATE_LIMIT = os.getenv("AUTH_RATE_LIMIT", "20/minute")

# --- HTTP ---
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# --- Startup ---
SEED_DEMO_DATA = _flag("SEED_DEMO_DATA")
OTLP_ENDPOINT = os.getenv("OTLP_ENDPOINT")
