import os

# Load a local .env (if present) so uvicorn can be started without --env-file.
# Variables already set in the process environment win.
from dotenv import load_dotenv

load_dotenv()


def _as_bool(raw) -> bool:
    return str(raw or "").strip().lower() in {"1", "true", "yes", "on"}


class Settings:
    """Lightweight settings loader using environment variables.

    Values are read once at import time; tests set the environment before
    importing the application.
    """

    SECRET_KEY: str = os.getenv("SECRET_KEY", "change-me-to-a-secure-random-string")

    # Shared staff credential. Prefer ADMIN_PASSWORD_HASH (a passlib hash);
    # ADMIN_PASSWORD is hashed once in memory and never compared in plain text.
    ADMIN_PASSWORD: str = os.getenv("ADMIN_PASSWORD", "")
    ADMIN_PASSWORD_HASH: str = os.getenv("ADMIN_PASSWORD_HASH", "")
    ADMIN_SESSION_TTL_MINUTES: int = int(os.getenv("ADMIN_SESSION_TTL_MINUTES", str(60 * 12)))

    raw_db = os.getenv("DATABASE_URL", "sqlite:///./tableside.db")
    if isinstance(raw_db, str) and raw_db.startswith("DATABASE_URL="):
        # tolerate a duplicated prefix from a malformed .env line
        raw_db = raw_db.split("=", 1)[1]
    DATABASE_URL: str = raw_db

    APP_ENV: str = os.getenv("APP_ENV", os.getenv("ENV", "development")).lower()
    _default_pool_size = 5 if APP_ENV == "development" else 10
    _default_max_overflow = 2 if APP_ENV == "development" else 20
    _default_pool_recycle = 900 if APP_ENV == "development" else 1800

    DB_POOL_SIZE: int = int(os.getenv("DB_POOL_SIZE", str(_default_pool_size)))
    DB_MAX_OVERFLOW: int = int(os.getenv("DB_MAX_OVERFLOW", str(_default_max_overflow)))
    DB_POOL_RECYCLE: int = int(os.getenv("DB_POOL_RECYCLE", str(_default_pool_recycle)))  # seconds

    # Local zone used to decide where "today" starts for analytics
    TIMEZONE: str = os.getenv("TIMEZONE", "UTC")

    # 'forward': received -> preparing -> ready -> served, one step at a time
    # 'free': any known status may be set regardless of the current one
    ORDER_STATUS_POLICY: str = os.getenv("ORDER_STATUS_POLICY", "forward").strip().lower()
    DEFAULT_ESTIMATED_TIME: int = int(os.getenv("DEFAULT_ESTIMATED_TIME", "20"))  # minutes

    CORS_ORIGINS: str = os.getenv(
        "CORS_ORIGINS",
        "http://localhost:5173,http://127.0.0.1:5173,http://localhost:5000"
    )

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    # Log request counters every N hits per route
    REQUEST_LOG_EVERY_N: int = int(os.getenv("REQUEST_LOG_EVERY_N", "100"))
    # Log pool events every N occurrences
    DB_LOG_EVERY_N: int = int(os.getenv("DB_LOG_EVERY_N", "50"))
    REQUEST_LOG_VERBOSE: bool = _as_bool(os.getenv("REQUEST_LOG_VERBOSE", "0"))
    REQUEST_LOG_INCLUDE_PREFIXES: str = os.getenv(
        "REQUEST_LOG_INCLUDE_PREFIXES",
        "/api/orders,/api/admin,/api/analytics"
    )

    @property
    def cors_origins(self):
        return [o.strip() for o in (self.CORS_ORIGINS or "").split(",") if o.strip()]


settings = Settings()
