"""Environment configuration for the league backend."""

import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

DEFAULT_K_FACTOR = float(os.getenv("DEFAULT_K_FACTOR", "0.5"))
DEFAULT_CHANGE_CAP = float(os.getenv("DEFAULT_CHANGE_CAP", "2.0"))

# League handicaps are expressed against the home course slope.
HANDICAP_BASE_SLOPE = float(os.getenv("HANDICAP_BASE_SLOPE", "110"))

DB_POOL_MIN = int(os.getenv("DB_POOL_MIN", "2"))
DB_POOL_MAX = int(os.getenv("DB_POOL_MAX", "10"))


def database_dsn() -> Optional[str]:
    """DATABASE_URL if set, otherwise None so the pool falls back to PG* variables."""
    return os.environ.get("DATABASE_URL")


def connection_kwargs() -> dict:
    """Host-style connection settings used when no DSN is configured."""
    return {
        "host": os.getenv("PGHOST", "localhost"),
        "port": int(os.getenv("PGPORT", "5432")),
        "database": os.getenv("PGDATABASE", "golf_league"),
        "user": os.getenv("PGUSER", "postgres"),
        "password": os.getenv("PGPASSWORD", ""),
    }
