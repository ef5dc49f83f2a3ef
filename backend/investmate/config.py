"""Application configuration."""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent
DB_PATH = BASE_DIR / "data" / "investmate.db"
DATABASE_URL = os.getenv("DATABASE_URL") or f"sqlite+aiosqlite:///{DB_PATH}"

# Display precision shared by every currency/quantity text field
FRACTION_DIGITS = 2

# Calculator session settings (in-memory)
SESSION_TTL = int(os.getenv("SESSION_TTL", "1800"))  # seconds of inactivity
SESSION_PURGE_INTERVAL = int(os.getenv("SESSION_PURGE_INTERVAL", "300"))  # seconds

# Ensure data directory exists (only needed for local SQLite, skip if DATABASE_URL is overridden)
if not os.getenv("DATABASE_URL"):
    DB_PATH.parent.mkdir(parents=True, exist_ok=True)
