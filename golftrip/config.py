import os

# Local SQLite file when DATABASE_URL is not set
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./golf_trip.db")

# "database" (SQLAlchemy) or "memory" (in-process dicts)
STORAGE_BACKEND = os.getenv("GOLFTRIP_STORAGE", "database").strip().lower()

# Empty = dev mode, destructive endpoints are not protected
ADMIN_KEY = os.getenv("ADMIN_KEY", "")

SEED_SAMPLE_DATA = os.getenv("GOLFTRIP_SEED_SAMPLE_DATA", "").strip().lower() in ("1", "true", "yes")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
