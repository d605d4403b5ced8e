"""Application configuration loaded from environment variables."""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path)

# CORS
CORS_ORIGINS: list[str] = [
    o.strip()
    for o in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173").split(",")
    if o.strip()
]

# Logging
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# Rate limiting
RATE_LIMIT_DEFAULT: str = os.getenv("RATE_LIMIT_DEFAULT", "120/minute")

# Conversion
DEFAULT_COORD_SYSTEM: str = os.getenv("DEFAULT_COORD_SYSTEM", "BNG").upper()
CONVERT_MAX_WORKERS: int = int(os.getenv("CONVERT_MAX_WORKERS", "1"))
CONVERT_PARALLEL_THRESHOLD: int = int(os.getenv("CONVERT_PARALLEL_THRESHOLD", "500"))
CONVERT_MAX_BATCH: int = int(os.getenv("CONVERT_MAX_BATCH", "10000"))
