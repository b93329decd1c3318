import os

from src.config.config import config

SESSION_TTL_SECONDS = config.getint("Sessions", "ttl_seconds", fallback=3600)
API_HOST = os.getenv("API_HOST", "127.0.0.1")
API_PORT = int(os.getenv("API_PORT", "8000"))
