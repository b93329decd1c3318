import os

from src.config.config import config

ADVISORY_API_KEY = os.getenv("ADVISORY_API_KEY") or None
ADVISORY_URL = config.get(
    "Advisory", "url", fallback="https://ai.gateway.lovable.dev/v1/chat/completions"
)
ADVISORY_MODEL = config.get("Advisory", "model", fallback="google/gemini-3-flash-preview")
ADVISORY_TIMEOUT = config.getfloat("Advisory", "timeout_seconds", fallback=60.0)
