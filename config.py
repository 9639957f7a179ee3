import logging
import os

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


def _env_int(name, default):
    raw = os.environ.get(name)
    if raw is None or raw == '':
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Invalid integer for {name}={raw!r}, using {default}")
        return default


def _env_float(name, default):
    raw = os.environ.get(name)
    if raw is None or raw == '':
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Invalid number for {name}={raw!r}, using {default}")
        return default


class Config:
    # API keys
    GOOGLE_API_KEY = os.environ.get('GOOGLE_API_KEY')
    YOUTUBE_API_KEY = os.environ.get('YOUTUBE_API_KEY')

    # Gemini
    GEMINI_MODEL = os.environ.get('GEMINI_MODEL', 'gemini-2.5-flash')
    GEMINI_TEMPERATURE = _env_float('GEMINI_TEMPERATURE', 0.8)
    GEMINI_TIMEOUT_MS = _env_int('GEMINI_TIMEOUT_MS', 120000)

    # Transcript + chunking
    TRANSCRIPT_LANGUAGE = os.environ.get('TRANSCRIPT_LANGUAGE', 'en')
    CHUNK_MAX_CHARS = _env_int('CHUNK_MAX_CHARS', 6500)

    # Rate limiting (per client, sliding window)
    RATE_LIMIT_WINDOW_SECONDS = _env_float('RATE_LIMIT_WINDOW_SECONDS', 30.0)
    RATE_LIMIT_MAX_REQUESTS = _env_int('RATE_LIMIT_MAX_REQUESTS', 15)

    # Server
    PORT = _env_int('PORT', 8080)
    CORS_ORIGINS = [
        r"^https?://localhost:\d+$",
        r"^https://.*\.web\.app$",
        r"^https://.*\.firebaseapp\.com$",
    ]
