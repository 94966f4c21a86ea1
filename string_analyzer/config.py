import os
import logging
from dotenv import load_dotenv

load_dotenv()
logger = logging.getLogger(__name__)

# ------------------------------------------------------------------------------
# SERVICE SETTINGS
# ------------------------------------------------------------------------------

SERVICE_NAME = "String Analyzer Service"
VERSION = "1.0.0"
DEFAULT_PORT = 8080


def _int_env(name: str, default: int) -> int:
    """Read an integer variable, falling back to the default on bad input."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"⚠️ {name}={raw!r} is not an integer, using {default}")
        return default


PORT = _int_env("PORT", DEFAULT_PORT)
HOST = os.getenv("HOST", "0.0.0.0")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
RELOAD = os.getenv("RELOAD", "false").lower() == "true"

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "*").split(",")
    if origin.strip()
] or ["*"]
