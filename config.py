"""Application configuration — environment variables and derived constants.

Loads ``BOT_TOKEN``, ``API_ROOT``, ``REQUEST_TIMEOUT``, ``LOG_LEVEL`` and
``LOG_DIR`` from the environment via ``python-dotenv``. All values are
resolved at import time so other modules can ``from config import …``
without repeated lookups.
"""

# ── stdlib ───────────────────────────────────────────────────────────────────
import logging
import os

# ── third-party ──────────────────────────────────────────────────────────────
from dotenv import load_dotenv

# ── core ─────────────────────────────────────────────────────────────────────
from core.logger import BotwireLogger

# ── Environment bootstrap ────────────────────────────────────────────────────
load_dotenv()

DEFAULT_API_ROOT = "https://api.telegram.org"
DEFAULT_TIMEOUT = 10.0

# Problems found while parsing; reported once the logger exists.
_warnings: list[str] = []


# ── Helper functions (private) ───────────────────────────────────────────────


def _parse_timeout(raw: str | None) -> float:
    """Parse a positive number of seconds, falling back to the default."""
    if not raw:
        return DEFAULT_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        _warnings.append(f"REQUEST_TIMEOUT={raw!r} is not a number")
        return DEFAULT_TIMEOUT
    if value <= 0:
        _warnings.append(f"REQUEST_TIMEOUT={raw!r} must be positive")
        return DEFAULT_TIMEOUT
    return value


def _parse_level(raw: str | None) -> int:
    """Map a level name such as ``"debug"`` to its :mod:`logging` constant."""
    if not raw:
        return logging.INFO
    level = logging.getLevelName(raw.strip().upper())
    if not isinstance(level, int):
        _warnings.append(f"LOG_LEVEL={raw!r} is not a logging level")
        return logging.INFO
    return level


# ── Public constants ─────────────────────────────────────────────────────────

BOT_TOKEN: str | None = os.environ.get("BOT_TOKEN")
API_ROOT: str = (os.environ.get("API_ROOT") or DEFAULT_API_ROOT).rstrip("/")
REQUEST_TIMEOUT: float = _parse_timeout(os.environ.get("REQUEST_TIMEOUT"))
LOG_LEVEL: int = _parse_level(os.environ.get("LOG_LEVEL"))
LOG_DIR: str | None = os.environ.get("LOG_DIR") or None


# ── Startup diagnostics ─────────────────────────────────────────────────────

logger = BotwireLogger.get_logger(LOG_LEVEL, LOG_DIR)

for _message in _warnings:
    logger.warning("Invalid configuration value, using default", extra={"detail": _message})

if BOT_TOKEN:
    logger.info("Config loaded — BOT_TOKEN is set", extra={"api_root": API_ROOT})
else:
    logger.warning("Config loaded — BOT_TOKEN is NOT set")
