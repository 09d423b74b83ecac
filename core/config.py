import os
import logging
from dataclasses import dataclass
from dotenv import load_dotenv


DEFAULT_API_BASE_URL = "http://localhost:3000/api"


@dataclass(frozen=True)
class Settings:
    api_base_url: str
    api_timeout: float
    search_debounce_ms: int
    log_level: str


def load_settings() -> Settings:
    """Read settings from the environment (and a local .env, if present)."""
    try:
        load_dotenv()
    except Exception:
        pass

    base_url = (os.getenv("HMS_API_BASE_URL") or DEFAULT_API_BASE_URL).strip()
    return Settings(
        api_base_url=base_url.rstrip("/"),
        api_timeout=float(os.getenv("HMS_API_TIMEOUT", "10")),
        search_debounce_ms=int(os.getenv("HMS_SEARCH_DEBOUNCE_MS", "500")),
        log_level=os.getenv("HMS_LOG_LEVEL", "INFO").upper(),
    )


_settings = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def configure_logging(level: str | None = None):
    """Set the root log format once at app bootstrap."""
    level = level or get_settings().log_level
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
