"""
Runtime settings, read from the environment (and a .env file if present).
"""
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _default_port() -> int:
    return int(os.getenv("INVENTORY_PORT") or os.getenv("PORT") or 3000)


@dataclass
class Settings:
    host: str = field(default_factory=lambda: os.getenv("INVENTORY_HOST", "0.0.0.0"))
    port: int = field(default_factory=_default_port)
    cache_dir: Path = field(default_factory=lambda: Path(os.getenv("INVENTORY_CACHE_DIR", "./cache")))
    reset_on_corrupt: bool = field(default_factory=lambda: _env_bool("INVENTORY_RESET_ON_CORRUPT"))
    log_level: str = field(default_factory=lambda: os.getenv("INVENTORY_LOG_LEVEL", "INFO"))


def load_settings(**overrides) -> Settings:
    """Build Settings from the environment; non-None overrides win."""
    load_dotenv()
    settings = Settings()
    for key, value in overrides.items():
        if value is not None:
            setattr(settings, key, value)
    settings.cache_dir = Path(settings.cache_dir).resolve()
    return settings
