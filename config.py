# config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

HOSTED_MARKERS = ("RENDER", "SPACE_ID")


def pick_data_dir() -> Path:
    """First writable of $DATA_DIR, /data, ./data; falls back to the cwd."""
    candidates = []
    env = os.getenv("DATA_DIR")
    if env:
        candidates.append(Path(env))
    candidates += [Path("/data"), Path.cwd() / "data"]

    for p in candidates:
        try:
            p.mkdir(parents=True, exist_ok=True)
            t = p / ".rwtest"
            t.write_text("ok")
            t.unlink(missing_ok=True)
            return p
        except OSError:
            continue
    return Path.cwd()


def is_hosted() -> bool:
    return any(m in os.environ for m in HOSTED_MARKERS) or os.getenv("STREAMLIT_RUNTIME") == "cloud"


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment."""

    data_dir: Path
    database_url: str
    default_hourly_rate: float
    default_tax_rate: float
    currency_symbol: str
    log_level: str

    @property
    def uses_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    @classmethod
    def from_env(cls) -> Settings:
        """Load settings from environment variables."""
        load_dotenv()

        data_dir = pick_data_dir()
        default_sqlite = f"sqlite:///{(data_dir / 'shiftmate.db').as_posix()}"
        return cls(
            data_dir=data_dir,
            database_url=os.getenv("DATABASE_URL", default_sqlite),
            default_hourly_rate=float(os.getenv("DEFAULT_HOURLY_RATE", "12")),
            default_tax_rate=float(os.getenv("DEFAULT_TAX_RATE", "10")),
            currency_symbol=os.getenv("CURRENCY_SYMBOL", "€"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings.from_env()
