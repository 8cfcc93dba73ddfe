from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import logging
import os

from .storage import IniSettingsStore

ENV_PREFIX = "ICONGRID_"
LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def load_dotenv(path: Path, prefix: str = ENV_PREFIX) -> list[str]:
    """Export ``prefix``-ed variables from a .env file; the real environment wins."""
    if not path.exists():
        return []
    loaded: list[str] = []
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if line.startswith("export "):
            line = line[len("export "):].lstrip()
        key, sep, value = line.partition("=")
        key = key.strip()
        if not sep or not key.startswith(prefix) or key in os.environ:
            continue
        os.environ[key] = value.strip().strip('"').strip("'")
        loaded.append(key)
    if loaded:
        logging.debug("Loaded %s from %s", ", ".join(loaded), path)
    return loaded


@dataclass(frozen=True)
class IconGridConfig:
    strict_bounds: bool
    settings_path: Path
    settings_group: str
    log_level: str

    @classmethod
    def from_env(cls, dotenv_path: Path = Path(".env")) -> "IconGridConfig":
        load_dotenv(dotenv_path)
        strict_bounds = (
            os.getenv("ICONGRID_STRICT_BOUNDS", "0").strip().lower() in {"1", "true", "yes"}
        )
        settings_path = Path(
            os.getenv("ICONGRID_SETTINGS_PATH", "settings.ini").strip() or "settings.ini"
        )
        settings_group = os.getenv("ICONGRID_SETTINGS_GROUP", "icons").strip()
        if not settings_group:
            raise RuntimeError("ICONGRID_SETTINGS_GROUP must not be empty")
        log_level = os.getenv("ICONGRID_LOG_LEVEL", "INFO").strip().upper() or "INFO"
        if log_level not in LOG_LEVELS:
            raise RuntimeError(f"ICONGRID_LOG_LEVEL must be one of {sorted(LOG_LEVELS)}")
        return cls(
            strict_bounds=strict_bounds,
            settings_path=settings_path,
            settings_group=settings_group,
            log_level=log_level,
        )

    def configure_logging(self) -> None:
        logging.basicConfig(
            level=getattr(logging, self.log_level),
            format="%(asctime)s %(levelname)s %(message)s",
        )

    def grid_options(self) -> dict[str, bool]:
        return {"strict_bounds": self.strict_bounds}

    def open_store(self) -> IniSettingsStore:
        return IniSettingsStore(self.settings_path)
