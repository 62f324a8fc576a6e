from __future__ import annotations

import json
import os
from dataclasses import dataclass, fields
from datetime import timedelta
from typing import Optional


DATA_DIR = os.environ.get("CLI_TIMER_HOME") or os.path.join(os.path.expanduser("~"), ".cli_timer")
LOG_DIR = os.path.join(DATA_DIR, "logs")
CONFIG_PATH = os.path.join(DATA_DIR, "config.json")


def ensure_dirs(data_dir: str = DATA_DIR) -> None:
    os.makedirs(data_dir, exist_ok=True)
    os.makedirs(os.path.join(data_dir, "logs"), exist_ok=True)


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass
class AppConfig:
    # Event loop
    tick_rate_ms: int = 250

    # Extra time added on restart so the next tick does not fire early.
    # None means one tick period.
    restart_lead_in_ms: Optional[int] = None

    # Alarm
    fade_in_ms: int = 500

    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if not _is_int(self.tick_rate_ms) or self.tick_rate_ms <= 0:
            raise ValueError(f"tick_rate_ms must be a positive integer, got {self.tick_rate_ms!r}")
        if self.restart_lead_in_ms is not None and (
            not _is_int(self.restart_lead_in_ms) or self.restart_lead_in_ms < 0
        ):
            raise ValueError(f"restart_lead_in_ms must be null or >= 0, got {self.restart_lead_in_ms!r}")
        if not _is_int(self.fade_in_ms) or self.fade_in_ms < 0:
            raise ValueError(f"fade_in_ms must be an integer >= 0, got {self.fade_in_ms!r}")
        if not isinstance(self.log_level, str):
            raise ValueError(f"log_level must be a string, got {self.log_level!r}")

    @property
    def tick_period(self) -> timedelta:
        return timedelta(milliseconds=self.tick_rate_ms)

    @property
    def restart_lead_in(self) -> timedelta:
        if self.restart_lead_in_ms is None:
            return self.tick_period
        return timedelta(milliseconds=self.restart_lead_in_ms)

    @staticmethod
    def load(path: str = CONFIG_PATH) -> "AppConfig":
        """
        Reads the config file if there is one; the file is never created.
        Raises ValueError for a file that is not a JSON object of valid settings.
        """
        if not os.path.exists(path):
            return AppConfig()
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
        if not isinstance(raw, dict):
            raise ValueError("config must be a JSON object")
        known = {f.name for f in fields(AppConfig)}
        return AppConfig(**{k: v for k, v in raw.items() if k in known})
