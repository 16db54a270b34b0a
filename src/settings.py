"""Runtime settings read from the environment."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    fancy_inventory: bool = False
    log_dir: str = "logs"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            fancy_inventory=env.get("FARM_FANCY_INVENTORY", "").strip().lower() in _TRUTHY,
            log_dir=env.get("FARM_LOG_DIR", "logs"),
            log_level=env.get("FARM_LOG_LEVEL", "INFO").strip().upper(),
        )

    def with_overrides(self, **changes) -> "Settings":
        clean = {k: v for k, v in changes.items() if v is not None}
        return replace(self, **clean)

    @property
    def numeric_log_level(self) -> int:
        level = logging.getLevelName(self.log_level)
        return level if isinstance(level, int) else logging.INFO
