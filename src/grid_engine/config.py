"""Engine configuration and tunables."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Mapping, Optional

ENV_PREFIX = "GRID_ENGINE_"

_ENV_KEYS = {
    "merge_window_ms": "MERGE_WINDOW_MS",
    "checkpoint_interval": "CHECKPOINT_INTERVAL",
    "max_history_size": "MAX_HISTORY",
    "default_rows": "DEFAULT_ROWS",
    "default_cols": "DEFAULT_COLS",
}


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """History and grid sizing knobs shared by a session."""

    merge_window_ms: int = 500
    checkpoint_interval: int = 10
    max_history_size: int = 50
    default_rows: int = 15
    default_cols: int = 10

    def __post_init__(self) -> None:
        if self.merge_window_ms < 0:
            raise ValueError("merge_window_ms cannot be negative")
        for name in ("checkpoint_interval", "max_history_size"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")
        for name in ("default_rows", "default_cols"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be at least 1")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EngineConfig":
        """Build a config from ``GRID_ENGINE_*`` variables.

        Unparseable values are ignored and the dataclass default is kept.
        """

        env = os.environ if environ is None else environ
        overrides: dict[str, int] = {}
        for field_info in fields(cls):
            raw = env.get(f"{ENV_PREFIX}{_ENV_KEYS[field_info.name]}")
            if raw is None:
                continue
            try:
                overrides[field_info.name] = int(raw)
            except ValueError:
                continue
        return cls(**overrides)


DEFAULT_CONFIG = EngineConfig()

__all__ = ["EngineConfig", "DEFAULT_CONFIG", "ENV_PREFIX"]
