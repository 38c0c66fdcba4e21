"""
Runtime settings read from environment variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from .rules import DEFAULT_PREVIEW_ROWS, DEFAULT_TOP_N


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


@dataclass(frozen=True)
class Settings:
    """
    Source location and presentation sizes.
    """

    source_path: str = "ventas_raw.csv"
    top_n: int = DEFAULT_TOP_N
    preview_rows: int = DEFAULT_PREVIEW_ROWS
    log_level: str = "INFO"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Return cached settings from environment variables.
    """

    return Settings(
        source_path=_get_str_env("SALESBOARD_SOURCE_PATH", "ventas_raw.csv"),
        top_n=max(0, _get_int_env("SALESBOARD_TOP_N", DEFAULT_TOP_N)),
        preview_rows=max(0, _get_int_env("SALESBOARD_PREVIEW_ROWS", DEFAULT_PREVIEW_ROWS)),
        log_level=_get_str_env("LOG_LEVEL", "INFO").upper(),
    )
