# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for httpreplay."""

import os
from dataclasses import dataclass

DEFAULT_RETRY = 1
DEFAULT_SLEEP = 0


def _optional_float_env(name: str, default: float | None) -> float | None:
    try:
        value = os.getenv(name)
        if value is None:
            return default
        parsed = float(value)
        return parsed if parsed > 0 else None
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class ReplaySettings:
    """Transport and report defaults."""

    timeout: float | None = None
    allow_redirects: bool = True
    unique_names: bool = False

    @classmethod
    def from_env(cls) -> "ReplaySettings":
        """Create settings from environment variables (evaluated at call time)."""
        return cls(
            timeout=_optional_float_env("HTTPREPLAY_TIMEOUT", cls.timeout),
            allow_redirects=_bool_env("HTTPREPLAY_REDIRECTS", cls.allow_redirects),
            unique_names=_bool_env("HTTPREPLAY_UNIQUE_NAMES", cls.unique_names),
        )


def load_settings() -> ReplaySettings:
    """Load replay settings from environment with sensible defaults."""
    return ReplaySettings.from_env()
