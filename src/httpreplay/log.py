# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Logging setup for the replay CLI.

Level precedence: the ``--log-level`` flag, then ``HTTPREPLAY_LOG_LEVEL`` (read when
logging is configured, not at import), then WARNING. Log records go to stderr so
they never mix with the error messages the CLI prints on stdout.
"""

from __future__ import annotations

import logging
import os

LOG_LEVEL_ENV = "HTTPREPLAY_LOG_LEVEL"
FALLBACK_LEVEL = logging.WARNING


def resolve_log_level(level: str | None = None) -> int:
    """Map a level name (flag value or env value) to a logging level number."""
    name = level or os.getenv(LOG_LEVEL_ENV) or ""
    value = logging.getLevelName(name.strip().upper())
    return value if isinstance(value, int) else FALLBACK_LEVEL


def setup_logging(level: str | None = None) -> int:
    effective = resolve_log_level(level)
    logging.basicConfig(
        level=effective,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return effective


__all__ = ["resolve_log_level", "setup_logging"]
