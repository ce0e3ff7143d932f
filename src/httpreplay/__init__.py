# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
httpreplay package entrypoint.

Replays a single HTTP request described in a plain-text request file and writes one
report file per attempt. The transport sits behind an injectable client interface,
and parsed requests are modeled with typed dataclasses.
"""

from .config import ReplaySettings, load_settings
from .errors import (
    ErrorCategory,
    FileReadError,
    FileWriteError,
    MalformedRequestLineError,
    NetworkError,
    ReplayError,
    RequestConstructionError,
    ResponseReadError,
)
from .http import (
    HttpClient,
    HttpxClient,
    RequestDescription,
    ResponseRecord,
    create_default_http_client,
)
from .log import setup_logging
from .parser import parse, parse_lines, parse_text
from .report import render_report, report_filename, write_report
from .runtime import HttpReplay, ReplayOutcome, normalize
from .version import __version__

__all__ = [
    "ErrorCategory",
    "FileReadError",
    "FileWriteError",
    "HttpClient",
    "HttpReplay",
    "HttpxClient",
    "MalformedRequestLineError",
    "NetworkError",
    "ReplayError",
    "ReplayOutcome",
    "ReplaySettings",
    "RequestConstructionError",
    "RequestDescription",
    "ResponseReadError",
    "ResponseRecord",
    "create_default_http_client",
    "load_settings",
    "normalize",
    "parse",
    "parse_lines",
    "parse_text",
    "render_report",
    "report_filename",
    "setup_logging",
    "write_report",
    "__version__",
]
