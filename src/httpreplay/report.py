# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Report rendering and writing for replayed exchanges."""

from __future__ import annotations

import logging
import os
import time
from pathlib import Path

from .errors import FileWriteError
from .http.models import RequestDescription, ResponseRecord, encode_text

logger = logging.getLogger(__name__)


def report_filename(output_prefix: str | os.PathLike[str], timestamp: int, status_code: int) -> str:
    """``<prefix>|<unixSeconds>-status:<code>.txt``"""
    return f"{os.fspath(output_prefix)}|{timestamp}-status:{status_code}.txt"


def _unique_path(path: Path) -> Path:
    if not path.exists():
        return path
    stem = str(path)[: -len(".txt")]
    counter = 1
    while True:
        candidate = Path(f"{stem}-{counter}.txt")
        if not candidate.exists():
            return candidate
        counter += 1


def render_report(request: RequestDescription, status_line: str, response_text: str) -> str:
    lines = [
        f"Request Method: {request.method}",
        f"Request URL: {request.url}",
        "",
        "Request Headers:",
    ]
    lines.extend(f"{name}: {value}" for name, value in request.headers.items())
    lines.extend(
        [
            "",
            "Request Body:",
            request.body,
            "",
            f"Response Status: {status_line}",
            "Response Body:",
            response_text,
        ]
    )
    return "\n".join(lines) + "\n"


def write_report(
    output_prefix: str | os.PathLike[str],
    request: RequestDescription,
    response: ResponseRecord,
    *,
    timestamp: int | None = None,
    unique: bool = False,
) -> Path:
    """
    Drain ``response`` and write one report file for the exchange.

    The response body is read before the file is created, so a ResponseReadError leaves
    no partial report behind. The timestamp is taken at write time unless given.
    Without ``unique`` an existing report with the same name is overwritten.
    """
    content = response.read_body()

    if timestamp is None:
        timestamp = int(time.time())
    path = Path(report_filename(output_prefix, timestamp, response.status_code))
    if unique:
        path = _unique_path(path)

    text = render_report(request, response.status_line, response.decode(content))
    payload = encode_text(text)
    try:
        with open(path, "wb") as handle:
            handle.write(payload)
    except OSError as exc:
        raise FileWriteError(f"cannot write report {str(path)!r}: {exc}") from exc

    logger.info("Wrote report %s (%d response bytes)", path, len(content))
    return path


__all__ = ["render_report", "report_filename", "write_report"]
