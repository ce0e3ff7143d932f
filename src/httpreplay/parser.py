# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Request file parser.

A request file looks like::

    POST http://example.com/api
    Content-Type: application/json

    {"hello": "world"}

The first line holds the method and URL, header lines follow until the first blank
line, and everything after it is the body. Parsing is deliberately permissive: the
method, URL and header syntax are never validated so arbitrary text can be replayed.
"""

from __future__ import annotations

import io
import logging
import os
from collections.abc import Iterable, Iterator

from .errors import FileReadError, MalformedRequestLineError
from .http.models import RequestDescription, decode_text

logger = logging.getLogger(__name__)

HEADER_SEPARATOR = ": "


def _strip_terminator(line: str) -> str:
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line


def _iter_lines(handle: Iterable[str]) -> Iterator[str]:
    for line in handle:
        yield _strip_terminator(line)


def _parse_request_line(line: str | None) -> tuple[str, str]:
    if line is None:
        raise MalformedRequestLineError("invalid request line: file is empty")
    parts = line.split(" ", 1)
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise MalformedRequestLineError(f"invalid request line: {line!r}")
    return parts[0], parts[1]


def parse_lines(lines: Iterable[str]) -> RequestDescription:
    """Build a RequestDescription from an iterable of lines (terminators optional)."""
    stream = _iter_lines(lines)
    method, url = _parse_request_line(next(stream, None))

    headers: dict[str, str] = {}
    for line in stream:
        if line == "":
            break
        name, sep, value = line.partition(HEADER_SEPARATOR)
        if not sep:
            logger.debug("Skipping header line without %r separator: %r", HEADER_SEPARATOR, line)
            continue
        headers[name] = value

    body = "\n".join(stream)
    return RequestDescription(method=method, url=url, headers=headers, body=body)


def parse_text(text: str) -> RequestDescription:
    """Parse an in-memory request file."""
    return parse_lines(io.StringIO(text, newline="\n"))


def parse(path: str | os.PathLike[str]) -> RequestDescription:
    """Read and parse a request file from disk."""
    try:
        # Binary iteration splits on "\n" only; a trailing "\r" is dropped per line.
        with open(path, "rb") as handle:
            request = parse_lines(decode_text(raw) for raw in handle)
    except OSError as exc:
        raise FileReadError(f"cannot read request file {os.fspath(path)!r}: {exc}") from exc
    logger.info("Parsed %s %s with %d header(s) from %s", request.method, request.url, len(request.headers), os.fspath(path))
    return request


__all__ = ["parse", "parse_lines", "parse_text"]
