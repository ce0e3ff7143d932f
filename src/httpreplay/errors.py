# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers."""

from __future__ import annotations

import socket
from enum import Enum

import httpx


class ErrorCategory(str, Enum):
    TIMEOUT = "TIMEOUT"
    DNS_ERROR = "DNS_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    PROTOCOL_ERROR = "PROTOCOL_ERROR"
    INVALID_REQUEST = "INVALID_REQUEST"
    READ_ERROR = "READ_ERROR"
    IO_ERROR = "IO_ERROR"
    PARSE_ERROR = "PARSE_ERROR"


class ReplayError(Exception):
    """Base class for every failure that ends a replay run."""

    category: ErrorCategory = ErrorCategory.IO_ERROR

    def __init__(self, message: str, *, category: ErrorCategory | None = None):
        super().__init__(message)
        if category is not None:
            self.category = category


class FileReadError(ReplayError):
    """The request file could not be opened, read or decoded."""


class MalformedRequestLineError(ReplayError):
    """The first line of the request file is not ``<METHOD> <URL>``."""

    category = ErrorCategory.PARSE_ERROR


class RequestConstructionError(ReplayError):
    """Method, URL or headers cannot form a valid outbound request."""

    category = ErrorCategory.INVALID_REQUEST


class NetworkError(ReplayError):
    """Transport failure while sending the request."""

    category = ErrorCategory.CONNECTION_ERROR


class ResponseReadError(ReplayError):
    """The response body stream could not be fully read."""

    category = ErrorCategory.READ_ERROR


class FileWriteError(ReplayError):
    """A report file could not be created or written."""


def _caused_by_dns_failure(exc: BaseException) -> bool:
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        if isinstance(current, (socket.gaierror, socket.herror)):
            return True
        seen.add(id(current))
        current = current.__cause__ or current.__context__
    return False


def translate_transport_error(exc: Exception) -> ReplayError:
    """
    Map httpx exceptions raised while building or sending a request to ReplayError.

    The caller is expected to ``raise ... from exc`` so the original stays attached.
    """
    message = str(exc) or type(exc).__name__

    if isinstance(exc, (httpx.InvalidURL, httpx.UnsupportedProtocol, httpx.LocalProtocolError)):
        return RequestConstructionError(message)

    if isinstance(exc, httpx.TimeoutException):
        return NetworkError(message, category=ErrorCategory.TIMEOUT)

    if isinstance(exc, (httpx.RemoteProtocolError, httpx.TooManyRedirects)):
        return NetworkError(message, category=ErrorCategory.PROTOCOL_ERROR)

    if isinstance(exc, httpx.ConnectError) and _caused_by_dns_failure(exc):
        return NetworkError(message, category=ErrorCategory.DNS_ERROR)

    if isinstance(exc, (ValueError, TypeError)):
        return RequestConstructionError(message)

    return NetworkError(message)


__all__ = [
    "ErrorCategory",
    "FileReadError",
    "FileWriteError",
    "MalformedRequestLineError",
    "NetworkError",
    "ReplayError",
    "RequestConstructionError",
    "ResponseReadError",
    "translate_transport_error",
]
