# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP client abstraction and factory."""

from typing import Protocol

from ..config import ReplaySettings, load_settings
from .models import RequestDescription, ResponseRecord


class HttpClient(Protocol):
    """Minimal protocol for replaying a parsed request."""

    def execute(self, request: RequestDescription, timeout: float | None = None) -> ResponseRecord: ...

    def close(self) -> None:  # pragma: no cover - optional for test doubles
        ...


def create_default_http_client(settings: ReplaySettings | None = None) -> HttpClient:
    """Factory for the default httpx-backed client."""
    from .httpx_client import HttpxClient

    return HttpxClient(settings or load_settings())
