# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed HttpClient implementation."""

from __future__ import annotations

import logging

import httpx

from ..config import ReplaySettings, load_settings
from ..errors import translate_transport_error
from .client import HttpClient
from .models import RequestDescription, ResponseRecord

logger = logging.getLogger(__name__)


class HttpxClient(HttpClient):
    """Synchronous httpx client wrapper."""

    def __init__(self, settings: ReplaySettings | None = None, client: httpx.Client | None = None):
        self.settings = settings or load_settings()
        self._client = client or httpx.Client(
            follow_redirects=self.settings.allow_redirects,
            timeout=self.settings.timeout,
        )

    def execute(self, request: RequestDescription, timeout: float | None = None) -> ResponseRecord:
        """
        Send one request and return the response with its body stream still open.

        Raises RequestConstructionError or NetworkError; nothing is retried here.
        """
        if timeout is None:
            timeout = self.settings.timeout

        # Each execution starts without cookies from earlier responses.
        self._client.cookies.clear()

        try:
            outbound = self._client.build_request(
                request.method,
                request.url,
                headers=request.raw_headers,
                content=request.body_bytes or None,
                timeout=httpx.Timeout(timeout),
            )
            logger.debug("Sending %s %s", request.method, request.url)
            response = self._client.send(
                outbound,
                stream=True,
                follow_redirects=self.settings.allow_redirects,
            )
        except (httpx.HTTPError, httpx.InvalidURL, ValueError, TypeError) as exc:
            raise translate_transport_error(exc) from exc

        logger.debug("Received %s from %s", response.status_code, request.url)
        return ResponseRecord(response)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> HttpxClient:
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        self.close()
