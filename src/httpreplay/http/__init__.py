# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP client exports."""

from .client import HttpClient, create_default_http_client
from .httpx_client import HttpxClient
from .models import Headers, RequestDescription, ResponseRecord

__all__ = [
    "Headers",
    "HttpClient",
    "HttpxClient",
    "RequestDescription",
    "ResponseRecord",
    "create_default_http_client",
]
