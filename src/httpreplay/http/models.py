# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Request/response data models used across httpreplay."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

import httpx

from ..errors import ResponseReadError

Headers = Mapping[str, str]

# Request files and response bodies are arbitrary bytes. Text is decoded losslessly
# so that encoding it again with the same handler yields the original bytes.
TEXT_ENCODING = "utf-8"
TEXT_ERRORS = "surrogateescape"


def decode_text(raw: bytes) -> str:
    return raw.decode(TEXT_ENCODING, errors=TEXT_ERRORS)


def encode_text(text: str) -> bytes:
    return text.encode(TEXT_ENCODING, errors=TEXT_ERRORS)


@dataclass(frozen=True)
class RequestDescription:
    """Parsed request file: created once per run and reused for every iteration."""

    method: str
    url: str
    headers: Headers = field(default_factory=dict)
    body: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    @property
    def body_bytes(self) -> bytes:
        return encode_text(self.body)

    @property
    def raw_headers(self) -> list[tuple[bytes, bytes]]:
        """Header pairs as the bytes read from the request file."""
        return [(encode_text(name), encode_text(value)) for name, value in self.headers.items()]


class ResponseRecord:
    """
    Single-use view over a streamed transport response.

    The body stream stays open until ``read_body`` drains it or ``close`` is called;
    afterwards the record must not be reused.
    """

    def __init__(self, response: httpx.Response):
        self._response = response
        self._consumed = False

    @property
    def status_code(self) -> int:
        return self._response.status_code

    @property
    def reason(self) -> str:
        return self._response.reason_phrase

    @property
    def status_line(self) -> str:
        """Status code and reason phrase, e.g. ``200 OK``."""
        return f"{self.status_code} {self.reason}".rstrip()

    @property
    def headers(self) -> Headers:
        return dict(self._response.headers)

    @property
    def closed(self) -> bool:
        return self._consumed

    def read_body(self) -> bytes:
        """Drain the whole body stream and close it."""
        if self._consumed:
            raise ResponseReadError("response body has already been consumed")
        content = bytearray()
        try:
            for chunk in self._response.iter_bytes():
                content.extend(chunk)
        except (httpx.HTTPError, httpx.StreamError) as exc:
            raise ResponseReadError(f"failed to read response body: {exc}") from exc
        finally:
            self.close()
        return bytes(content)

    def decode(self, content: bytes) -> str:
        """Text form of the drained body; ``encode_text`` restores the exact bytes."""
        return decode_text(content)

    def close(self) -> None:
        self._consumed = True
        self._response.close()
