# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""High-level replay facade: parse once, then execute and report in a fixed loop."""

from __future__ import annotations

import logging
import os
import time
from collections.abc import Callable
from contextlib import suppress
from dataclasses import dataclass, field
from pathlib import Path

from .config import DEFAULT_RETRY, DEFAULT_SLEEP, ReplaySettings, load_settings
from .errors import ReplayError
from .http.client import HttpClient, create_default_http_client
from .http.models import RequestDescription
from .parser import parse
from .report import write_report

logger = logging.getLogger(__name__)


def normalize(retry: int, sleep: int) -> tuple[int, int]:
    """Apply defaults: a retry count below 1 means unset, a negative sleep means none."""
    if retry < 1:
        retry = DEFAULT_RETRY
    if sleep < 0:
        sleep = DEFAULT_SLEEP
    return retry, sleep


@dataclass
class ReplayOutcome:
    request: RequestDescription | None = None
    reports: list[Path] = field(default_factory=list)
    errors: list[ReplayError] = field(default_factory=list)
    iterations: int = 0

    @property
    def ok(self) -> bool:
        return not self.errors


class HttpReplay:
    """
    Owns the HTTP client for one or more replay runs.

    By default any failure aborts the run: no further iterations are attempted and
    nothing is written for the failing one. ``continue_on_error`` isolates failures
    per iteration instead.
    """

    def __init__(
        self,
        http_client: HttpClient | None = None,
        settings: ReplaySettings | None = None,
        *,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.time,
    ):
        self.settings = settings or load_settings()
        self.http_client = http_client or create_default_http_client(self.settings)
        self._sleep = sleep
        self._clock = clock

    def run(
        self,
        source: str | os.PathLike[str],
        output: str | os.PathLike[str],
        *,
        retry: int = DEFAULT_RETRY,
        sleep: int = DEFAULT_SLEEP,
        continue_on_error: bool = False,
        unique_names: bool | None = None,
        on_error: Callable[[ReplayError], None] | None = None,
    ) -> ReplayOutcome:
        retry, sleep = normalize(retry, sleep)
        unique = self.settings.unique_names if unique_names is None else unique_names
        outcome = ReplayOutcome()

        try:
            outcome.request = parse(source)
        except ReplayError as exc:
            logger.warning("Aborting before any request: %s", exc)
            self._record_error(outcome, exc, on_error)
            return outcome

        for iteration in range(1, retry + 1):
            outcome.iterations = iteration
            try:
                response = self.http_client.execute(outcome.request, timeout=self.settings.timeout)
                report = write_report(
                    output,
                    outcome.request,
                    response,
                    timestamp=int(self._clock()),
                    unique=unique,
                )
            except ReplayError as exc:
                self._record_error(outcome, exc, on_error)
                if not continue_on_error:
                    logger.warning("Iteration %d/%d failed, aborting: %s", iteration, retry, exc)
                    return outcome
                logger.warning("Iteration %d/%d failed, continuing: %s", iteration, retry, exc)
            else:
                outcome.reports.append(report)
                logger.info("Iteration %d/%d wrote %s", iteration, retry, report)
            if sleep:
                self._sleep(sleep)

        return outcome

    @staticmethod
    def _record_error(
        outcome: ReplayOutcome,
        error: ReplayError,
        on_error: Callable[[ReplayError], None] | None,
    ) -> None:
        outcome.errors.append(error)
        if on_error is not None:
            on_error(error)

    def close(self) -> None:
        with suppress(Exception):
            if hasattr(self.http_client, "close"):
                self.http_client.close()

    def __enter__(self) -> HttpReplay:
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        self.close()
