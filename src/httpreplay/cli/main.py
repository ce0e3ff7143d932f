# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpreplay CLI."""

from __future__ import annotations

import argparse

from ..config import ReplaySettings, load_settings
from ..errors import ReplayError
from ..http import create_default_http_client
from ..log import setup_logging
from ..runtime import HttpReplay

USAGE = "Usage: httpreplay -source <path> -output <path>"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="httpreplay",
        description="Replay an HTTP request described in a request file and write one report per attempt",
    )
    parser.add_argument("-source", "--source", default="", help="Path to the request file")
    parser.add_argument("-output", "--output", default="", help="Prefix for report file names")
    parser.add_argument("-retry", "--retry", type=int, default=0, help="Number of send+report iterations (0 means 1)")
    parser.add_argument("-sleep", "--sleep", type=int, default=0, help="Seconds to sleep after every iteration")
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-request timeout in seconds (default: wait indefinitely)",
    )
    parser.add_argument(
        "--no-redirects",
        action="store_true",
        help="Return redirect responses instead of following them",
    )
    parser.add_argument(
        "--continue-on-error",
        action="store_true",
        help="Keep iterating after a failed attempt instead of aborting the run",
    )
    parser.add_argument(
        "--unique-names",
        action="store_true",
        help="Never overwrite an existing report; add a numeric suffix instead",
    )
    parser.add_argument(
        "--strict-exit",
        action="store_true",
        help="Exit with status 1 when the run hit an error",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default: HTTPREPLAY_LOG_LEVEL or WARNING)")
    return parser


def _print_error(error: ReplayError) -> None:
    print(error, flush=True)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    if not args.source or not args.output:
        print(USAGE)
        return 0

    settings: ReplaySettings = load_settings()
    if args.timeout is not None:
        settings.timeout = args.timeout if args.timeout > 0 else None
    if args.no_redirects:
        settings.allow_redirects = False
    if args.unique_names:
        settings.unique_names = True

    http_client = create_default_http_client(settings)

    with HttpReplay(http_client=http_client, settings=settings) as replay:
        outcome = replay.run(
            args.source,
            args.output,
            retry=args.retry,
            sleep=args.sleep,
            continue_on_error=args.continue_on_error,
            on_error=_print_error,
        )

    if args.strict_exit and not outcome.ok:
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
