# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import itertools

import httpx
import pytest

from httpreplay.cli.main import USAGE, build_parser
from httpreplay.config import ReplaySettings
from httpreplay.errors import FileWriteError, MalformedRequestLineError, NetworkError, RequestConstructionError
from httpreplay.http.models import ResponseRecord
from httpreplay.runtime import HttpReplay, normalize

REQUEST_TEXT = "POST http://example.com/api\nContent-Type: text/plain\n\nping\npong"


def make_record(status_code: int = 200, body: bytes = b"ok") -> ResponseRecord:
    request = httpx.Request("GET", "http://example.com/")
    return ResponseRecord(httpx.Response(status_code, content=body, request=request))


class SequenceHttpClient:
    """Returns fresh responses (or raises) in the scripted order."""

    def __init__(self, outcomes):
        self._outcomes = list(outcomes)
        self.calls = 0
        self.requests = []
        self.closed = False

    def execute(self, request, timeout=None):  # noqa: ARG002
        self.calls += 1
        self.requests.append(request)
        item = self._outcomes[min(self.calls - 1, len(self._outcomes) - 1)]
        if isinstance(item, Exception):
            raise item
        return make_record(*item)

    def close(self):
        self.closed = True


@pytest.fixture
def source(tmp_path):
    path = tmp_path / "request.http"
    path.write_text(REQUEST_TEXT, encoding="utf-8")
    return path


def _replay(client, sleeps=None, settings=None):
    counter = itertools.count(1700000000)
    sleep = sleeps.append if sleeps is not None else (lambda _: None)
    return HttpReplay(http_client=client, settings=settings or ReplaySettings(), sleep=sleep, clock=lambda: next(counter))


def _reports(tmp_path):
    return sorted(p.name for p in tmp_path.iterdir() if p.name.startswith("out|"))


@pytest.mark.parametrize(
    ("retry", "sleep", "expected"),
    [(0, 0, (1, 0)), (1, 0, (1, 0)), (5, 2, (5, 2)), (-3, -1, (1, 0))],
)
def test_normalize_applies_defaults(retry, sleep, expected):
    assert normalize(retry, sleep) == expected


def test_retry_three_writes_three_distinct_reports(source, tmp_path):
    client = SequenceHttpClient([(200, b"a"), (201, b"b"), (200, b"c")])
    outcome = _replay(client).run(source, tmp_path / "out", retry=3, sleep=0)

    assert outcome.ok
    assert outcome.iterations == 3
    assert client.calls == 3
    assert len(outcome.reports) == 3
    assert _reports(tmp_path) == [
        "out|1700000000-status:200.txt",
        "out|1700000001-status:201.txt",
        "out|1700000002-status:200.txt",
    ]


def test_request_is_parsed_once_and_reused(source, tmp_path):
    client = SequenceHttpClient([(200, b"")])
    outcome = _replay(client).run(source, tmp_path / "out", retry=3)
    assert all(req is outcome.request for req in client.requests)
    assert outcome.request.body == "ping\npong"


def test_network_failure_aborts_remaining_iterations(source, tmp_path):
    client = SequenceHttpClient([(200, b"a"), NetworkError("connection refused"), (200, b"c")])
    sleeps = []
    outcome = _replay(client, sleeps).run(source, tmp_path / "out", retry=5, sleep=1)

    assert not outcome.ok
    assert client.calls == 2
    assert outcome.iterations == 2
    assert len(outcome.reports) == 1
    assert len(_reports(tmp_path)) == 1
    assert [str(e) for e in outcome.errors] == ["connection refused"]
    assert sleeps == [1]


def test_continue_on_error_isolates_failed_iteration(source, tmp_path):
    client = SequenceHttpClient(
        [(200, b"a"), RequestConstructionError("bad url"), (200, b"c"), (200, b"d"), (500, b"e")]
    )
    sleeps = []
    outcome = _replay(client, sleeps).run(source, tmp_path / "out", retry=5, sleep=2, continue_on_error=True)

    assert client.calls == 5
    assert len(outcome.reports) == 4
    assert len(outcome.errors) == 1
    assert sleeps == [2, 2, 2, 2, 2]


def test_sleep_follows_every_iteration_including_last(source, tmp_path):
    sleeps = []
    _replay(SequenceHttpClient([(200, b"")]), sleeps).run(source, tmp_path / "out", retry=2, sleep=3)
    assert sleeps == [3, 3]


def test_zero_sleep_never_sleeps(source, tmp_path):
    sleeps = []
    _replay(SequenceHttpClient([(200, b"")]), sleeps).run(source, tmp_path / "out", retry=2, sleep=0)
    assert sleeps == []


def test_parse_failure_performs_no_network_call(tmp_path):
    bad = tmp_path / "bad.http"
    bad.write_text("NOSPACE\n", encoding="utf-8")
    client = SequenceHttpClient([(200, b"")])
    outcome = _replay(client).run(bad, tmp_path / "out", retry=3)

    assert client.calls == 0
    assert outcome.request is None
    assert isinstance(outcome.errors[0], MalformedRequestLineError)


def test_report_write_failure_aborts_run(source, tmp_path):
    client = SequenceHttpClient([(200, b"")])
    outcome = _replay(client).run(source, tmp_path / "missing-dir" / "out", retry=3)

    assert client.calls == 1
    assert isinstance(outcome.errors[0], FileWriteError)


def test_unique_names_setting_prevents_overwrite(source, tmp_path):
    client = SequenceHttpClient([(200, b"")])
    replay = HttpReplay(http_client=client, settings=ReplaySettings(unique_names=True), sleep=lambda _: None, clock=lambda: 42)
    outcome = replay.run(source, tmp_path / "out", retry=3)
    assert len({p.name for p in outcome.reports}) == 3


def test_same_second_reports_overwrite_by_default(source, tmp_path):
    client = SequenceHttpClient([(200, b"")])
    replay = HttpReplay(http_client=client, settings=ReplaySettings(), sleep=lambda _: None, clock=lambda: 42)
    outcome = replay.run(source, tmp_path / "out", retry=3)
    assert len(outcome.reports) == 3
    assert _reports(tmp_path) == ["out|42-status:200.txt"]


def test_replay_exit_closes_client():
    client = SequenceHttpClient([(200, b"")])
    with HttpReplay(http_client=client, settings=ReplaySettings()):
        pass
    assert client.closed is True


def test_build_parser_accepts_single_dash_flags():
    args = build_parser().parse_args(["-source", "req.http", "-output=SD-1", "-retry", "5", "-sleep", "1"])
    assert args.source == "req.http"
    assert args.output == "SD-1"
    assert args.retry == 5
    assert args.sleep == 1
    assert args.continue_on_error is False
    assert args.strict_exit is False


@pytest.mark.parametrize("argv", [[], ["-source", "x.http"], ["-output", "out"]])
def test_cli_missing_paths_prints_usage(argv, capsys):
    from httpreplay.cli import main as cli_main

    assert cli_main.main(argv) == 0
    assert capsys.readouterr().out.strip() == USAGE


def _patch_client(monkeypatch, client):
    from httpreplay.cli import main as cli_main

    captured = {}

    def factory(settings=None):
        captured["settings"] = settings
        return client

    monkeypatch.setattr(cli_main, "create_default_http_client", factory)
    monkeypatch.setattr(cli_main, "load_settings", lambda: ReplaySettings())
    return cli_main, captured


def test_cli_retry_zero_behaves_like_one(monkeypatch, source, tmp_path):
    client = SequenceHttpClient([(200, b"hi")])
    cli_main, _ = _patch_client(monkeypatch, client)

    exit_code = cli_main.main(["-source", str(source), "-output", str(tmp_path / "out"), "-retry", "0", "-sleep", "0"])
    assert exit_code == 0
    assert client.calls == 1
    assert len(_reports(tmp_path)) == 1
    assert client.closed is True


def test_cli_prints_errors_and_keeps_zero_exit(monkeypatch, source, tmp_path, capsys):
    client = SequenceHttpClient([NetworkError("dial tcp: connection refused")])
    cli_main, _ = _patch_client(monkeypatch, client)

    exit_code = cli_main.main(["-source", str(source), "-output", str(tmp_path / "out"), "-retry", "3"])
    assert exit_code == 0
    assert "dial tcp: connection refused" in capsys.readouterr().out
    assert client.calls == 1


def test_cli_strict_exit_reports_failure(monkeypatch, tmp_path, capsys):
    cli_main, _ = _patch_client(monkeypatch, SequenceHttpClient([(200, b"")]))

    exit_code = cli_main.main(["-source", str(tmp_path / "absent.http"), "-output", str(tmp_path / "out"), "--strict-exit"])
    assert exit_code == 1
    assert "absent.http" in capsys.readouterr().out


def test_cli_options_flow_into_settings(monkeypatch, source, tmp_path):
    client = SequenceHttpClient([(200, b"")])
    cli_main, captured = _patch_client(monkeypatch, client)

    cli_main.main(
        [
            "-source",
            str(source),
            "-output",
            str(tmp_path / "out"),
            "--timeout",
            "2.5",
            "--no-redirects",
            "--unique-names",
        ]
    )
    settings = captured["settings"]
    assert settings.timeout == 2.5
    assert settings.allow_redirects is False
    assert settings.unique_names is True


def test_on_error_fires_when_each_failure_happens(source, tmp_path):
    client = SequenceHttpClient([(200, b"a"), NetworkError("refused"), (200, b"c"), NetworkError("reset")])
    seen = []
    _replay(client).run(
        source,
        tmp_path / "out",
        retry=4,
        continue_on_error=True,
        on_error=lambda error: seen.append((str(error), client.calls)),
    )
    assert seen == [("refused", 2), ("reset", 4)]


def test_on_error_reports_parse_failure(tmp_path):
    seen = []
    _replay(SequenceHttpClient([(200, b"")])).run(tmp_path / "absent.http", tmp_path / "out", on_error=seen.append)
    assert len(seen) == 1
    assert "absent.http" in str(seen[0])


def test_cli_continue_on_error_prints_each_failure_once(monkeypatch, source, tmp_path, capsys):
    client = SequenceHttpClient([NetworkError("first failure"), (200, b"ok"), NetworkError("second failure")])
    cli_main, _ = _patch_client(monkeypatch, client)

    exit_code = cli_main.main(
        ["-source", str(source), "-output", str(tmp_path / "out"), "-retry", "3", "--continue-on-error", "--unique-names"]
    )
    assert exit_code == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines == ["first failure", "second failure"]
    assert client.calls == 3
