"""Unit tests for the CLI entrypoint."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import Mock

import pytest

import redmine_issue_board.board.main as cli
from redmine_issue_board.board.errors import FetchError
from redmine_issue_board.board.redmine.client import Issue


@pytest.fixture(autouse=True)
def _isolate(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    for name in ("REDMINE_BOARD_CONFIG", "LOG_LEVEL", "REDMINE_BOARD_FETCH_TIMEOUT_SECONDS"):
        monkeypatch.delenv(name, raising=False)
    # Leave the root logger alone; pytest owns it during tests.
    monkeypatch.setattr(cli, "configure_logging", lambda _level: None)


def _write_config(tmp_path: Path) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(
        "redmine_urls:\n"
        "  - url: https://redmine.test/\n"
        "    api_key: k\n"
        "    query_id: 1\n"
        "    limit: 10\n",
        encoding="utf-8",
    )
    return path


def _fake_fetch(monkeypatch: pytest.MonkeyPatch, result) -> Mock:
    fetch = Mock(side_effect=result) if isinstance(result, Exception) else Mock(return_value=result)
    monkeypatch.setattr(cli.RedmineClient, "fetch", lambda self, source: fetch(source))
    return fetch


def test_parser_requires_a_command() -> None:
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args([])


def test_render_writes_page(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config = _write_config(tmp_path)
    issue = Issue(
        ticket_id=9,
        project="Web",
        tracker="Bug",
        status="New",
        assignee="Alice",
        subject="Ship it",
        source_link="https://redmine.test/",
    )
    fetch = _fake_fetch(monkeypatch, [issue])
    out = tmp_path / "board.html"

    code = cli.main(["render", "--config", str(config), "--output", str(out)])

    assert code == 0
    assert fetch.call_count == 1
    html = out.read_text(encoding="utf-8")
    assert '<a href="https://redmine.test/issues/9">9</a>' in html
    assert "<td>Ship it</td>" in html


def test_render_to_stdout_uses_default_config(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    _write_config(tmp_path)
    _fake_fetch(monkeypatch, [])

    assert cli.main(["render"]) == 0
    assert "<title>今日の活動</title>" in capsys.readouterr().out


def test_render_fetch_failure_exits_2(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    config = _write_config(tmp_path)
    _fake_fetch(monkeypatch, FetchError("https://redmine.test/: HTTP 404 Not Found"))

    assert cli.main(["render", "--config", str(config)]) == 2
    assert "Failed to fetch Redmine issues" in capsys.readouterr().err


def test_missing_config_exits_1(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = cli.main(["serve", "--config", str(tmp_path / "missing.yaml")])

    assert code == 1
    assert "Failed to load config" in capsys.readouterr().err


def test_serve_runs_uvicorn_with_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _write_config(tmp_path)
    monkeypatch.delenv("REDMINE_BOARD_HOST", raising=False)
    monkeypatch.delenv("REDMINE_BOARD_PORT", raising=False)
    run = Mock()
    monkeypatch.setattr(cli.uvicorn, "run", run)

    assert cli.main(["serve"]) == 0

    run.assert_called_once()
    assert run.call_args.kwargs["host"] == "0.0.0.0"
    assert run.call_args.kwargs["port"] == 8000


def test_serve_port_override(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config = _write_config(tmp_path)
    run = Mock()
    monkeypatch.setattr(cli.uvicorn, "run", run)

    assert cli.main(["serve", "--config", str(config), "--host", "127.0.0.1", "--port", "9001"]) == 0
    assert run.call_args.kwargs["host"] == "127.0.0.1"
    assert run.call_args.kwargs["port"] == 9001
