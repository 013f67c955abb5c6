"""Regression tests for the optional CLI UI dependency (rich).

These tests verify bootstrap commands and manifest output are resilient
when rich is missing, and that ``--list`` fails cleanly only when the
table UI is actually exercised.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

from ytdash.cli import exit_codes
from ytdash.cli.app import main
from ytdash.exceptions import EnvironmentError


def _hide_rich(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setitem(sys.modules, "rich", None)
    monkeypatch.setitem(sys.modules, "rich.console", None)
    monkeypatch.setitem(sys.modules, "rich.table", None)


def _info_json(tmp_path: Path) -> Path:
    path = tmp_path / "info.json"
    path.write_text(
        json.dumps({"id": "abc123", "title": "Test Video", "duration": 30, "formats": []}),
        encoding="utf-8",
    )
    return path


def test_help_works_without_rich(monkeypatch: pytest.MonkeyPatch) -> None:
    _hide_rich(monkeypatch)

    with pytest.raises(SystemExit) as exc_info:
        main(["--help"])
    assert exc_info.value.code == 0


def test_version_works_without_rich(monkeypatch: pytest.MonkeyPatch) -> None:
    _hide_rich(monkeypatch)

    with pytest.raises(SystemExit) as exc_info:
        main(["--version"])
    assert exc_info.value.code == 0


def test_doctor_works_without_rich(monkeypatch: pytest.MonkeyPatch) -> None:
    _hide_rich(monkeypatch)

    code = main(["doctor"])
    assert code in (exit_codes.SUCCESS, exit_codes.GENERAL_ERROR)


def test_manifest_works_without_rich(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    _hide_rich(monkeypatch)

    code = main(["--info-json", str(_info_json(tmp_path))])
    assert code == exit_codes.SUCCESS
    assert capsys.readouterr().out.endswith("</MPD>\n")


def test_list_errors_cleanly_when_rich_missing(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    _hide_rich(monkeypatch)

    with pytest.raises(EnvironmentError, match="rich is not installed"):
        main(["--info-json", str(_info_json(tmp_path)), "--list"])
