"""Regression tests for optional yt-dlp dependency boundaries.

These tests ensure CLI paths that do not require yt-dlp still work when
yt-dlp is absent, while runtime extraction paths fail cleanly with a
typed environment error.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

from ytdash.cli import exit_codes
from ytdash.cli.app import main
from ytdash.exceptions import EnvironmentError
from ytdash.infra.ytdlp_provider import YtDlpMetadataProvider


def _remove_ytdlp(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setitem(sys.modules, "yt_dlp", None)
    monkeypatch.setitem(sys.modules, "yt_dlp.utils", None)
    monkeypatch.setitem(sys.modules, "yt_dlp.version", None)


def test_help_works_without_ytdlp(monkeypatch: pytest.MonkeyPatch) -> None:
    _remove_ytdlp(monkeypatch)
    with pytest.raises(SystemExit) as exc_info:
        main(["--help"])
    assert exc_info.value.code == 0


def test_doctor_works_without_ytdlp(monkeypatch: pytest.MonkeyPatch) -> None:
    _remove_ytdlp(monkeypatch)
    code = main(["doctor"])
    assert code == exit_codes.GENERAL_ERROR


def test_info_json_works_without_ytdlp(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    _remove_ytdlp(monkeypatch)
    path = tmp_path / "info.json"
    path.write_text(json.dumps({"id": "x", "duration": 5}), encoding="utf-8")

    assert main(["--info-json", str(path)]) == exit_codes.SUCCESS
    assert 'mediaPresentationDuration="PT5S"' in capsys.readouterr().out


def test_metadata_extraction_raises_environment_error_without_ytdlp(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    _remove_ytdlp(monkeypatch)
    provider = YtDlpMetadataProvider()

    with pytest.raises(EnvironmentError, match="yt-dlp is not installed"):
        provider.fetch_info("https://www.youtube.com/watch?v=dQw4w9WgXcQ")


def test_cli_fetch_raises_environment_error_without_ytdlp(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    _remove_ytdlp(monkeypatch)

    with pytest.raises(EnvironmentError, match="yt-dlp is not installed"):
        main(["dQw4w9WgXcQ"])
