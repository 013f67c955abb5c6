"""Tests for the ``ytdash doctor`` command (cli/doctor.py).

Optional dependencies are hidden through ``sys.modules`` — no system
dependency, no internet.

Coverage:
* Individual check functions return correct tuples.
* Doctor returns SUCCESS when everything is present.
* A missing rich is a WARN, a missing yt-dlp is a FAIL.
* CLI routing dispatches to ``run_doctor``.
"""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from ytdash.cli import exit_codes


# ---------------------------------------------------------------------------
# Individual check functions
# ---------------------------------------------------------------------------

class TestPythonVersionCheck:
    def test_returns_tuple(self) -> None:
        from ytdash.cli.doctor import _python_version_check

        label, value, status = _python_version_check()
        assert label == "Python"
        assert isinstance(value, str)
        assert "OK" in status


class TestYtdlpVersionCheck:
    def test_installed(self) -> None:
        from ytdash.cli.doctor import _ytdlp_version_check

        label, _value, status = _ytdlp_version_check()
        assert label == "yt-dlp"
        # yt-dlp is installed in our test env
        assert "OK" in status

    @patch.dict("sys.modules", {"yt_dlp": None, "yt_dlp.version": None})
    def test_not_installed(self) -> None:
        from ytdash.cli.doctor import _ytdlp_version_check

        label, value, status = _ytdlp_version_check()
        assert label == "yt-dlp"
        assert value == "NOT INSTALLED"
        assert "FAIL" in status


class TestRichCheck:
    def test_installed(self) -> None:
        from ytdash.cli.doctor import _rich_check

        label, value, status = _rich_check()
        assert label == "rich"
        assert value != "not installed"
        assert "OK" in status

    @patch.dict("sys.modules", {"rich": None})
    def test_missing_is_warning(self) -> None:
        from ytdash.cli.doctor import _rich_check

        _label, value, status = _rich_check()
        assert value == "not installed"
        assert "WARN" in status


class TestOsCheck:
    def test_returns_tuple(self) -> None:
        from ytdash.cli.doctor import _os_check

        label, value, status = _os_check()
        assert label == "OS"
        assert isinstance(value, str)
        assert "OK" in status

    @patch("ytdash.cli.doctor.platform.machine", return_value="arm64")
    @patch("ytdash.cli.doctor.platform.release", return_value="23.4.0")
    @patch("ytdash.cli.doctor.platform.system", return_value="Darwin")
    def test_darwin_is_displayed_as_macos(
        self,
        _mock_system: MagicMock,
        _mock_release: MagicMock,
        _mock_machine: MagicMock,
    ) -> None:
        from ytdash.cli.doctor import _os_check

        _label, value, _status = _os_check()
        assert value == "macOS 23.4.0 (arm64)"


class TestYtdashVersionCheck:
    def test_returns_current_version(self) -> None:
        from ytdash.cli.doctor import _ytdash_version_check
        from ytdash.version import __version__

        label, value, status = _ytdash_version_check()
        assert label == "ytdash"
        assert value == __version__
        assert "OK" in status


# ---------------------------------------------------------------------------
# run_doctor integration
# ---------------------------------------------------------------------------

class TestRunDoctor:
    def test_all_pass_returns_success(self) -> None:
        from ytdash.cli.doctor import run_doctor

        assert run_doctor() == exit_codes.SUCCESS

    def test_collect_checks_order(self) -> None:
        from ytdash.cli.doctor import collect_checks

        labels = [label for label, _value, _status in collect_checks()]
        assert labels == ["ytdash", "Python", "yt-dlp", "rich", "OS"]

    @patch.dict("sys.modules", {"yt_dlp": None, "yt_dlp.version": None})
    def test_missing_ytdlp_fails(self) -> None:
        from ytdash.cli.doctor import run_doctor

        assert run_doctor() == exit_codes.GENERAL_ERROR

    @patch.dict("sys.modules", {"rich": None, "rich.table": None, "rich.console": None})
    def test_plain_output_without_rich(self, capsys: pytest.CaptureFixture[str]) -> None:
        from ytdash.cli.doctor import run_doctor

        code = run_doctor()
        captured = capsys.readouterr()
        assert code == exit_codes.SUCCESS
        assert "ytdash doctor" in captured.err
        assert "WARN" in captured.err
        assert "All checks passed." in captured.err


# ---------------------------------------------------------------------------
# CLI routing
# ---------------------------------------------------------------------------

class TestDoctorRouting:
    @patch("ytdash.cli.doctor.run_doctor", return_value=exit_codes.SUCCESS)
    def test_doctor_dispatches(self, mock_run: MagicMock) -> None:
        from ytdash.cli.app import main

        code = main(["doctor"])
        assert code == exit_codes.SUCCESS
        mock_run.assert_called_once()

    @patch("ytdash.cli.doctor.run_doctor", return_value=exit_codes.GENERAL_ERROR)
    def test_doctor_failure_propagates(self, mock_run: MagicMock) -> None:
        from ytdash.cli.app import main

        code = main(["doctor"])
        assert code == exit_codes.GENERAL_ERROR
