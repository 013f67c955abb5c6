"""``ytdash doctor`` — environment diagnostics command.

Gathers system information and renders a Rich table summarising
whether the runtime environment satisfies ytdash's requirements.
Falls back to a plain-text table when Rich itself is missing.
"""

from __future__ import annotations

import platform
import sys
from importlib.metadata import PackageNotFoundError, version

from ytdash.cli import exit_codes
from ytdash.cli.console import console
from ytdash.version import __version__

Check = tuple[str, str, str]
"""(label, value, status) row."""

_OK = "[green]OK[/green]"


# ---------------------------------------------------------------------------
# Diagnostic collectors
# ---------------------------------------------------------------------------

def _ytdash_version_check() -> Check:
    return "ytdash", __version__, _OK


def _python_version_check() -> Check:
    """Return the Python version row; 3.10 or newer is required."""
    py_version = platform.python_version()
    ok = sys.version_info[:2] >= (3, 10)
    status = _OK if ok else "[red]FAIL (>=3.10 required)[/red]"
    return "Python", py_version, status


def _ytdlp_version_check() -> Check:
    """Return the yt-dlp row; yt-dlp is required to fetch from URLs."""
    try:
        from yt_dlp.version import __version__ as ydl_ver

        return "yt-dlp", ydl_ver, _OK
    except ImportError:
        pass

    try:
        import yt_dlp  # noqa: F401

        return "yt-dlp", "unknown", _OK
    except ImportError:
        return "yt-dlp", "NOT INSTALLED", "[red]FAIL[/red]"


def _rich_check() -> Check:
    """Return the Rich row; without it output degrades to plain text."""
    try:
        import rich  # noqa: F401
    except ImportError:
        return "rich", "not installed", "[yellow]WARN[/yellow]"
    try:
        return "rich", version("rich"), _OK
    except PackageNotFoundError:
        return "rich", "unknown", _OK


def _os_check() -> Check:
    system_raw = platform.system()
    system_display = {"Darwin": "macOS"}.get(system_raw, system_raw)
    value = f"{system_display} {platform.release()} ({platform.machine()})"
    return "OS", value, _OK


def collect_checks() -> list[Check]:
    """Run every diagnostic collector, in display order."""
    return [
        _ytdash_version_check(),
        _python_version_check(),
        _ytdlp_version_check(),
        _rich_check(),
        _os_check(),
    ]


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def _status_plain(status: str) -> str:
    """Convert rich-markup status to plain text."""
    for word in ("FAIL", "WARN", "OK"):
        if word in status:
            return word
    return status


def _print_plain_doctor_table(checks: list[Check]) -> None:
    print("\nytdash doctor", file=sys.stderr)
    print("=" * 56, file=sys.stderr)
    print(f"{'Component':<12} {'Value':<32} {'Status':<8}", file=sys.stderr)
    print("-" * 56, file=sys.stderr)
    for label, value, status in checks:
        print(f"{label:<12} {value:<32} {_status_plain(status):<8}", file=sys.stderr)
    print(file=sys.stderr)


def _print_rich_doctor_table(checks: list[Check], table_class: type) -> None:
    table = table_class(
        title="ytdash doctor",
        show_header=True,
        header_style="bold cyan",
        border_style="dim",
    )
    table.add_column("Component", style="bold", min_width=12)
    table.add_column("Value", min_width=20)
    table.add_column("Status", justify="center", min_width=8)
    for label, value, status in checks:
        table.add_row(label, value, status)

    console.print()
    console.print(table)
    console.print()


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def run_doctor() -> int:
    """Execute all diagnostic checks and render a summary table.

    Returns
    -------
    int
        :data:`exit_codes.SUCCESS` when all critical checks pass,
        :data:`exit_codes.GENERAL_ERROR` if a critical check fails.
    """
    checks = collect_checks()
    has_failure = any("FAIL" in status for _, _, status in checks)

    try:
        from rich.table import Table
    except ModuleNotFoundError:
        _print_plain_doctor_table(checks)
        print("Some checks failed." if has_failure else "All checks passed.", file=sys.stderr)
    else:
        _print_rich_doctor_table(checks, Table)
        if has_failure:
            console.print("[bold red]Some checks failed.[/bold red]")
        else:
            console.print("[bold green]All checks passed.[/bold green]")

    return exit_codes.GENERAL_ERROR if has_failure else exit_codes.SUCCESS
