"""CLI application entry point and command routing for ytdash.

This module is the **sole error boundary** for the entire application.
It catches :class:`~ytdash.exceptions.YtDashError`, ``KeyboardInterrupt``,
and any unexpected ``Exception``, rendering user-friendly messages via Rich
and returning well-defined exit codes.

Architecture notes
------------------
* No business logic lives here — all work is delegated to the core/service
  and infrastructure layers.
* The manifest is the only thing written to stdout (or ``--output``);
  diagnostics, logs and errors go to stderr.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

from ytdash.cli import exit_codes
from ytdash.cli.console import console
from ytdash.core.models import (
    DEFAULT_MANIFEST_TYPE,
    DEFAULT_MIN_BUFFER_TIME,
    DEFAULT_PROFILES,
)
from ytdash.exceptions import InvalidURLError, OutputError, YtDashError
from ytdash.version import __version__

LOG_FORMAT: str = "%(levelname)s %(name)s: %(message)s"


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser.

    Sub-commands are not used; the CLI supports:
    * ``ytdash <url-or-id>``         — print a DASH manifest
    * ``ytdash <url-or-id> --list``  — show the selected renditions
    * ``ytdash doctor``              — environment diagnostics
    * ``ytdash --version``
    """
    parser = argparse.ArgumentParser(
        prog="ytdash",
        description="Generate MPEG-DASH manifests for YouTube videos.",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "target",
        nargs="?",
        default=None,
        help="YouTube URL or video id, or 'doctor' to run diagnostics.",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="Show the renditions instead of printing the manifest.",
    )
    parser.add_argument(
        "--all-streams",
        action="store_true",
        help="Include every adaptive rendition instead of the selected subset.",
    )
    parser.add_argument(
        "--info-json",
        metavar="PATH",
        type=Path,
        help="Read a saved 'yt-dlp -J' dump instead of fetching TARGET.",
    )
    parser.add_argument(
        "-o",
        "--output",
        metavar="FILE",
        type=Path,
        help="Write the manifest to FILE instead of stdout.",
    )

    mpd = parser.add_argument_group("manifest options")
    mpd.add_argument(
        "--type",
        dest="manifest_type",
        default=DEFAULT_MANIFEST_TYPE,
        help="MPD type attribute (default: %(default)s).",
    )
    mpd.add_argument(
        "--min-buffer-time",
        default=DEFAULT_MIN_BUFFER_TIME,
        help="MPD minBufferTime attribute (default: %(default)s).",
    )
    mpd.add_argument(
        "--profiles",
        default=DEFAULT_PROFILES,
        help="MPD profiles attribute (default: %(default)s).",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log progress to stderr (-v for info, -vv for debug).",
    )
    return parser


def _configure_logging(verbosity: int) -> None:
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _load_info(args: argparse.Namespace) -> dict[str, Any]:
    """Return the yt-dlp info dict from ``--info-json`` or by fetching."""
    if args.info_json is not None:
        from ytdash.infra.info_json import load_info_json

        return load_info_json(args.info_json)

    from ytdash.core.manifest_service import ManifestService
    from ytdash.infra.ytdlp_provider import YtDlpMetadataProvider

    if args.target is None:
        raise InvalidURLError(
            "No URL given.",
            hint="Pass a YouTube URL or video id, or --info-json PATH.",
        )
    console.print(f"[bold]Fetching metadata…[/bold]  {args.target}")
    return ManifestService(YtDlpMetadataProvider()).fetch_info(args.target)


def _handle_list(info: dict[str, Any], *, select: bool) -> int:
    """Render the renditions a manifest for *info* would contain."""
    from ytdash.cli.streams_table import display_renditions
    from ytdash.core.catalog import parse_catalog
    from ytdash.core.manifest_service import ManifestService
    from ytdash.core.stream_selector import select_renditions

    catalog = parse_catalog(info)
    display_renditions(
        ManifestService.metadata_from_info(info),
        select_renditions(catalog) if select else catalog,
    )
    return exit_codes.SUCCESS


def _handle_manifest(info: dict[str, Any], args: argparse.Namespace) -> int:
    """Render the manifest for *info* to stdout or ``--output``."""
    from ytdash.core.manifest_service import ManifestService

    manifest = ManifestService.manifest_from_info(
        info,
        select=not args.all_streams,
        manifest_type=args.manifest_type,
        min_buffer_time=args.min_buffer_time,
        profiles=args.profiles,
    )

    if args.output is None:
        sys.stdout.write(manifest)
        sys.stdout.flush()
        return exit_codes.SUCCESS

    try:
        args.output.write_text(manifest, encoding="utf-8")
    except OSError as exc:
        raise OutputError(
            f"Cannot write manifest to {args.output}: {exc.strerror or exc}",
        ) from exc
    console.print(f"[bold green]Manifest written.[/bold green]  {args.output}")
    return exit_codes.SUCCESS


def _handle_doctor() -> int:
    """Dispatch the ``doctor`` diagnostics command."""
    from ytdash.cli.doctor import run_doctor

    return run_doctor()


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the ytdash CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.

    Returns
    -------
    int
        OS process exit code.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    if args.target is None and args.info_json is None:
        parser.print_help()
        return exit_codes.SUCCESS

    if args.target is not None and args.target.lower() == "doctor":
        return _handle_doctor()

    info = _load_info(args)
    if args.list:
        return _handle_list(info, select=not args.all_streams)
    return _handle_manifest(info, args)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except YtDashError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        if exc.hint:
            console.print(f"[yellow]Hint:[/yellow] {exc.hint}")
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {exc}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
