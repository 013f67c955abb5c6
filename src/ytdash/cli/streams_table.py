"""Rich tables describing the renditions a manifest will contain.

Used by ``ytdash <url> --list``.  All display-related logic lives here
— no selection, no parsing, no manifest rendering.
"""

from __future__ import annotations

from typing import Any

from ytdash.cli.console import out
from ytdash.core.models import (
    AudioRendition,
    RenditionCatalog,
    SelectionResult,
    SubtitleRendition,
    VideoMetadata,
    VideoRendition,
)
from ytdash.exceptions import EnvironmentError
from ytdash.utils.formatting import format_duration_with_millis


def _import_rich_table() -> type[Any]:
    """Import rich table lazily for rendition rendering."""
    try:
        from rich.table import Table
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "rich is not installed. Install with: pip install rich",
        ) from exc
    return Table


# ---------------------------------------------------------------------------
# Presentation helpers
# ---------------------------------------------------------------------------

def format_bandwidth(bps: int) -> str:
    """Render bits per second as ``"2.5 Mbps"`` or ``"128 kbps"``."""
    if bps >= 1_000_000:
        return f"{bps / 1_000_000:.1f} Mbps"
    if bps >= 1_000:
        return f"{bps / 1_000:.0f} kbps"
    return f"{bps} bps"


def _new_table(table_class: type[Any], title: str) -> Any:
    table = table_class(
        title=title,
        show_header=True,
        header_style="bold magenta",
        border_style="dim",
    )
    table.add_column("#", justify="right", style="dim", width=4)
    return table


def _video_table(table_class: type[Any], renditions: tuple[VideoRendition, ...]) -> Any:
    table = _new_table(table_class, "Video")
    table.add_column("ID")
    table.add_column("Quality")
    table.add_column("Resolution", justify="right")
    table.add_column("FPS", justify="right")
    table.add_column("Codec")
    table.add_column("Bandwidth", justify="right")
    for i, r in enumerate(renditions, start=1):
        table.add_row(
            str(i),
            r.id,
            r.quality_label,
            f"{r.width}x{r.height}",
            r.frame_rate,
            r.codec,
            format_bandwidth(r.bandwidth),
        )
    return table


def _audio_table(table_class: type[Any], renditions: tuple[AudioRendition, ...]) -> Any:
    table = _new_table(table_class, "Audio")
    table.add_column("ID")
    table.add_column("Language")
    table.add_column("Track")
    table.add_column("Codec")
    table.add_column("Channels", justify="right")
    table.add_column("Sample rate", justify="right")
    table.add_column("Bandwidth", justify="right")
    for i, r in enumerate(renditions, start=1):
        table.add_row(
            str(i),
            r.id,
            r.language,
            r.track_name or "—",
            r.codec,
            str(r.channels),
            f"{r.sample_rate} Hz",
            format_bandwidth(r.bandwidth),
        )
    return table


def _subtitle_table(table_class: type[Any], renditions: tuple[SubtitleRendition, ...]) -> Any:
    table = _new_table(table_class, "Subtitles")
    table.add_column("ID")
    table.add_column("Language")
    table.add_column("Name")
    table.add_column("Format")
    table.add_column("Kind")
    for i, r in enumerate(renditions, start=1):
        table.add_row(
            str(i),
            r.id,
            r.language,
            r.display_name or "—",
            r.format_name,
            r.kind,
        )
    return table


# ---------------------------------------------------------------------------
# Public display function
# ---------------------------------------------------------------------------

def display_renditions(
    metadata: VideoMetadata,
    renditions: SelectionResult | RenditionCatalog,
) -> None:
    """Print the video title followed by one table per non-empty kind."""
    table_class = _import_rich_table()

    out.print()
    out.print(f"[bold cyan]Title:[/bold cyan]    {metadata.title}")
    if metadata.duration is not None:
        duration = format_duration_with_millis(metadata.duration)
        out.print(f"[bold cyan]Duration:[/bold cyan] {duration}")
    out.print()

    if renditions.video:
        out.print(_video_table(table_class, renditions.video))
    if renditions.audio:
        out.print(_audio_table(table_class, renditions.audio))
    if renditions.subtitles:
        out.print(_subtitle_table(table_class, renditions.subtitles))
    if not renditions:
        out.print("[yellow]No adaptive renditions found.[/yellow]")
