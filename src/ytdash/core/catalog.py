"""Raw yt-dlp info dict → :class:`~ytdash.core.models.RenditionCatalog`.

Every function here is pure.  Conversion is per record: a format or
subtitle entry that lacks a required field raises
:class:`~ytdash.exceptions.RenditionConversionError`, which
:func:`parse_catalog` catches, logs and records in
``RenditionCatalog.skipped`` before moving on to the next record.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Mapping, Sequence
from typing import Any

from ytdash.core.models import (
    AudioRendition,
    ManifestConfig,
    RenditionCatalog,
    SelectionResult,
    SubtitleRendition,
    VideoRendition,
)
from ytdash.exceptions import RenditionConversionError
from ytdash.utils.formatting import format_duration_with_millis

logger = logging.getLogger(__name__)

_DIRECT_PROTOCOLS: frozenset[str] = frozenset({"http", "https"})

_VIDEO_MIME_TYPES: dict[str, str] = {
    "mp4": "video/mp4",
    "webm": "video/webm",
    "3gp": "video/3gpp",
}

_AUDIO_MIME_TYPES: dict[str, str] = {
    "m4a": "audio/mp4",
    "mp4": "audio/mp4",
    "webm": "audio/webm",
    "opus": "audio/ogg",
}

# suffix → (format name, MIME type)
_SUBTITLE_FORMATS: dict[str, tuple[str, str]] = {
    "vtt": ("WebVTT", "text/vtt"),
    "ttml": ("Timed Text Markup Language", "application/ttml+xml"),
    "srv3": ("TranScript v3", "text/xml"),
    "srv2": ("TranScript v2", "text/xml"),
    "srv1": ("TranScript v1", "text/xml"),
    "srt": ("SubRip file format", "application/x-subrip"),
    "json3": ("JSON v3", "application/json"),
}

_ORIGINAL_CAPTION_SUFFIX = "-orig"
_QUALITY_LABEL = re.compile(r"^\d+p\d*$")


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------

def _require_str(raw: Mapping[str, Any], key: str) -> str:
    value = raw.get(key)
    if not value or not isinstance(value, str):
        raise RenditionConversionError(f"missing '{key}'")
    return value


def _require_int(raw: Mapping[str, Any], key: str) -> int:
    value = raw.get(key)
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        raise RenditionConversionError(f"missing '{key}'")
    return int(value)


def _bandwidth(raw: Mapping[str, Any], *keys: str) -> int:
    """Return bits per second from the first kbit/s field present."""
    for key in keys:
        value = raw.get(key)
        if isinstance(value, (int, float)) and value > 0:
            return int(round(value * 1000))
    raise RenditionConversionError(f"missing bitrate ({', '.join(keys)})")


def _byte_range(value: object) -> str | None:
    """Accept ``"start-end"`` strings or ``{"start": .., "end": ..}`` mappings."""
    if isinstance(value, str) and value:
        return value
    if isinstance(value, Mapping):
        start, end = value.get("start"), value.get("end")
        if isinstance(start, int) and isinstance(end, int) and start >= 0 and end > 0:
            return f"{start}-{end}"
    return None


def _quality_label(raw: Mapping[str, Any], height: int) -> str:
    note = raw.get("format_note")
    if isinstance(note, str):
        for token in note.split(","):
            token = token.strip()
            if _QUALITY_LABEL.match(token):
                return token
    return f"{height}p"


def _audio_track_name(raw: Mapping[str, Any]) -> str | None:
    """Return the track display name yt-dlp puts first in multi-track notes."""
    note = raw.get("format_note")
    if not raw.get("language") or not isinstance(note, str):
        return None
    parts = [p.strip() for p in note.split(",")]
    if len(parts) < 2 or not parts[0]:
        return None
    return parts[0].removesuffix(" (default)")


def _is_direct(raw: Mapping[str, Any]) -> bool:
    protocol = raw.get("protocol")
    return protocol is None or protocol in _DIRECT_PROTOCOLS


def is_video_only(raw: Mapping[str, Any]) -> bool:
    """Video codec present, audio codec ``"none"``."""
    return (raw.get("vcodec") or "none") != "none" and (raw.get("acodec") or "none") == "none"


def is_audio_only(raw: Mapping[str, Any]) -> bool:
    """Audio codec present, video codec ``"none"``."""
    return (raw.get("acodec") or "none") != "none" and (raw.get("vcodec") or "none") == "none"


# ---------------------------------------------------------------------------
# Single-record converters
# ---------------------------------------------------------------------------

def parse_video_format(raw: Mapping[str, Any]) -> VideoRendition:
    """Convert one yt-dlp video-only format dict."""
    height = _require_int(raw, "height")
    fps = raw.get("fps")
    if fps is None:
        raise RenditionConversionError("missing 'fps'")
    ext = str(raw.get("ext") or "")
    return VideoRendition(
        id=_require_str(raw, "format_id"),
        url=_require_str(raw, "url"),
        codec=_require_str(raw, "vcodec"),
        mime_type=_VIDEO_MIME_TYPES.get(ext),
        bandwidth=_bandwidth(raw, "tbr", "vbr"),
        width=_require_int(raw, "width"),
        height=height,
        quality_label=_quality_label(raw, height),
        frame_rate=str(fps),
        init_range=_byte_range(raw.get("init_range")),
        index_range=_byte_range(raw.get("index_range")),
    )


def parse_audio_format(raw: Mapping[str, Any]) -> AudioRendition:
    """Convert one yt-dlp audio-only format dict."""
    format_id = _require_str(raw, "format_id")
    ext = str(raw.get("ext") or "")
    channels = raw.get("audio_channels")
    return AudioRendition(
        id=format_id,
        url=_require_str(raw, "url"),
        codec=_require_str(raw, "acodec"),
        mime_type=_AUDIO_MIME_TYPES.get(ext),
        bandwidth=_bandwidth(raw, "tbr", "abr"),
        channels=channels if isinstance(channels, int) and channels > 0 else 2,
        sample_rate=_require_int(raw, "asr"),
        format_family=ext.upper() or None,
        preference_key=format_id.split("-", 1)[0],
        locale=raw.get("language") or None,
        track_name=_audio_track_name(raw),
        init_range=_byte_range(raw.get("init_range")),
        index_range=_byte_range(raw.get("index_range")),
    )


def parse_subtitle(
    language: str,
    raw: Mapping[str, Any],
    *,
    auto_generated: bool,
) -> SubtitleRendition:
    """Convert one entry of yt-dlp's ``subtitles`` / ``automatic_captions``."""
    url = _require_str(raw, "url")
    suffix = _require_str(raw, "ext").lower()
    format_name, mime_type = _SUBTITLE_FORMATS.get(suffix, (suffix, "application/ttml+xml"))
    prefix = "auto" if auto_generated else "sub"
    return SubtitleRendition(
        id=f"{prefix}-{language}-{suffix}",
        url=url,
        mime_type=mime_type,
        format_name=format_name,
        format_suffix=suffix,
        locale=language,
        display_name=raw.get("name") or None,
        auto_generated=auto_generated,
    )


# ---------------------------------------------------------------------------
# Whole-catalog conversion
# ---------------------------------------------------------------------------

def _subtitle_entries(info: Mapping[str, Any]) -> list[tuple[str, Mapping[str, Any], bool]]:
    """Flatten manual subtitles and original-language automatic captions."""
    entries: list[tuple[str, Mapping[str, Any], bool]] = []

    manual = info.get("subtitles")
    if isinstance(manual, Mapping):
        for language, tracks in manual.items():
            if language == "live_chat" or not isinstance(tracks, list):
                continue
            entries.extend((language, t, False) for t in tracks if isinstance(t, Mapping))

    automatic = info.get("automatic_captions")
    if isinstance(automatic, Mapping):
        for key, tracks in automatic.items():
            if not key.endswith(_ORIGINAL_CAPTION_SUFFIX) or not isinstance(tracks, list):
                continue
            language = key[: -len(_ORIGINAL_CAPTION_SUFFIX)]
            entries.extend((language, t, True) for t in tracks if isinstance(t, Mapping))

    return entries


def parse_catalog(info: Mapping[str, Any]) -> RenditionCatalog:
    """Convert a yt-dlp info dict into a rendition catalog.

    Only video-only and audio-only formats served over plain HTTP(S) are
    considered; muxed, HLS and storyboard formats are ignored.  Records
    that fail conversion are skipped with a warning.
    """
    raw_formats: object = info.get("formats")
    formats: Sequence[Any] = raw_formats if isinstance(raw_formats, list) else []

    video: list[VideoRendition] = []
    audio: list[AudioRendition] = []
    subtitles: list[SubtitleRendition] = []
    skipped: list[str] = []

    for raw in formats:
        if not isinstance(raw, Mapping) or not _is_direct(raw):
            continue
        try:
            if is_video_only(raw):
                video.append(parse_video_format(raw))
            elif is_audio_only(raw):
                audio.append(parse_audio_format(raw))
        except RenditionConversionError as exc:
            message = f"Skipping format {raw.get('format_id', '?')}: {exc}"
            logger.warning(message)
            skipped.append(message)

    for language, raw, auto_generated in _subtitle_entries(info):
        try:
            subtitles.append(parse_subtitle(language, raw, auto_generated=auto_generated))
        except RenditionConversionError as exc:
            message = f"Skipping subtitle {language}: {exc}"
            logger.warning(message)
            skipped.append(message)

    return RenditionCatalog(
        video=tuple(video),
        audio=tuple(audio),
        subtitles=tuple(subtitles),
        skipped=tuple(skipped),
    )


def build_manifest_config(
    renditions: RenditionCatalog | SelectionResult,
    duration: float | None,
    **options: str,
) -> ManifestConfig:
    """Combine renditions and a (possibly fractional) duration into a config.

    *options* are passed through to :class:`ManifestConfig`
    (``manifest_type``, ``min_buffer_time``, ``profiles``).  A missing
    duration becomes ``0`` and is rejected later by the assembler.
    """
    seconds = duration if duration is not None else 0
    override = None
    if seconds > 0 and not float(seconds).is_integer():
        override = format_duration_with_millis(seconds)
    return ManifestConfig(
        duration_seconds=math.ceil(seconds) if seconds > 0 else 0,
        video=renditions.video,
        audio=renditions.audio,
        subtitles=renditions.subtitles,
        media_presentation_duration=override,
        **options,
    )
