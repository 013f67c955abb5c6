"""Domain models for ytdash.

All models are **frozen** dataclasses — immutable value objects with no
behaviour beyond data access.  They carry zero I/O, zero dependencies on
external packages, and must remain pure across the entire lifecycle.

Renditions form a closed tagged union (:data:`Rendition`); code that
needs to branch on the kind of rendition matches on the three concrete
classes rather than subclassing.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from ytdash.utils.formatting import format_duration, normalize_language_code


DEFAULT_MANIFEST_TYPE: str = "static"
DEFAULT_MIN_BUFFER_TIME: str = "PT2S"
DEFAULT_PROFILES: str = "urn:mpeg:dash:profile:isoff-on-demand:2011"
DEFAULT_SUBTITLE_BANDWIDTH: int = 256


# ---------------------------------------------------------------------------
# Video metadata
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class VideoMetadata:
    """Top-level metadata for a single YouTube video."""

    id: str
    """YouTube video ID (e.g. ``dQw4w9WgXcQ``)."""

    title: str
    """Human-readable video title."""

    duration: float | None
    """Duration in seconds, or ``None`` if unavailable."""

    webpage_url: str
    """Canonical URL of the video page."""


# ---------------------------------------------------------------------------
# Renditions
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class VideoRendition:
    """A video-only adaptive stream."""

    id: str
    url: str
    codec: str
    mime_type: str | None
    bandwidth: int
    """Bits per second."""

    width: int
    height: int
    quality_label: str
    """Quality tier label as reported by the source (e.g. ``"1080p"``)."""

    frame_rate: str
    """Frame rate, kept exactly as the source formatted it."""

    init_range: str | None = None
    """Initialization byte range (``"0-740"``), if known."""

    index_range: str | None = None
    """Segment index byte range (``"741-1048"``), if known."""


@dataclass(frozen=True, slots=True)
class AudioRendition:
    """An audio-only adaptive stream."""

    id: str
    url: str
    codec: str
    mime_type: str | None
    bandwidth: int
    channels: int
    sample_rate: int
    format_family: str | None
    """Container family name, e.g. ``"M4A"`` or ``"WEBM"``."""

    preference_key: str | None
    """Stream format id used for exact-match ranking (an itag)."""

    locale: str | None = None
    track_id: str | None = None
    track_name: str | None = None
    init_range: str | None = None
    index_range: str | None = None

    @property
    def language(self) -> str:
        """Normalized language: locale tag, else track id, else ``"und"``."""
        return normalize_language_code(self.locale or self.track_id)


@dataclass(frozen=True, slots=True)
class SubtitleRendition:
    """A subtitle track in a single text format."""

    id: str
    url: str
    mime_type: str
    format_name: str
    """Long format name, e.g. ``"WebVTT"``."""

    format_suffix: str
    """File suffix, e.g. ``"vtt"``."""

    locale: str | None = None
    display_name: str | None = None
    auto_generated: bool = False
    bandwidth: int = DEFAULT_SUBTITLE_BANDWIDTH
    kind: str = ""
    """Role of the track. Defaults to ``"asr"`` for automatic captions and
    ``"subtitles"`` otherwise; callers may pass any role, e.g. ``"captions"``."""

    def __post_init__(self) -> None:
        if not self.kind:
            object.__setattr__(self, "kind", "asr" if self.auto_generated else "subtitles")

    @property
    def language(self) -> str:
        """Normalized language code, ``"und"`` when no locale is known."""
        return normalize_language_code(self.locale)


Rendition = VideoRendition | AudioRendition | SubtitleRendition


# ---------------------------------------------------------------------------
# Typed collection wrappers
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class RenditionCatalog:
    """Every rendition discovered for one media item, unfiltered.

    ``skipped`` records one warning per raw record that could not be
    converted.
    """

    video: tuple[VideoRendition, ...] = ()
    audio: tuple[AudioRendition, ...] = ()
    subtitles: tuple[SubtitleRendition, ...] = ()
    skipped: tuple[str, ...] = ()

    def __len__(self) -> int:
        return len(self.video) + len(self.audio) + len(self.subtitles)

    def __bool__(self) -> bool:
        return len(self) > 0


@dataclass(frozen=True, slots=True)
class SelectionResult:
    """Renditions chosen for adaptive playback, each sequence ordered."""

    video: tuple[VideoRendition, ...] = ()
    audio: tuple[AudioRendition, ...] = ()
    subtitles: tuple[SubtitleRendition, ...] = ()

    def __len__(self) -> int:
        return len(self.video) + len(self.audio) + len(self.subtitles)

    def __bool__(self) -> bool:
        return len(self) > 0


# ---------------------------------------------------------------------------
# Manifest configuration
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ManifestConfig:
    """Input to the manifest assembler.

    The rendition sequences are used as given; the assembler never
    re-applies selection policy.  ``None`` sequences are rejected at
    assembly time, empty ones are valid.
    """

    duration_seconds: int
    video: Sequence[VideoRendition] | None = ()
    audio: Sequence[AudioRendition] | None = ()
    subtitles: Sequence[SubtitleRendition] | None = ()
    manifest_type: str = DEFAULT_MANIFEST_TYPE
    min_buffer_time: str = DEFAULT_MIN_BUFFER_TIME
    profiles: str = DEFAULT_PROFILES
    media_presentation_duration: str | None = None
    """Explicit ISO-8601 duration, overriding the whole-second rendering."""

    @property
    def presentation_duration(self) -> str:
        if self.media_presentation_duration is not None:
            return self.media_presentation_duration
        return format_duration(self.duration_seconds)
