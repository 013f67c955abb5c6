"""Build a :class:`~ytdash.core.document.ManifestDocument` from a config.

The assembler lays out already-selected renditions; it never filters or
ranks them again.  Its own ordering rules are deliberately independent
of the selector's:

* video representations are emitted by height, highest first;
* audio is grouped per language (``und``, ``en``, then alphabetical),
  each group by bandwidth, highest first;
* every subtitle becomes its own adaptation set, ordered by language.

Validation failures are returned in an :class:`AssemblyResult` rather
than raised, so callers decide where the error boundary sits.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import cast

from ytdash.core.document import (
    AdaptationSet,
    AudioRepresentation,
    ManifestDocument,
    Period,
    SegmentBase,
    TextRepresentation,
    VideoRepresentation,
)
from ytdash.core.models import (
    AudioRendition,
    ManifestConfig,
    SubtitleRendition,
    VideoRendition,
)
from ytdash.exceptions import ManifestValidationError
from ytdash.utils.formatting import UNDEFINED_LANGUAGE, language_display_name

logger = logging.getLogger(__name__)

VIDEO_ADAPTATION_SET_ID: int = 0
FIRST_AUDIO_ADAPTATION_SET_ID: int = 1
FIRST_TEXT_ADAPTATION_SET_ID: int = 100

DEFAULT_VIDEO_MIME_TYPE: str = "video/mp4"
DEFAULT_AUDIO_MIME_TYPE: str = "audio/mp4"


@dataclass(frozen=True, slots=True)
class AssemblyResult:
    """Either an assembled document or the validation error that prevented it."""

    document: ManifestDocument | None = None
    error: ManifestValidationError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.document is not None

    def unwrap(self) -> ManifestDocument:
        """Return the document, or raise the recorded validation error."""
        if self.error is not None:
            raise self.error
        if self.document is None:
            raise ManifestValidationError("No manifest document was assembled.")
        return self.document


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def validate_config(config: ManifestConfig | None) -> ManifestValidationError | None:
    """Return the first problem with *config*, or ``None`` if it is usable."""
    if config is None:
        return ManifestValidationError("Manifest configuration cannot be None.")
    if config.duration_seconds <= 0:
        return ManifestValidationError(
            "Duration must be greater than 0.",
            hint="Live streams and premieres have no fixed duration.",
        )
    if config.video is None or config.audio is None or config.subtitles is None:
        return ManifestValidationError("Rendition lists cannot be None.")
    return None


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

def _segment_base(init_range: str | None, index_range: str | None) -> SegmentBase | None:
    if init_range is None or index_range is None:
        return None
    return SegmentBase(index_range=index_range, init_range=init_range)


def _first_mime_type(mime_types: Sequence[str | None], default: str) -> str:
    return next((m for m in mime_types if m is not None), default)


def _audio_language_key(language: str) -> tuple[int, str]:
    if language == UNDEFINED_LANGUAGE:
        return (0, language)
    if language == "en":
        return (1, language)
    return (2, language)


# ---------------------------------------------------------------------------
# Adaptation sets
# ---------------------------------------------------------------------------

def build_video_adaptation_set(renditions: Sequence[VideoRendition]) -> AdaptationSet:
    ordered = sorted(renditions, key=lambda r: r.height, reverse=True)
    representations = tuple(
        VideoRepresentation(
            id=r.id,
            bandwidth=r.bandwidth,
            codecs=r.codec,
            width=r.width,
            height=r.height,
            frame_rate=r.frame_rate,
            base_url=r.url,
            segment_base=_segment_base(r.init_range, r.index_range),
        )
        for r in ordered
    )
    return AdaptationSet(
        id=VIDEO_ADAPTATION_SET_ID,
        content_type="video",
        mime_type=_first_mime_type([r.mime_type for r in ordered], DEFAULT_VIDEO_MIME_TYPE),
        representations=representations,
    )


def build_audio_adaptation_sets(
    renditions: Sequence[AudioRendition],
) -> list[AdaptationSet]:
    """Build one adaptation set per language, ids counting up from 1."""
    by_language: dict[str, list[AudioRendition]] = {}
    for rendition in renditions:
        by_language.setdefault(rendition.language, []).append(rendition)

    adaptation_sets: list[AdaptationSet] = []
    for set_id, language in enumerate(
        sorted(by_language, key=_audio_language_key),
        start=FIRST_AUDIO_ADAPTATION_SET_ID,
    ):
        ordered = sorted(by_language[language], key=lambda r: r.bandwidth, reverse=True)
        label = ordered[0].track_name or language_display_name(language)
        adaptation_sets.append(
            AdaptationSet(
                id=set_id,
                content_type="audio",
                mime_type=_first_mime_type(
                    [r.mime_type for r in ordered], DEFAULT_AUDIO_MIME_TYPE,
                ),
                lang=language,
                label=label,
                representations=tuple(
                    AudioRepresentation(
                        id=r.id,
                        bandwidth=r.bandwidth,
                        codecs=r.codec,
                        audio_sampling_rate=r.sample_rate,
                        audio_channels=r.channels,
                        base_url=r.url,
                        segment_base=_segment_base(r.init_range, r.index_range),
                    )
                    for r in ordered
                ),
            )
        )
    return adaptation_sets


def build_text_adaptation_sets(
    renditions: Sequence[SubtitleRendition],
) -> list[AdaptationSet]:
    """Build one adaptation set per subtitle, ids counting up from 100."""
    ordered = sorted(renditions, key=lambda r: r.language)
    return [
        AdaptationSet(
            id=set_id,
            content_type="text",
            mime_type=r.mime_type,
            lang=r.language,
            role="subtitles" if r.kind == "asr" else r.kind,
            representations=(
                TextRepresentation(id=r.id, bandwidth=r.bandwidth, base_url=r.url),
            ),
        )
        for set_id, r in enumerate(ordered, start=FIRST_TEXT_ADAPTATION_SET_ID)
    ]


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def assemble_manifest(config: ManifestConfig | None) -> AssemblyResult:
    """Validate *config* and lay out its renditions as a manifest tree."""
    error = validate_config(config)
    if error is not None:
        logger.warning("Manifest configuration rejected: %s", error)
        return AssemblyResult(error=error)
    config = cast(ManifestConfig, config)
    logger.debug("Manifest configuration validated")

    video = config.video or ()
    audio = config.audio or ()
    subtitles = config.subtitles or ()

    adaptation_sets: list[AdaptationSet] = []
    if video:
        adaptation_sets.append(build_video_adaptation_set(video))
    if audio:
        adaptation_sets.extend(build_audio_adaptation_sets(audio))
    if subtitles:
        adaptation_sets.extend(build_text_adaptation_sets(subtitles))

    duration = config.presentation_duration
    document = ManifestDocument(
        manifest_type=config.manifest_type,
        media_presentation_duration=duration,
        min_buffer_time=config.min_buffer_time,
        profiles=config.profiles,
        period=Period(duration=duration, adaptation_sets=tuple(adaptation_sets)),
    )

    logger.info(
        "Assembled manifest with %d video, %d audio, %d subtitle renditions",
        len(video),
        len(audio),
        len(subtitles),
    )
    return AssemblyResult(document=document)
