"""Pure rendition selection for adaptive playback.

Every function in this module is a **pure** transformation — no I/O,
no side effects, fully deterministic, and trivially unit-testable.
Empty input is a normal outcome (subtitle-less media, audio-only
uploads) and yields an empty result; it is logged, never raised.

Pipeline (enforced by :func:`select_renditions`):

1. **Video** — one rendition per quality tier, 3 to 6 renditions.
2. **Audio** — best rendition per language, original/English first.
3. **Subtitles** — preferred text format, one track per language,
   manual tracks preferred over automatic captions.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from ytdash.core.models import (
    AudioRendition,
    RenditionCatalog,
    SelectionResult,
    SubtitleRendition,
    VideoRendition,
)
from ytdash.utils.formatting import UNDEFINED_LANGUAGE

logger = logging.getLogger(__name__)

QUALITY_TIERS: tuple[str, ...] = (
    "2160p",
    "1440p",
    "1080p",
    "720p",
    "480p",
    "360p",
    "240p",
    "144p",
)

MIN_VIDEO_RENDITIONS: int = 3
MAX_VIDEO_RENDITIONS: int = 6

PREFERRED_AUDIO_KEYS: tuple[str, ...] = (
    "141",  # m4a 256k
    "140",  # m4a 128k
    "251",  # webm 160k
    "250",  # webm 70k
    "249",  # webm 50k
    "139",  # m4a 48k
)

M4A_FAMILIES: frozenset[str] = frozenset({"m4a", "mp4a"})

PREFERRED_SUBTITLE_FORMATS: tuple[str, ...] = ("vtt", "srv3", "srv2", "srv1", "ttml")


# ---------------------------------------------------------------------------
# Shared ranking helpers
# ---------------------------------------------------------------------------

def language_priority(language: str) -> int:
    """Rank a normalized language: original first, then English, then rest."""
    if language in (UNDEFINED_LANGUAGE, "original"):
        return 0
    if language == "en":
        return 1
    return 2


def _max_bandwidth(renditions: Iterable[AudioRendition]) -> AudioRendition | None:
    """Return the highest-bandwidth item; the first one wins ties."""
    return max(renditions, key=lambda r: r.bandwidth, default=None)


# ---------------------------------------------------------------------------
# 1. Video
# ---------------------------------------------------------------------------

def _tier_rank(rendition: VideoRendition) -> int:
    try:
        return QUALITY_TIERS.index(rendition.quality_label)
    except ValueError:
        return len(QUALITY_TIERS)


def select_video(renditions: Sequence[VideoRendition] | None) -> list[VideoRendition]:
    """Pick up to six renditions across quality tiers, at least three.

    One rendition is taken per tier, highest tier first.  When fewer than
    :data:`MIN_VIDEO_RENDITIONS` tiers match, the highest-bandwidth
    remaining renditions fill the gap.  The result is ordered by tier,
    with unrecognised labels last.
    """
    if not renditions:
        logger.warning("No video renditions available for selection")
        return []

    logger.info("Selecting from %d video renditions", len(renditions))
    selected: list[VideoRendition] = []

    for tier in QUALITY_TIERS:
        match = next((r for r in renditions if r.quality_label == tier), None)
        if match is not None:
            selected.append(match)
        if len(selected) >= MAX_VIDEO_RENDITIONS:
            break

    if len(selected) < MIN_VIDEO_RENDITIONS:
        chosen_ids = {r.id for r in selected}
        remaining = sorted(
            (r for r in renditions if r.id not in chosen_ids),
            key=lambda r: r.bandwidth,
            reverse=True,
        )
        selected.extend(remaining[: MIN_VIDEO_RENDITIONS - len(selected)])

    selected.sort(key=_tier_rank)

    logger.info("Selected %d of %d video renditions", len(selected), len(renditions))
    return selected


# ---------------------------------------------------------------------------
# 2. Audio
# ---------------------------------------------------------------------------

def group_audio_by_language(
    renditions: Iterable[AudioRendition],
) -> dict[str, list[AudioRendition]]:
    """Group renditions by normalized language, keeping first-seen order."""
    groups: dict[str, list[AudioRendition]] = {}
    for rendition in renditions:
        groups.setdefault(rendition.language, []).append(rendition)
    return groups


def best_audio_for_language(renditions: Sequence[AudioRendition]) -> AudioRendition | None:
    """Choose the preferred rendition among same-language candidates.

    Order of precedence: the first preferred stream key found, then the
    highest-bandwidth M4A/MP4A rendition, then the highest-bandwidth
    rendition of any family.
    """
    for key in PREFERRED_AUDIO_KEYS:
        match = next((r for r in renditions if r.preference_key == key), None)
        if match is not None:
            return match

    m4a = _max_bandwidth(
        r for r in renditions
        if r.format_family is not None and r.format_family.lower() in M4A_FAMILIES
    )
    if m4a is not None:
        return m4a
    return _max_bandwidth(renditions)


def select_audio(renditions: Sequence[AudioRendition] | None) -> list[AudioRendition]:
    """Pick the best rendition for every language present."""
    if not renditions:
        logger.warning("No audio renditions available for selection")
        return []

    logger.info("Selecting from %d audio renditions", len(renditions))
    groups = group_audio_by_language(renditions)

    selected = [
        best
        for best in (best_audio_for_language(group) for group in groups.values())
        if best is not None
    ]
    selected.sort(key=lambda r: (language_priority(r.language), r.language))

    logger.info(
        "Selected %d audio renditions (%d languages) of %d",
        len(selected),
        len(groups),
        len(renditions),
    )
    return selected


# ---------------------------------------------------------------------------
# 3. Subtitles
# ---------------------------------------------------------------------------

def filter_subtitles_by_format(
    renditions: Sequence[SubtitleRendition],
) -> list[SubtitleRendition]:
    """Keep only the most preferred text format that is present.

    A token matches a rendition's format name or suffix, ignoring case.
    When no preferred format is present the input is returned unchanged.
    """
    for token in PREFERRED_SUBTITLE_FORMATS:
        matching = [
            r for r in renditions
            if token == r.format_name.lower() or token == r.format_suffix.lower()
        ]
        if matching:
            return matching
    return list(renditions)


def deduplicate_subtitles(
    renditions: Sequence[SubtitleRendition],
) -> list[SubtitleRendition]:
    """Keep one track per language, preferring manually authored ones.

    A manual track replaces an earlier automatic one for the same
    language; an automatic track never replaces an existing entry.
    """
    by_language: dict[str, SubtitleRendition] = {}
    for rendition in renditions:
        existing = by_language.get(rendition.language)
        if existing is None or (existing.auto_generated and not rendition.auto_generated):
            by_language[rendition.language] = rendition
    return list(by_language.values())


def _subtitle_sort_key(rendition: SubtitleRendition) -> tuple[int, bool, str]:
    language = rendition.language
    return (language_priority(language), rendition.auto_generated, language)


def select_subtitles(
    renditions: Sequence[SubtitleRendition] | None,
) -> list[SubtitleRendition]:
    """Run the format filter → deduplicate → sort pipeline."""
    if not renditions:
        logger.info("No subtitles available for selection")
        return []

    logger.info("Selecting from %d subtitle renditions", len(renditions))
    filtered = filter_subtitles_by_format(renditions)
    selected = sorted(deduplicate_subtitles(filtered), key=_subtitle_sort_key)

    logger.info("Selected %d of %d subtitle renditions", len(selected), len(renditions))
    return selected


# ---------------------------------------------------------------------------
# Composite pipeline
# ---------------------------------------------------------------------------

def select_renditions(catalog: RenditionCatalog) -> SelectionResult:
    """Select video, audio and subtitle renditions from a full catalog."""
    result = SelectionResult(
        video=tuple(select_video(catalog.video)),
        audio=tuple(select_audio(catalog.audio)),
        subtitles=tuple(select_subtitles(catalog.subtitles)),
    )
    _log_selection(result)
    return result


def _log_selection(result: SelectionResult) -> None:
    for i, video in enumerate(result.video, start=1):
        logger.debug(
            "  video %d. %s - %s - %d bps",
            i, video.quality_label, video.codec, video.bandwidth,
        )
    for i, audio in enumerate(result.audio, start=1):
        logger.debug(
            "  audio %d. %s (%s) - %s - %d bps",
            i, audio.track_name or "Unknown", audio.language,
            audio.format_family, audio.bandwidth,
        )
    for i, sub in enumerate(result.subtitles, start=1):
        logger.debug(
            "  subtitle %d. %s (%s) - %s [%s]",
            i, sub.display_name or sub.language.upper(), sub.language,
            sub.format_name, "auto" if sub.auto_generated else "manual",
        )
