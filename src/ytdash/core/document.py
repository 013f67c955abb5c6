"""In-memory manifest document produced by the assembler.

The tree mirrors the MPD layout one-to-one::

    ManifestDocument → Period → AdaptationSet* → Representation*

Every node is a frozen dataclass built fresh for a single manifest and
discarded once serialized.
"""

from __future__ import annotations

from dataclasses import dataclass

DASH_NAMESPACE: str = "urn:mpeg:dash:schema:mpd:2011"
ROLE_SCHEME: str = "urn:mpeg:dash:role:2011"
AUDIO_CHANNEL_SCHEME: str = "urn:mpeg:dash:23003:3:audio_channel_configuration:2011"


@dataclass(frozen=True, slots=True)
class SegmentBase:
    """Byte ranges locating the init segment and segment index."""

    index_range: str
    init_range: str


@dataclass(frozen=True, slots=True)
class VideoRepresentation:
    id: str
    bandwidth: int
    codecs: str
    width: int
    height: int
    frame_rate: str
    base_url: str
    segment_base: SegmentBase | None = None


@dataclass(frozen=True, slots=True)
class AudioRepresentation:
    id: str
    bandwidth: int
    codecs: str
    audio_sampling_rate: int
    audio_channels: int
    base_url: str
    segment_base: SegmentBase | None = None


@dataclass(frozen=True, slots=True)
class TextRepresentation:
    id: str
    bandwidth: int
    base_url: str


Representation = VideoRepresentation | AudioRepresentation | TextRepresentation


@dataclass(frozen=True, slots=True)
class AdaptationSet:
    """A group of interchangeable representations of one content type.

    ``lang`` and ``label`` are only set for audio and text sets, ``role``
    only for text sets.
    """

    id: int
    content_type: str
    """One of ``"video"``, ``"audio"`` or ``"text"``."""

    mime_type: str
    representations: tuple[Representation, ...]
    lang: str | None = None
    label: str | None = None
    role: str | None = None


@dataclass(frozen=True, slots=True)
class Period:
    duration: str
    adaptation_sets: tuple[AdaptationSet, ...] = ()


@dataclass(frozen=True, slots=True)
class ManifestDocument:
    """Root of the manifest tree."""

    manifest_type: str
    media_presentation_duration: str
    min_buffer_time: str
    profiles: str
    period: Period

    def adaptation_sets(self, content_type: str) -> tuple[AdaptationSet, ...]:
        """Return the adaptation sets of one content type, in document order."""
        return tuple(
            aset
            for aset in self.period.adaptation_sets
            if aset.content_type == content_type
        )
