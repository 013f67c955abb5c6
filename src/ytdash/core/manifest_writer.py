"""Render a :class:`~ytdash.core.document.ManifestDocument` as MPD text.

The layout is fixed so that output is byte-for-byte reproducible:
two-space indentation per level, one attribute per line on ``MPD``,
``AdaptationSet`` and video/audio ``Representation`` elements, and a
trailing newline after every element.  Attribute values and text
content are escaped exactly once, here.
"""

from __future__ import annotations

from ytdash.core.document import (
    AUDIO_CHANNEL_SCHEME,
    DASH_NAMESPACE,
    ROLE_SCHEME,
    AdaptationSet,
    AudioRepresentation,
    ManifestDocument,
    Representation,
    SegmentBase,
    TextRepresentation,
    VideoRepresentation,
)
from ytdash.utils.formatting import escape_xml, indent

XML_DECLARATION: str = '<?xml version="1.0" encoding="UTF-8"?>'


def _open_tag(name: str, attributes: list[tuple[str, object]], level: int) -> list[str]:
    """Emit ``<name`` followed by one ``key="value"`` line per attribute."""
    lines = [f"{indent(level)}<{name}"]
    for i, (key, value) in enumerate(attributes):
        closer = ">" if i == len(attributes) - 1 else ""
        lines.append(f'{indent(level + 1)}{key}="{escape_xml(str(value))}"{closer}')
    return lines


def _base_url(url: str, level: int) -> str:
    return f"{indent(level)}<BaseURL>{escape_xml(url)}</BaseURL>"


def _segment_base(segment: SegmentBase, level: int) -> list[str]:
    return [
        f'{indent(level)}<SegmentBase indexRange="{escape_xml(segment.index_range)}">',
        f'{indent(level + 1)}<Initialization range="{escape_xml(segment.init_range)}"/>',
        f"{indent(level)}</SegmentBase>",
    ]


# ---------------------------------------------------------------------------
# Representations
# ---------------------------------------------------------------------------

def _representation(rep: Representation, level: int) -> list[str]:
    match rep:
        case VideoRepresentation():
            lines = _open_tag(
                "Representation",
                [
                    ("id", rep.id),
                    ("bandwidth", rep.bandwidth),
                    ("codecs", rep.codecs),
                    ("width", rep.width),
                    ("height", rep.height),
                    ("frameRate", rep.frame_rate),
                ],
                level,
            )
            lines.append(_base_url(rep.base_url, level + 1))
        case AudioRepresentation():
            lines = _open_tag(
                "Representation",
                [
                    ("id", rep.id),
                    ("bandwidth", rep.bandwidth),
                    ("codecs", rep.codecs),
                    ("audioSamplingRate", rep.audio_sampling_rate),
                ],
                level,
            )
            lines.append(f"{indent(level + 1)}<AudioChannelConfiguration")
            lines.append(f'{indent(level + 2)}schemeIdUri="{AUDIO_CHANNEL_SCHEME}"')
            lines.append(f'{indent(level + 2)}value="{rep.audio_channels}"/>')
            lines.append(_base_url(rep.base_url, level + 1))
        case TextRepresentation():
            return [
                f'{indent(level)}<Representation id="{escape_xml(rep.id)}" '
                f'bandwidth="{rep.bandwidth}">',
                _base_url(rep.base_url, level + 1),
                f"{indent(level)}</Representation>",
            ]

    if rep.segment_base is not None:
        lines.extend(_segment_base(rep.segment_base, level + 1))
    lines.append(f"{indent(level)}</Representation>")
    return lines


# ---------------------------------------------------------------------------
# Adaptation sets
# ---------------------------------------------------------------------------

def _adaptation_set_attributes(aset: AdaptationSet) -> list[tuple[str, object]]:
    attributes: list[tuple[str, object]] = [("id", aset.id), ("contentType", aset.content_type)]
    if aset.content_type == "text":
        attributes += [("lang", aset.lang), ("mimeType", aset.mime_type)]
        return attributes

    attributes.append(("mimeType", aset.mime_type))
    if aset.lang is not None:
        attributes.append(("lang", aset.lang))
    if aset.label is not None:
        attributes.append(("label", aset.label))
    attributes += [("subsegmentAlignment", "true"), ("startWithSAP", 1)]
    return attributes


def _adaptation_set(aset: AdaptationSet, level: int) -> list[str]:
    lines = _open_tag("AdaptationSet", _adaptation_set_attributes(aset), level)
    if aset.role is not None:
        lines.append(
            f'{indent(level + 1)}<Role schemeIdUri="{ROLE_SCHEME}" '
            f'value="{escape_xml(aset.role)}"/>'
        )
    for rep in aset.representations:
        lines.extend(_representation(rep, level + 1))
    lines.append(f"{indent(level)}</AdaptationSet>")
    return lines


# ---------------------------------------------------------------------------
# Document
# ---------------------------------------------------------------------------

def serialize_manifest(document: ManifestDocument) -> str:
    """Render *document* as a complete MPD text, ending with a newline."""
    lines = [
        XML_DECLARATION,
        f'<MPD xmlns="{DASH_NAMESPACE}"',
        f'     type="{escape_xml(document.manifest_type)}"',
        f'     mediaPresentationDuration="{escape_xml(document.media_presentation_duration)}"',
        f'     minBufferTime="{escape_xml(document.min_buffer_time)}"',
        f'     profiles="{escape_xml(document.profiles)}">',
        f'{indent(1)}<Period duration="{escape_xml(document.period.duration)}">',
    ]
    for aset in document.period.adaptation_sets:
        lines.extend(_adaptation_set(aset, 2))
    lines.append(f"{indent(1)}</Period>")
    lines.append("</MPD>")
    return "\n".join(lines) + "\n"
