"""Pure string helpers used when rendering manifests.

Nothing here performs I/O; every function maps already-validated data
to text and is safe to call from any layer.
"""

from __future__ import annotations

import re

_XML_ESCAPES: tuple[tuple[str, str], ...] = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&apos;"),
)

_LANGUAGE_NAMES: dict[str, str] = {
    "en": "English",
    "es": "Spanish",
    "fr": "French",
    "de": "German",
    "it": "Italian",
    "pt": "Portuguese",
    "ru": "Russian",
    "ja": "Japanese",
    "ko": "Korean",
    "zh": "Chinese",
    "ar": "Arabic",
    "hi": "Hindi",
    "nl": "Dutch",
    "pl": "Polish",
    "tr": "Turkish",
    "sv": "Swedish",
    "no": "Norwegian",
    "da": "Danish",
    "fi": "Finnish",
    "und": "Unknown",
}

UNDEFINED_LANGUAGE: str = "und"
"""Sentinel language code for tracks without language information."""


# ---------------------------------------------------------------------------
# XML
# ---------------------------------------------------------------------------

def escape_xml(text: str | None) -> str:
    """Escape the five XML special characters; ``&`` is replaced first."""
    if text is None:
        return ""
    for char, entity in _XML_ESCAPES:
        text = text.replace(char, entity)
    return text


def indent(level: int) -> str:
    """Return *level* two-space units, or ``""`` for non-positive levels."""
    return "  " * max(0, level)


# ---------------------------------------------------------------------------
# ISO-8601 durations
# ---------------------------------------------------------------------------

def format_duration(duration_seconds: int) -> str:
    """Format whole seconds as an ISO-8601 duration (``PT2H3M5S``).

    Zero components are omitted, except that seconds are always written
    when hours and minutes are both zero.  Non-positive input yields
    ``PT0S``.
    """
    if duration_seconds <= 0:
        return "PT0S"

    hours, remainder = divmod(int(duration_seconds), 3600)
    minutes, seconds = divmod(remainder, 60)

    parts = ["PT"]
    if hours > 0:
        parts.append(f"{hours}H")
    if minutes > 0:
        parts.append(f"{minutes}M")
    if seconds > 0 or (hours == 0 and minutes == 0):
        parts.append(f"{seconds}S")
    return "".join(parts)


def format_duration_with_millis(duration_seconds: float) -> str:
    """Format seconds as an ISO-8601 duration with millisecond precision.

    ``119.702`` becomes ``PT1M59.702S``; a whole number of seconds is
    written without a fractional part (``120.0`` becomes ``PT2M``).
    """
    if duration_seconds <= 0:
        return "PT0S"

    hours = int(duration_seconds // 3600)
    minutes = int((duration_seconds % 3600) // 60)
    seconds = duration_seconds % 60

    parts = ["PT"]
    if hours > 0:
        parts.append(f"{hours}H")
    if minutes > 0:
        parts.append(f"{minutes}M")
    if seconds > 0 or (hours == 0 and minutes == 0):
        if seconds == int(seconds):
            parts.append(f"{int(seconds)}S")
        else:
            parts.append(f"{seconds:.3f}S")
    return "".join(parts)


# ---------------------------------------------------------------------------
# Languages
# ---------------------------------------------------------------------------

def normalize_language_code(code: str | None) -> str:
    """Lower-case *code* and use hyphens; empty input becomes ``"und"``."""
    if not code:
        return UNDEFINED_LANGUAGE
    return code.replace("_", "-").lower()


def language_display_name(code: str | None) -> str:
    """Return an English display name for a language tag.

    Only the base subtag is considered (``"pt-BR"`` → ``"Portuguese"``).
    Unknown codes render as the upper-cased base subtag.
    """
    if not code:
        return "Unknown"
    base = re.split(r"[-_]", code, maxsplit=1)[0].lower()
    return _LANGUAGE_NAMES.get(base, base.upper())
