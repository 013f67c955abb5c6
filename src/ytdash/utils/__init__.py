"""Shared utilities — constants, formatting helpers, and cross-cutting concerns.

Rules
-----
* No business logic.
* No I/O.
* Importable by any layer.
"""

from ytdash.utils.formatting import (
    UNDEFINED_LANGUAGE,
    escape_xml,
    format_duration,
    format_duration_with_millis,
    indent,
    language_display_name,
    normalize_language_code,
)

__all__: list[str] = [
    "UNDEFINED_LANGUAGE",
    "escape_xml",
    "format_duration",
    "format_duration_with_millis",
    "indent",
    "language_display_name",
    "normalize_language_code",
]
