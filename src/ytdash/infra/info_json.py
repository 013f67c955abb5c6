"""Read a saved ``yt-dlp -J`` info dump from disk.

Lets a manifest be regenerated offline from an earlier extraction.  All
filesystem and decoding errors are mapped to
:class:`~ytdash.exceptions.MetadataExtractionError`.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from ytdash.exceptions import MetadataExtractionError


def load_info_json(path: str | Path) -> dict[str, Any]:
    """Load and return the info dict stored at *path*.

    Raises
    ------
    MetadataExtractionError
        If the file cannot be read, is not UTF-8 JSON, or does not hold a
        JSON object.
    """
    source = Path(path)
    try:
        text = source.read_text(encoding="utf-8")
    except OSError as exc:
        raise MetadataExtractionError(
            f"Cannot read info JSON file: {source}",
            hint=exc.strerror or None,
        ) from exc
    except UnicodeDecodeError as exc:
        raise MetadataExtractionError(
            f"Info JSON file is not valid UTF-8: {source}",
            hint="Create the file with: yt-dlp -J <url> > info.json",
        ) from exc

    try:
        info: Any = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MetadataExtractionError(
            f"Invalid info JSON in {source}: {exc.msg} (line {exc.lineno})",
            hint="Create the file with: yt-dlp -J <url> > info.json",
        ) from exc

    if not isinstance(info, dict):
        raise MetadataExtractionError(
            f"Info JSON in {source} is not an object.",
        )
    return info
