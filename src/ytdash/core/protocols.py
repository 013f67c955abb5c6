"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols — never on concrete
implementations — preserving the dependency inversion principle.
"""

from __future__ import annotations

from typing import Any, Protocol


class MetadataProvider(Protocol):
    """Contract for metadata extraction backends.

    Any object that implements :meth:`fetch_info` with the correct
    signature satisfies this protocol structurally (no explicit
    inheritance required).
    """

    def fetch_info(self, url: str) -> dict[str, Any]:
        """Fetch raw metadata for *url* and return a provider-specific dict.

        The returned dict follows the yt-dlp info layout and should
        contain at least:

        * ``"id"`` — video identifier (``str``)
        * ``"title"`` — video title (``str``)
        * ``"duration"`` — length in seconds (``int`` / ``float``)
        * ``"formats"`` — list of format dicts (``list[dict]``)
        * ``"subtitles"`` / ``"automatic_captions"`` — optional
          ``{language: [track dict, ...]}`` mappings

        Implementations must map all backend-specific exceptions to
        :class:`~ytdash.exceptions.YtDashError` subclasses.

        Raises
        ------
        MetadataExtractionError
            When the backend fails to extract metadata.
        VideoUnavailableError
            When the target video is confirmed unavailable.
        """
        ...  # pragma: no cover
