"""yt-dlp backed implementation of :class:`~ytdash.core.protocols.MetadataProvider`.

This module is the **only** place in the codebase that imports ``yt_dlp``.
All yt-dlp exceptions are caught here and re-raised as typed
:class:`~ytdash.exceptions.YtDashError` subclasses — nothing raw
escapes the infrastructure boundary.
"""

from __future__ import annotations

import logging
from typing import Any

from ytdash.exceptions import (
    EnvironmentError,
    MetadataExtractionError,
    VideoUnavailableError,
    append_ytdlp_upgrade_suggestion,
)

logger = logging.getLogger(__name__)


class YtDlpMetadataProvider:
    """Concrete :class:`MetadataProvider` backed by the yt-dlp Python API.

    Usage::

        provider = YtDlpMetadataProvider()
        info = provider.fetch_info("https://www.youtube.com/watch?v=...")

    yt-dlp's own diagnostics are routed into the ``ytdash.infra.ytdlp``
    logger instead of being printed.
    """

    # Substrings in yt-dlp error messages that indicate the video itself
    # is unavailable (as opposed to a transient or extraction error).
    _UNAVAILABLE_SIGNALS: tuple[str, ...] = (
        "unavailable",
        "private video",
        "removed",
        "not available",
        "account terminated",
        "this video is no longer available",
        "sign in to confirm your age",
    )

    def __init__(self, *, extra_opts: dict[str, Any] | None = None) -> None:
        self._extra_opts: dict[str, Any] = dict(extra_opts or {})

    def _build_opts(self) -> dict[str, Any]:
        """Return yt-dlp options for a single-video, metadata-only extraction."""
        opts: dict[str, Any] = {
            "quiet": True,
            "no_warnings": True,
            "no_color": True,
            "noplaylist": True,
            "skip_download": True,
            "logger": logging.getLogger("ytdash.infra.ytdlp"),
        }
        opts.update(self._extra_opts)
        return opts

    # ------------------------------------------------------------------
    # Protocol method
    # ------------------------------------------------------------------

    def fetch_info(self, url: str) -> dict[str, Any]:
        """Extract the info dict for *url* without downloading any media.

        Raises
        ------
        EnvironmentError
            When yt-dlp is not installed.
        VideoUnavailableError
            When yt-dlp reports the video as unavailable / private / removed.
        MetadataExtractionError
            For all other extraction failures.
        """
        try:
            import yt_dlp
            import yt_dlp.utils
        except ModuleNotFoundError as exc:
            raise EnvironmentError(
                "yt-dlp is not installed. Install with: pip install yt-dlp",
            ) from exc

        logger.debug("Extracting info for %s", url)
        try:
            with yt_dlp.YoutubeDL(self._build_opts()) as ydl:
                info: Any = ydl.extract_info(url, download=False)
        except yt_dlp.utils.DownloadError as exc:
            self._raise_mapped(exc)
        except Exception as exc:
            raise MetadataExtractionError(
                f"Unexpected yt-dlp error: {exc}",
            ) from exc

        if not isinstance(info, dict):
            raise MetadataExtractionError(
                "yt-dlp returned no metadata for the given URL.",
                hint="The URL may not point to a single video.",
            )

        formats = info.get("formats")
        logger.debug(
            "yt-dlp returned %d formats for %s",
            len(formats) if isinstance(formats, list) else 0,
            info.get("id", url),
        )
        return dict(info)

    # ------------------------------------------------------------------
    # Exception mapping
    # ------------------------------------------------------------------

    @classmethod
    def _raise_mapped(cls, exc: Exception) -> None:
        """Translate a yt-dlp ``DownloadError`` into a domain exception."""
        message = str(exc)
        if any(signal in message.lower() for signal in cls._UNAVAILABLE_SIGNALS):
            raise VideoUnavailableError(
                message,
                hint="The video may be private, removed, or geo-restricted.",
            ) from exc
        raise MetadataExtractionError(
            message,
            hint=append_ytdlp_upgrade_suggestion("Check the URL and your network connection."),
        ) from exc
