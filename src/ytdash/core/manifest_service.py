"""Core manifest service — orchestrates extraction, selection and rendering.

This is the central service class consumed by the CLI layer.  It
depends on a :class:`~ytdash.core.protocols.MetadataProvider` injected
at construction time (dependency inversion), keeping the core free of
any external-system imports.

Guarantees
----------
* Pure orchestration — no I/O, no ``print()``, no filesystem access.
* Only :class:`~ytdash.exceptions.YtDashError` subclasses escape.
* All parsing logic is deterministic and stateless.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any

from ytdash.core.catalog import build_manifest_config, parse_catalog
from ytdash.core.manifest_assembler import assemble_manifest
from ytdash.core.manifest_writer import serialize_manifest
from ytdash.core.models import (
    DEFAULT_MANIFEST_TYPE,
    DEFAULT_MIN_BUFFER_TIME,
    DEFAULT_PROFILES,
    RenditionCatalog,
    SelectionResult,
    VideoMetadata,
)
from ytdash.core.protocols import MetadataProvider
from ytdash.core.stream_selector import select_renditions
from ytdash.exceptions import (
    InvalidURLError,
    MetadataExtractionError,
    YtDashError,
)

logger = logging.getLogger(__name__)

WATCH_URL: str = "https://www.youtube.com/watch?v="

_VIDEO_ID = re.compile(r"^[A-Za-z0-9_-]{11}$")


class ManifestService:
    """Stateless service that turns a video URL into a DASH manifest.

    Parameters
    ----------
    provider:
        Any object satisfying the :class:`MetadataProvider` protocol.
    """

    def __init__(self, provider: MetadataProvider) -> None:
        self._provider: MetadataProvider = provider

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def extract_metadata(self, url: str) -> VideoMetadata:
        """Extract top-level metadata for a single video.

        Raises
        ------
        InvalidURLError
            If *url* is empty or malformed.
        MetadataExtractionError
            If the backend fails to return metadata.
        VideoUnavailableError
            If the video is confirmed unavailable.
        """
        return self.metadata_from_info(self._fetch(self.resolve_url(url)))

    def fetch_info(self, url: str) -> dict[str, Any]:
        """Return the raw provider info dict for *url*."""
        return self._fetch(self.resolve_url(url))

    def get_catalog(self, url: str) -> RenditionCatalog:
        """Return every video-only, audio-only and subtitle rendition for *url*."""
        return parse_catalog(self._fetch(self.resolve_url(url)))

    def select_renditions(self, url: str) -> SelectionResult:
        """Return the renditions a manifest for *url* would contain."""
        return select_renditions(self.get_catalog(url))

    def generate_manifest(
        self,
        url: str,
        *,
        select: bool = True,
        manifest_type: str = DEFAULT_MANIFEST_TYPE,
        min_buffer_time: str = DEFAULT_MIN_BUFFER_TIME,
        profiles: str = DEFAULT_PROFILES,
    ) -> str:
        """Fetch *url* and render its DASH manifest.

        Raises
        ------
        InvalidURLError
            If *url* is empty or malformed.
        MetadataExtractionError
            If the backend fails to return metadata.
        VideoUnavailableError
            If the video is confirmed unavailable.
        ManifestValidationError
            If the video has no usable duration (e.g. a live stream).
        """
        return self.manifest_from_info(
            self.fetch_info(url),
            select=select,
            manifest_type=manifest_type,
            min_buffer_time=min_buffer_time,
            profiles=profiles,
        )

    @classmethod
    def manifest_from_info(
        cls,
        info: Mapping[str, Any],
        *,
        select: bool = True,
        manifest_type: str = DEFAULT_MANIFEST_TYPE,
        min_buffer_time: str = DEFAULT_MIN_BUFFER_TIME,
        profiles: str = DEFAULT_PROFILES,
    ) -> str:
        """Render a manifest from an already-fetched yt-dlp info dict."""
        metadata = cls.metadata_from_info(info)
        logger.info("Generating DASH manifest for video: %s", metadata.title)

        catalog = parse_catalog(info)
        renditions: RenditionCatalog | SelectionResult = (
            select_renditions(catalog) if select else catalog
        )
        config = build_manifest_config(
            renditions,
            metadata.duration,
            manifest_type=manifest_type,
            min_buffer_time=min_buffer_time,
            profiles=profiles,
        )
        document = assemble_manifest(config).unwrap()
        return serialize_manifest(document)

    # ------------------------------------------------------------------
    # URL validation
    # ------------------------------------------------------------------

    @staticmethod
    def resolve_url(target: str) -> str:
        """Return an http(s) URL for *target*, expanding bare video ids.

        Raises :class:`InvalidURLError` for empty or unrecognised input.
        """
        stripped = target.strip()
        if not stripped:
            raise InvalidURLError("URL must not be empty.")
        if stripped.startswith(("http://", "https://")):
            return stripped
        if _VIDEO_ID.match(stripped):
            return WATCH_URL + stripped
        raise InvalidURLError(
            f"Invalid URL: {stripped}",
            hint="Pass an http(s):// URL or an 11-character YouTube video id.",
        )

    # ------------------------------------------------------------------
    # Provider delegation (safe boundary)
    # ------------------------------------------------------------------

    def _fetch(self, url: str) -> dict[str, Any]:
        """Call the provider and ensure only our exceptions escape."""
        try:
            return self._provider.fetch_info(url)
        except YtDashError:
            # Already a domain error.
            raise
        except Exception as exc:
            raise MetadataExtractionError(
                f"Unexpected provider error: {exc}",
            ) from exc

    # ------------------------------------------------------------------
    # Raw-dict → domain-model parsers (pure)
    # ------------------------------------------------------------------

    @staticmethod
    def metadata_from_info(info: Mapping[str, Any]) -> VideoMetadata:
        """Convert a raw info dict into a :class:`VideoMetadata`."""
        raw_duration = info.get("duration")
        duration: float | None = (
            float(raw_duration) if isinstance(raw_duration, (int, float)) else None
        )
        return VideoMetadata(
            id=str(info.get("id", "")),
            title=str(info.get("title", "Unknown")),
            duration=duration,
            webpage_url=str(info.get("webpage_url", "")),
        )
