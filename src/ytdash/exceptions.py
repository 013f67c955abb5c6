"""Custom exception hierarchy for ytdash.

All exceptions that cross layer boundaries must inherit from
:class:`YtDashError`.  Raw third-party exceptions (e.g. from yt-dlp)
must NEVER propagate beyond the infrastructure layer — they must be
caught and re-raised as a typed subclass defined here.

Hierarchy
---------
YtDashError
├── InvalidURLError
├── MetadataExtractionError
├── VideoUnavailableError
├── ManifestValidationError
├── RenditionConversionError
├── OutputError
└── EnvironmentError
"""

from __future__ import annotations


class YtDashError(Exception):
    """Base exception for all ytdash errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- URL validation --------------------------------------------------------

class InvalidURLError(YtDashError):
    """Raised when the provided URL or video id fails validation."""


# --- Metadata / extraction -------------------------------------------------

class MetadataExtractionError(YtDashError):
    """Raised when yt-dlp fails to extract video metadata."""


class VideoUnavailableError(YtDashError):
    """Raised when the target video is unavailable (private, removed, etc.)."""


# --- Manifest generation ---------------------------------------------------

class ManifestValidationError(YtDashError):
    """Raised when a manifest configuration cannot be assembled.

    This is the only condition that aborts manifest generation entirely.
    """


class RenditionConversionError(YtDashError):
    """Raised when a single raw format record cannot be converted.

    Callers converting a whole catalog catch this per record, drop the
    record and carry on with the rest.
    """


# --- Output ----------------------------------------------------------------

class OutputError(YtDashError):
    """Raised when the rendered manifest cannot be written."""


# --- Environment / tooling -------------------------------------------------

class EnvironmentError(YtDashError):
    """Raised when a required runtime dependency is not available."""


def append_ytdlp_upgrade_suggestion(hint: str) -> str:
    """Append yt-dlp upgrade guidance to an existing hint text.

    The suggestion is appended only once and preserves the original
    hint content verbatim.
    """
    marker = "Also try updating yt-dlp:"
    if marker in hint:
        return hint
    return "\n".join(
        (
            hint,
            marker,
            "    pip install --upgrade yt-dlp",
        )
    )
