"""Infrastructure layer — external system integration.

This layer wraps all interaction with yt-dlp and the filesystem.  Every
raw third-party exception must be caught here and re-raised as a
:class:`~ytdash.exceptions.YtDashError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the core layer.
"""

from ytdash.infra.info_json import load_info_json
from ytdash.infra.ytdlp_provider import YtDlpMetadataProvider

__all__: list[str] = [
    "YtDlpMetadataProvider",
    "load_info_json",
]
