"""ytdash — DASH manifests for YouTube videos.

Built on the yt-dlp Python API with a strict layered architecture.
"""

from ytdash.version import __version__

__all__: list[str] = ["__version__"]
