"""Core / service layer — pure business logic and data transformations.

Rules
-----
* No ``print()`` calls.
* No filesystem or network I/O.
* No imports from ``cli`` or ``infra``.
* All functions must be fully typed and deterministic.
"""

from ytdash.core.catalog import build_manifest_config, parse_catalog
from ytdash.core.manifest_assembler import AssemblyResult, assemble_manifest
from ytdash.core.manifest_service import ManifestService
from ytdash.core.manifest_writer import serialize_manifest
from ytdash.core.models import (
    AudioRendition,
    ManifestConfig,
    RenditionCatalog,
    SelectionResult,
    SubtitleRendition,
    VideoMetadata,
    VideoRendition,
)
from ytdash.core.protocols import MetadataProvider
from ytdash.core.stream_selector import select_renditions

__all__: list[str] = [
    "AssemblyResult",
    "AudioRendition",
    "ManifestConfig",
    "ManifestService",
    "MetadataProvider",
    "RenditionCatalog",
    "SelectionResult",
    "SubtitleRendition",
    "VideoMetadata",
    "VideoRendition",
    "assemble_manifest",
    "build_manifest_config",
    "parse_catalog",
    "select_renditions",
    "serialize_manifest",
]
