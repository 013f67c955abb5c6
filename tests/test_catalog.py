"""Tests for yt-dlp info dict conversion (core/catalog.py).

No yt-dlp invocation — raw dicts mirror the shape of
``YoutubeDL.extract_info`` output.
"""

from __future__ import annotations

import logging
from typing import Any

import pytest

from ytdash.core.catalog import (
    build_manifest_config,
    is_audio_only,
    is_video_only,
    parse_audio_format,
    parse_catalog,
    parse_subtitle,
    parse_video_format,
)
from ytdash.core.models import RenditionCatalog
from ytdash.exceptions import RenditionConversionError


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _raw_video(**overrides: Any) -> dict[str, Any]:
    d: dict[str, Any] = {
        "format_id": "137",
        "url": "https://rr1.example/videoplayback?itag=137",
        "protocol": "https",
        "ext": "mp4",
        "width": 1920,
        "height": 1080,
        "fps": 30,
        "tbr": 4400.5,
        "vcodec": "avc1.640028",
        "acodec": "none",
        "format_note": "1080p",
    }
    d.update(overrides)
    return d


def _raw_audio(**overrides: Any) -> dict[str, Any]:
    d: dict[str, Any] = {
        "format_id": "140",
        "url": "https://rr1.example/videoplayback?itag=140",
        "protocol": "https",
        "ext": "m4a",
        "asr": 44100,
        "audio_channels": 2,
        "abr": 129.5,
        "vcodec": "none",
        "acodec": "mp4a.40.2",
        "format_note": "medium",
    }
    d.update(overrides)
    return d


def _track(ext: str = "vtt", **overrides: Any) -> dict[str, Any]:
    d: dict[str, Any] = {"ext": ext, "url": f"https://www.youtube.com/api/timedtext?fmt={ext}"}
    d.update(overrides)
    return d


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

class TestClassification:
    def test_video_only(self) -> None:
        assert is_video_only(_raw_video())
        assert not is_audio_only(_raw_video())

    def test_audio_only(self) -> None:
        assert is_audio_only(_raw_audio())
        assert not is_video_only(_raw_audio())

    def test_muxed_is_neither(self) -> None:
        muxed = _raw_video(acodec="mp4a.40.2")
        assert not is_video_only(muxed)
        assert not is_audio_only(muxed)

    def test_missing_codecs_is_neither(self) -> None:
        assert not is_video_only({"format_id": "sb0"})
        assert not is_audio_only({"format_id": "sb0"})


# ---------------------------------------------------------------------------
# Video
# ---------------------------------------------------------------------------

class TestParseVideoFormat:
    def test_fields(self) -> None:
        r = parse_video_format(_raw_video())
        assert r.id == "137"
        assert r.codec == "avc1.640028"
        assert r.mime_type == "video/mp4"
        assert r.bandwidth == 4_400_500
        assert (r.width, r.height) == (1920, 1080)
        assert r.quality_label == "1080p"
        assert r.frame_rate == "30"
        assert r.init_range is None

    def test_quality_label_keeps_frame_rate_suffix(self) -> None:
        r = parse_video_format(_raw_video(format_note="1080p60, HDR"))
        assert r.quality_label == "1080p60"

    def test_quality_label_from_height(self) -> None:
        r = parse_video_format(_raw_video(format_note=None, height=720))
        assert r.quality_label == "720p"

    def test_vbr_fallback(self) -> None:
        r = parse_video_format(_raw_video(tbr=None, vbr=1000))
        assert r.bandwidth == 1_000_000

    def test_fractional_fps_kept(self) -> None:
        assert parse_video_format(_raw_video(fps=29.97)).frame_rate == "29.97"

    def test_webm_mime_type(self) -> None:
        r = parse_video_format(_raw_video(ext="webm", vcodec="vp9"))
        assert r.mime_type == "video/webm"

    def test_unknown_container_has_no_mime_type(self) -> None:
        assert parse_video_format(_raw_video(ext="flv")).mime_type is None

    @pytest.mark.parametrize(
        "init, index, expected",
        [
            ("0-740", "741-1048", ("0-740", "741-1048")),
            ({"start": 0, "end": 740}, {"start": 741, "end": 1048}, ("0-740", "741-1048")),
            ({"start": 0}, "", (None, None)),
        ],
    )
    def test_byte_ranges(self, init: Any, index: Any, expected: tuple[Any, Any]) -> None:
        r = parse_video_format(_raw_video(init_range=init, index_range=index))
        assert (r.init_range, r.index_range) == expected

    @pytest.mark.parametrize(
        "missing",
        ["format_id", "url", "vcodec", "height", "width", "fps"],
    )
    def test_missing_required_field_raises(self, missing: str) -> None:
        raw = _raw_video()
        del raw[missing]
        with pytest.raises(RenditionConversionError):
            parse_video_format(raw)

    def test_missing_bitrate_raises(self) -> None:
        with pytest.raises(RenditionConversionError, match="bitrate"):
            parse_video_format(_raw_video(tbr=None))


# ---------------------------------------------------------------------------
# Audio
# ---------------------------------------------------------------------------

class TestParseAudioFormat:
    def test_fields(self) -> None:
        r = parse_audio_format(_raw_audio())
        assert r.id == "140"
        assert r.mime_type == "audio/mp4"
        assert r.bandwidth == 129_500
        assert r.channels == 2
        assert r.sample_rate == 44100
        assert r.format_family == "M4A"
        assert r.preference_key == "140"
        assert r.language == "und"
        assert r.track_name is None

    def test_multi_track_format_id_and_name(self) -> None:
        r = parse_audio_format(
            _raw_audio(
                format_id="251-1",
                ext="webm",
                acodec="opus",
                language="es-US",
                format_note="Spanish (United States) original (default), medium",
            )
        )
        assert r.preference_key == "251"
        assert r.format_family == "WEBM"
        assert r.language == "es-us"
        assert r.track_name == "Spanish (United States) original"

    def test_channels_default_to_stereo(self) -> None:
        assert parse_audio_format(_raw_audio(audio_channels=None)).channels == 2

    def test_missing_sample_rate_raises(self) -> None:
        with pytest.raises(RenditionConversionError, match="asr"):
            parse_audio_format(_raw_audio(asr=None))


# ---------------------------------------------------------------------------
# Subtitles
# ---------------------------------------------------------------------------

class TestParseSubtitle:
    def test_manual_vtt(self) -> None:
        s = parse_subtitle("en", _track(name="English"), auto_generated=False)
        assert s.id == "sub-en-vtt"
        assert s.mime_type == "text/vtt"
        assert s.format_name == "WebVTT"
        assert s.display_name == "English"
        assert s.kind == "subtitles"

    def test_automatic(self) -> None:
        s = parse_subtitle("fr", _track("srv3"), auto_generated=True)
        assert s.id == "auto-fr-srv3"
        assert s.kind == "asr"
        assert s.format_name == "TranScript v3"

    def test_srt(self) -> None:
        s = parse_subtitle("de", _track("srt"), auto_generated=False)
        assert (s.format_name, s.mime_type) == ("SubRip file format", "application/x-subrip")

    def test_unknown_suffix_defaults_to_ttml_mime(self) -> None:
        s = parse_subtitle("de", _track("xyz"), auto_generated=False)
        assert s.mime_type == "application/ttml+xml"
        assert s.format_name == "xyz"

    def test_missing_url_raises(self) -> None:
        with pytest.raises(RenditionConversionError):
            parse_subtitle("en", {"ext": "vtt"}, auto_generated=False)


# ---------------------------------------------------------------------------
# Whole catalog
# ---------------------------------------------------------------------------

class TestParseCatalog:
    def test_splits_by_kind(self) -> None:
        info = {
            "formats": [
                _raw_video(),
                _raw_audio(),
                _raw_video(format_id="18", acodec="mp4a.40.2"),
                {"format_id": "sb0", "vcodec": "none", "acodec": "none"},
            ],
        }
        catalog = parse_catalog(info)
        assert [r.id for r in catalog.video] == ["137"]
        assert [r.id for r in catalog.audio] == ["140"]
        assert catalog.skipped == ()

    def test_non_http_protocols_ignored(self) -> None:
        info = {"formats": [_raw_video(protocol="m3u8_native"), _raw_audio(protocol="http_dash_segments")]}
        assert not parse_catalog(info)

    def test_bad_record_skipped_with_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        info = {"formats": [_raw_video(format_id="299", height=None), _raw_video()]}
        with caplog.at_level(logging.WARNING, logger="ytdash.core.catalog"):
            catalog = parse_catalog(info)
        assert [r.id for r in catalog.video] == ["137"]
        assert len(catalog.skipped) == 1
        assert "299" in catalog.skipped[0]
        assert "Skipping format 299" in caplog.text

    def test_subtitles_and_original_auto_captions(self) -> None:
        info = {
            "subtitles": {
                "en": [_track("vtt"), _track("srv3")],
                "live_chat": [_track("json")],
            },
            "automatic_captions": {
                "en-orig": [_track("vtt")],
                "de": [_track("vtt")],
            },
        }
        catalog = parse_catalog(info)
        assert [s.id for s in catalog.subtitles] == ["sub-en-vtt", "sub-en-srv3", "auto-en-vtt"]

    def test_missing_sections(self) -> None:
        assert parse_catalog({}) == RenditionCatalog()

    def test_malformed_sections_ignored(self) -> None:
        info = {"formats": "nope", "subtitles": ["x"], "automatic_captions": None}
        assert parse_catalog(info) == RenditionCatalog()


# ---------------------------------------------------------------------------
# Config builder
# ---------------------------------------------------------------------------

class TestBuildManifestConfig:
    def test_whole_seconds(self) -> None:
        config = build_manifest_config(RenditionCatalog(), 212)
        assert config.duration_seconds == 212
        assert config.media_presentation_duration is None
        assert config.presentation_duration == "PT3M32S"

    def test_fractional_seconds(self) -> None:
        config = build_manifest_config(RenditionCatalog(), 119.702)
        assert config.duration_seconds == 120
        assert config.presentation_duration == "PT1M59.702S"

    @pytest.mark.parametrize("duration", [None, 0, -1.5])
    def test_missing_duration_becomes_zero(self, duration: float | None) -> None:
        assert build_manifest_config(RenditionCatalog(), duration).duration_seconds == 0

    def test_options_passed_through(self) -> None:
        config = build_manifest_config(RenditionCatalog(), 10, manifest_type="dynamic")
        assert config.manifest_type == "dynamic"
