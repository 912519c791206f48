# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Tests for demoscrape.collectors.media: inline video, bare URLs, data-duration."""

from __future__ import annotations

from demoscrape.collectors.media import collect_data_durations, collect_direct_video_urls, collect_inline_videos
from demoscrape.context import ExtractionContext
from demoscrape.models import VideoSourceType

PAGE = "https://site.example/p"


def _ctx() -> ExtractionContext:
    return ExtractionContext(page_url=PAGE)


class TestInlineVideo:
    def test_poster_src_and_sources(self):
        html = (
            '<video poster="/poster.jpg" src="/intro.mp4" controls>'
            '<source src="/a.webm" type="video/webm">'
            '<source src="/b.m3u8" label="HD stream">'
            "</video>"
        )
        ctx = _ctx()
        collect_inline_videos(html, ctx)
        assert ctx.thumbnail_candidates == ["https://site.example/poster.jpg"]
        assert [(s.url, s.label, s.mime_type) for s in ctx.registry.snapshot()] == [
            ("https://site.example/intro.mp4", "Inline video 1", None),
            ("https://site.example/a.webm", "Video source 1.1", "video/webm"),
            ("https://site.example/b.m3u8", "HD stream", None),
        ]

    def test_numbering_per_video_element(self):
        html = '<video src="/one.mp4"></video><p>between</p><VIDEO><SOURCE SRC="/two.mp4"></VIDEO>'
        ctx = _ctx()
        collect_inline_videos(html, ctx)
        assert [s.label for s in ctx.registry.snapshot()] == ["Inline video 1", "Video source 2.1"]

    def test_source_type_classifies_extensionless_src(self):
        html = '<video><source src="/play?id=3" type="application/vnd.apple.mpegurl"></video>'
        ctx = _ctx()
        collect_inline_videos(html, ctx)
        [source] = ctx.registry.resolved()
        assert source.type is VideoSourceType.HLS

    def test_child_attributes_not_read_as_video_attributes(self):
        html = '<video controls><track src="/subs.vtt" kind="captions"></video>'
        ctx = _ctx()
        collect_inline_videos(html, ctx)
        assert len(ctx.registry) == 0

    def test_unclosed_video_ignored(self):
        ctx = _ctx()
        collect_inline_videos('<video src="/lost.mp4">', ctx)
        assert len(ctx.registry) == 0

    def test_entity_encoded_src(self):
        ctx = _ctx()
        collect_inline_videos('<video src="/v.mp4?a=1&amp;b=2"></video>', ctx)
        assert "https://site.example/v.mp4?a=1&b=2" in ctx.registry


class TestDirectUrls:
    def test_urls_in_script_text(self):
        html = """
        <script>
          var cfg = {"file": "https://cdn.example/clips/demo.mp4?sig=abc&exp=1",
                     "hls": 'https://cdn.example/live/index.m3u8'};
        </script>
        """
        ctx = _ctx()
        collect_direct_video_urls(html, ctx)
        sources = ctx.registry.snapshot()
        assert [(s.url, s.type, s.label) for s in sources] == [
            ("https://cdn.example/clips/demo.mp4?sig=abc&exp=1", VideoSourceType.FILE, "Detected video"),
            ("https://cdn.example/live/index.m3u8", VideoSourceType.HLS, "Detected video"),
        ]

    def test_non_video_urls_skipped(self):
        ctx = _ctx()
        collect_direct_video_urls('<a href="https://site.example/page.html">x</a> https://cdn.example/a.jpg', ctx)
        assert len(ctx.registry) == 0

    def test_relative_paths_not_matched(self):
        ctx = _ctx()
        collect_direct_video_urls('"/videos/clip.mp4"', ctx)
        assert len(ctx.registry) == 0

    def test_existing_label_kept(self):
        ctx = _ctx()
        ctx.registry.add("https://cdn.example/v.mp4", label="OpenGraph video")
        collect_direct_video_urls("see https://cdn.example/v.mp4 here", ctx)
        assert [s.label for s in ctx.registry.snapshot()] == ["OpenGraph video"]


class TestDataDuration:
    def test_values_normalized_in_order(self):
        html = '<div data-duration="75"></div><span data-duration=\'PT1M\'></span><i data-duration="x"></i>'
        ctx = _ctx()
        collect_data_durations(html, ctx)
        assert ctx.duration_candidates == [75, 60]

    def test_empty_value_ignored(self):
        ctx = _ctx()
        collect_data_durations('<div data-duration=""></div>', ctx)
        assert ctx.duration_candidates == []
