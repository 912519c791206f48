# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Tests for demoscrape.scraper.scrape_product_page: validation, fetch, extraction."""

from __future__ import annotations

import asyncio
import logging

import httpx
import pytest
from conftest import PAGE_URL

from demoscrape import scrape_product_page
from demoscrape.config import ScraperSettings
from demoscrape.errors import (
    FetchFailureError,
    FetchTimeoutError,
    HttpStatusError,
    InvalidUrlError,
    ScrapeError,
    UnsupportedContentTypeError,
)
from demoscrape.models import VideoSourceType

PRODUCT_PAGE = """
<html>
<head>
  <title>Widget | Shop</title>
  <meta property="og:title" content="Widget Pro">
  <meta name="description" content="The best widget.">
  <meta property="og:image" content="/img/widget.jpg">
  <meta name="keywords" content="widgets, tools">
  <meta property="og:video" content="https://cdn.example/widget.m3u8">
  <link rel="canonical" href="https://site.example/widget">
  <script type="application/ld+json">
    {"@type": "Product", "name": "Widget (JSON)", "brand": {"name": "Acme"},
     "subjectOf": {"@type": "VideoObject", "contentUrl": "https://cdn.example/widget.mp4", "duration": "PT1M30S"}}
  </script>
</head>
<body><video poster="/poster.jpg"><source src="/clips/tour.webm" type="video/webm"></video></body>
</html>
"""


class TestScrapeProductPage:
    @pytest.mark.asyncio
    async def test_full_page(self, make_transport):
        result = await scrape_product_page(PAGE_URL, transport=make_transport(PRODUCT_PAGE))
        assert result.original_url == PAGE_URL
        assert result.canonical_url == "https://site.example/widget"
        assert result.title == "Widget Pro"
        assert result.description == "The best widget."
        assert result.thumbnail_url == "https://site.example/img/widget.jpg"
        assert result.tags == ("widgets", "tools", "Acme")
        assert result.duration_seconds == 90
        assert [(s.url, s.type) for s in result.video_sources] == [
            ("https://cdn.example/widget.mp4", VideoSourceType.FILE),
            ("https://site.example/clips/tour.webm", VideoSourceType.FILE),
            ("https://cdn.example/widget.m3u8", VideoSourceType.HLS),
        ]

    @pytest.mark.asyncio
    async def test_jsonld_example(self, make_transport):
        html = (
            '<script type="application/ld+json">'
            '{"@type":"VideoObject","name":"Demo","contentUrl":"https://cdn.example/v.m3u8","duration":"PT45S"}'
            "</script>"
        )
        result = await scrape_product_page(PAGE_URL, transport=make_transport(html))
        assert result.title == "Demo"
        assert result.duration_seconds == 45
        assert [(s.url, s.type) for s in result.video_sources] == [("https://cdn.example/v.m3u8", VideoSourceType.HLS)]

    @pytest.mark.asyncio
    async def test_no_video_is_not_an_error(self, make_transport):
        result = await scrape_product_page(PAGE_URL, transport=make_transport("<title>Nothing</title>"))
        assert result.video_sources == ()
        assert result.title == "Nothing"

    @pytest.mark.asyncio
    async def test_input_url_normalized(self, make_transport):
        transport = make_transport()
        result = await scrape_product_page("  HTTPS://Site.Example  ", transport=transport)
        assert result.original_url == "https://site.example/"
        assert str(transport.requests[0].url) == "https://site.example/"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("url", ["", "not a url", "ftp://site.example/file", "javascript:alert(1)"])
    async def test_invalid_url_never_fetched(self, make_transport, url):
        transport = make_transport()
        with pytest.raises(InvalidUrlError):
            await scrape_product_page(url, transport=transport)
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_non_html(self, make_transport):
        with pytest.raises(UnsupportedContentTypeError):
            await scrape_product_page(PAGE_URL, transport=make_transport("{}", content_type="application/json"))

    @pytest.mark.asyncio
    async def test_http_error(self, make_transport):
        with pytest.raises(HttpStatusError, match=r"status 404"):
            await scrape_product_page(PAGE_URL, transport=make_transport(status=404))

    @pytest.mark.asyncio
    async def test_timeout_logs_stage_report(self, caplog):
        async def handler(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(5)
            return httpx.Response(200)

        settings = ScraperSettings(fetch_timeout=0.05)
        with caplog.at_level(logging.WARNING, logger="demoscrape.scraper"):
            with pytest.raises(FetchTimeoutError):
                await scrape_product_page(PAGE_URL, settings=settings, transport=httpx.MockTransport(handler))
        assert "'timed_out_at': 'fetch'" in caplog.text

    @pytest.mark.asyncio
    async def test_network_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("dns failure", request=request)

        with pytest.raises(FetchFailureError):
            await scrape_product_page(PAGE_URL, transport=httpx.MockTransport(handler))

    @pytest.mark.asyncio
    async def test_every_failure_is_a_scrape_error(self, make_transport):
        for transport in (make_transport(status=500), make_transport(content_type="image/png")):
            with pytest.raises(ScrapeError):
                await scrape_product_page(PAGE_URL, transport=transport)

    @pytest.mark.asyncio
    async def test_concurrent_scrapes_are_isolated(self):
        pages = {
            "/a": '<meta property="og:title" content="A"><meta property="og:video" content="/a.mp4">',
            "/b": '<meta property="og:title" content="B"><meta property="og:video" content="/b.mp4">',
        }

        async def handler(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(0.01)
            return httpx.Response(200, headers={"content-type": "text/html"}, text=pages[request.url.path])

        transport = httpx.MockTransport(handler)
        a, b = await asyncio.gather(
            scrape_product_page("https://site.example/a", transport=transport),
            scrape_product_page("https://site.example/b", transport=transport),
        )
        assert (a.title, [s.url for s in a.video_sources]) == ("A", ["https://site.example/a.mp4"])
        assert (b.title, [s.url for s in b.video_sources]) == ("B", ["https://site.example/b.mp4"])

    @pytest.mark.asyncio
    async def test_settings_limit_tags(self, make_transport):
        html = '<meta name="keywords" content="a, b, c, d">'
        settings = ScraperSettings(max_tags=2)
        result = await scrape_product_page(PAGE_URL, settings=settings, transport=make_transport(html))
        assert result.tags == ("a", "b")
