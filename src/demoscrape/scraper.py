# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Entry point: URL -> ScrapeResult.

``extract_from_html`` is the pure half (HTML + page URL -> result) and runs
the collectors in ``SCAN_ORDER``; ``scrape_product_page`` adds validation and
the bounded fetch in front of it. Each call owns its own ExtractionContext,
so any number of scrapes can run concurrently.
"""

from __future__ import annotations

import logging

import httpx

from .assembler import assemble_result
from .collectors import SCAN_ORDER
from .config import ScraperSettings
from .context import ExtractionContext
from .errors import FetchTimeoutError
from .fetcher import fetch_html
from .logging_config import scrape_context
from .models import ScrapeResult
from .pipeline_timer import PipelineTimer
from .urls import normalize_page_url

logger = logging.getLogger(__name__)


def _collect(html: str, page_url: str) -> ExtractionContext:
    ctx = ExtractionContext(page_url=page_url)
    for _name, collect in SCAN_ORDER:
        collect(html, ctx)
    return ctx


def extract_from_html(html: str, page_url: str, *, settings: ScraperSettings | None = None) -> ScrapeResult:
    """Run every collector over *html* and assemble the result.

    *page_url* must already be absolute; all discovered URLs resolve against it.
    Never raises on malformed markup.
    """
    settings = settings or ScraperSettings()
    ctx = _collect(html, page_url)
    return assemble_result(ctx, max_tags=settings.max_tags, max_tag_length=settings.max_tag_length)


async def scrape_product_page(
    url: str,
    *,
    settings: ScraperSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ScrapeResult:
    """Fetch *url* and extract demo-video metadata from it.

    Raises a ScrapeError subclass on any terminal condition; no partial
    result is ever returned. An empty ``video_sources`` is not an error here.
    """
    settings = settings or ScraperSettings()
    page_url = normalize_page_url(url)
    with scrape_context(page_url):
        return await _run_pipeline(page_url, settings, transport)


async def _run_pipeline(
    page_url: str,
    settings: ScraperSettings,
    transport: httpx.AsyncBaseTransport | None,
) -> ScrapeResult:
    timer = PipelineTimer()
    timer.stage("fetch")
    try:
        page = await fetch_html(page_url, settings=settings, transport=transport)
    except FetchTimeoutError:
        logger.warning("scrape timeout report: %s", timer.timeout_report())
        raise
    finally:
        timer.finalize()

    timer.stage("extract")
    ctx = _collect(page.html, page_url)

    timer.stage("assemble")
    result = assemble_result(ctx, max_tags=settings.max_tags, max_tag_length=settings.max_tag_length)
    timer.finalize()

    logger.info(
        "scraped %s: videos=%d tags=%d title=%s stages=%s",
        page_url,
        len(result.video_sources),
        len(result.tags),
        result.title is not None,
        timer.elapsed_per_stage(),
    )
    return result
