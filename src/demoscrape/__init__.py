# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""demoscrape: demo-video metadata extraction from arbitrary product pages.

Given a product-page URL, fetches the HTML and returns a ScrapeResult with:
- title, description, thumbnail, tags, duration (first-wins across signals)
- video_sources: deduplicated file/HLS candidates, files first
"""

from __future__ import annotations

__version__ = "0.1.0"

from .errors import (  # noqa: E402
    FetchFailureError,
    FetchTimeoutError,
    HttpStatusError,
    InvalidUrlError,
    NoVideoFoundError,
    ScrapeError,
    UnsupportedContentTypeError,
)
from .models import ScrapeResult, VideoSource, VideoSourceType  # noqa: E402
from .scraper import extract_from_html, scrape_product_page  # noqa: E402

__all__ = [
    "FetchFailureError",
    "FetchTimeoutError",
    "HttpStatusError",
    "InvalidUrlError",
    "NoVideoFoundError",
    "ScrapeError",
    "ScrapeResult",
    "UnsupportedContentTypeError",
    "VideoSource",
    "VideoSourceType",
    "__version__",
    "extract_from_html",
    "scrape_product_page",
]
