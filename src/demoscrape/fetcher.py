# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Bounded, cancellable HTML fetch.

The whole request (connect, redirects, body) runs inside one
``asyncio.wait_for`` deadline; on expiry the task is cancelled, which aborts
the in-flight request and closes the client's connections. No retries:
every failure is terminal and surfaces as a ScrapeError subclass.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

import httpx

from .config import ScraperSettings
from .errors import FetchFailureError, FetchTimeoutError, HttpStatusError, UnsupportedContentTypeError

logger = logging.getLogger(__name__)

HTML_MEDIA_TYPES = frozenset({"text/html", "application/xhtml+xml"})


@dataclass(frozen=True, slots=True)
class FetchedPage:
    """Raw HTML plus what the server said about it."""

    url: str
    final_url: str
    status: int
    content_type: str
    html: str


def _default_transport() -> httpx.AsyncBaseTransport:
    return httpx.AsyncHTTPTransport(retries=0)


def media_type(content_type: str | None) -> str:
    """``"text/html; charset=utf-8"`` -> ``"text/html"``."""
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


def is_html_content_type(content_type: str | None) -> bool:
    return media_type(content_type) in HTML_MEDIA_TYPES


async def fetch_html(
    url: str,
    *,
    settings: ScraperSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FetchedPage:
    """GET *url* (already validated) and return its HTML body.

    Raises:
        FetchTimeoutError: deadline elapsed; the request was cancelled.
        FetchFailureError: any other transport-level failure.
        HttpStatusError: non-2xx final response.
        UnsupportedContentTypeError: body is not HTML; checked before reading it as text.
    """
    settings = settings or ScraperSettings()
    timeout = settings.fetch_timeout

    async with httpx.AsyncClient(
        transport=transport or _default_transport(),
        headers=settings.request_headers,
        follow_redirects=True,
        timeout=httpx.Timeout(timeout),
    ) as client:
        try:
            response = await asyncio.wait_for(client.get(url), timeout=timeout)
        except (TimeoutError, httpx.TimeoutException) as e:
            logger.warning("fetch timed out after %.1fs: %s", timeout, url)
            raise FetchTimeoutError(timeout=timeout) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("fetch failed for %s: %s", url, type(e).__name__)
            raise FetchFailureError(f"Failed to fetch the provided URL: {str(e) or type(e).__name__}") from e

    if not response.is_success:
        raise HttpStatusError(response.status_code)

    content_type = response.headers.get("content-type", "")
    if not is_html_content_type(content_type):
        raise UnsupportedContentTypeError(content_type)

    return FetchedPage(
        url=url,
        final_url=str(response.url),
        status=response.status_code,
        content_type=content_type,
        html=response.text,
    )
