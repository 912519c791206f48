# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""demoscrape exception hierarchy.

All scrape failures inherit from ScrapeError, allowing callers to catch
the base class for any terminal condition or specific subclasses for
targeted handling. Messages are written for end users.
"""

from __future__ import annotations


class ScrapeError(Exception):
    """Base exception for all scrape failures."""


class InvalidUrlError(ScrapeError):
    """Input is not an absolute http(s) URL."""

    def __init__(self, message: str = "", *, url: str = "") -> None:
        super().__init__(
            message
            or "Invalid URL provided. Please enter a valid URL including the protocol (e.g., https://example.com)"
        )
        self.url = url


class FetchTimeoutError(ScrapeError):
    """Fetch exceeded the configured deadline and was cancelled."""

    def __init__(self, message: str = "", *, timeout: float = 0.0) -> None:
        super().__init__(
            message or "Timed out while trying to load the page. Please try again or use a different URL."
        )
        self.timeout = timeout


class FetchFailureError(ScrapeError):
    """Network-level failure other than a timeout."""


class HttpStatusError(ScrapeError):
    """Target answered with a non-success HTTP status."""

    def __init__(self, status: int) -> None:
        super().__init__(f"Failed to fetch the provided URL (status {status}).")
        self.status = status


class UnsupportedContentTypeError(ScrapeError):
    """Response body is not HTML."""

    def __init__(self, content_type: str = "") -> None:
        super().__init__("The provided URL does not appear to be an HTML page.")
        self.content_type = content_type


class NoVideoFoundError(ScrapeError):
    """Scrape succeeded but yielded no playable video source.

    Never raised by the extraction engine itself; callers that need a video
    (the import flow) raise it after checking ``ScrapeResult.video_sources``.
    """

    def __init__(self, message: str = "", *, url: str = "") -> None:
        super().__init__(message or "No downloadable demo videos were found on this page.")
        self.url = url
