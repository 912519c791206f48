# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Shared test configuration and fixtures."""

try:
    import demoscrape  # noqa: F401
except ImportError:
    raise ImportError("demoscrape is not installed. Run: pip install -e '.[dev]'") from None

from collections.abc import Callable

import httpx
import pytest

PAGE_URL = "https://site.example/p"


@pytest.fixture(autouse=True)
def _block_real_network(request, monkeypatch):
    """Safety net: prevent real outbound HTTP in unit tests.

    Tests pass an ``httpx.MockTransport`` explicitly; a test that forgets to
    gets a clear error instead of silently hitting the internet. Opt out
    with ``@pytest.mark.network``.
    """
    if "network" in request.keywords:
        return

    def _no_real_transport():
        raise RuntimeError("Test tried to open a real network connection. Pass transport=httpx.MockTransport(...).")

    monkeypatch.setattr("demoscrape.fetcher._default_transport", _no_real_transport)


def html_response(body: str, *, status: int = 200, content_type: str = "text/html; charset=utf-8") -> httpx.Response:
    return httpx.Response(status, headers={"content-type": content_type}, text=body)


@pytest.fixture
def make_transport() -> Callable[..., httpx.MockTransport]:
    """Build a MockTransport that serves *body* for every request and records them."""

    def _make(body: str = "<html></html>", *, status: int = 200, content_type: str = "text/html; charset=utf-8"):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return html_response(body, status=status, content_type=content_type)

        transport = httpx.MockTransport(handler)
        transport.requests = seen  # type: ignore[attr-defined]
        return transport

    return _make
