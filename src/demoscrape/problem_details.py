# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""RFC 9457 Problem Details for the preview/import HTTP surface and the CLI.

Maps ScrapeError subclasses onto standardised problem objects so every
caller reports the same status and wording:

- validation (``invalid-url``, ``unsupported-content-type``) -> 400
- ``no-video-found`` -> 422
- upstream trouble (timeout, network failure, bad status) -> 502
- anything unexpected -> 500 with a generic detail

Near-leaf module (stdlib + errors.py + lazy starlette).
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

# ── Constants ────────────────────────────────────────────────────────

_ERROR_BASE = "urn:demoscrape:problem"

MAX_DETAIL_LENGTH = 200

_GENERIC_DETAIL = "Failed to scrape the provided URL."

# ── ProblemType taxonomy ─────────────────────────────────────────────


class ProblemType(StrEnum):
    """Error taxonomy for demoscrape."""

    INVALID_URL = "invalid-url"
    UNSUPPORTED_CONTENT_TYPE = "unsupported-content-type"
    VALIDATION_ERROR = "validation-error"
    AUTH_REQUIRED = "auth-required"
    NO_VIDEO_FOUND = "no-video-found"
    FETCH_TIMEOUT = "fetch-timeout"
    FETCH_FAILED = "fetch-failed"
    UPSTREAM_HTTP_ERROR = "upstream-http-error"

    @property
    def uri(self) -> str:
        """Full type URI for the RFC 9457 ``type`` field."""
        return f"{_ERROR_BASE}:{self.value}"


# ── Per-type metadata: (status, title) ───────────────────────────────

_TYPE_METADATA: dict[ProblemType, tuple[int, str]] = {
    ProblemType.INVALID_URL: (400, "Invalid URL"),
    ProblemType.UNSUPPORTED_CONTENT_TYPE: (400, "Unsupported Content Type"),
    ProblemType.VALIDATION_ERROR: (400, "Validation Error"),
    ProblemType.AUTH_REQUIRED: (401, "Authentication Required"),
    ProblemType.NO_VIDEO_FOUND: (422, "No Video Found"),
    ProblemType.FETCH_TIMEOUT: (502, "Page Timed Out"),
    ProblemType.FETCH_FAILED: (502, "Fetch Failed"),
    ProblemType.UPSTREAM_HTTP_ERROR: (502, "Upstream HTTP Error"),
}

_CLI_HINTS: dict[str, str] = {
    ProblemType.INVALID_URL.uri: "Include the protocol, e.g. https://example.com/product.",
    ProblemType.UNSUPPORTED_CONTENT_TYPE.uri: "Point at the product page itself, not a file or API endpoint.",
    ProblemType.NO_VIDEO_FOUND.uri: "Try the page that embeds the demo video, or upload the file directly.",
    ProblemType.FETCH_TIMEOUT.uri: "The site took too long to respond. Try again later.",
    ProblemType.FETCH_FAILED.uri: "Check the domain and your network connection.",
    ProblemType.UPSTREAM_HTTP_ERROR.uri: "The site refused the request. Check the URL in a browser.",
}

# ── Secret sanitization patterns ─────────────────────────────────────

_SECRET_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"Bearer\s+\S+"), "Bearer <redacted>"),
    (re.compile(r"Basic\s+[A-Za-z0-9+/=]{8,}"), "Basic <redacted>"),
    (re.compile(r"://[^@\s/]+@"), "://<redacted>@"),
    (
        re.compile(
            r"(?:api_key|apikey|secret|token|password|signature|sig)=[^&\s]+",
            re.IGNORECASE,
        ),
        "<redacted>",
    ),
    (
        re.compile(r"eyJ[A-Za-z0-9_-]{10,}\.[A-Za-z0-9_-]{10,}\.[A-Za-z0-9_-]{10,}"),
        "<redacted>",
    ),
]


def sanitize_detail(text: str) -> str:
    """Scrub credentials and signed-URL secrets from *text*, then truncate."""
    for pattern, replacement in _SECRET_PATTERNS:
        text = pattern.sub(replacement, text)
    if len(text) > MAX_DETAIL_LENGTH:
        text = text[:MAX_DETAIL_LENGTH] + "..."
    return text


# ── ProblemDetail dataclass ──────────────────────────────────────────

_STANDARD_FIELDS = frozenset({"type", "title", "status", "detail", "instance"})


@dataclass(frozen=True, slots=True)
class ProblemDetail:
    """Immutable RFC 9457 problem, serialisable to JSON, Starlette, or CLI text."""

    type: str = "about:blank"
    title: str = ""
    status: int = 500
    detail: str = ""
    instance: str = ""
    extensions: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Empty optional fields omitted; extensions merged without shadowing standard fields."""
        d: dict[str, Any] = {"type": self.type, "status": self.status}
        if self.title:
            d["title"] = self.title
        if self.detail:
            d["detail"] = self.detail
        if self.instance:
            d["instance"] = self.instance
        for k, v in self.extensions.items():
            if k not in _STANDARD_FIELDS:
                d[k] = v
        return d

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    def to_response(self):
        """Starlette ``JSONResponse`` with ``application/problem+json``."""
        from starlette.responses import JSONResponse

        return JSONResponse(
            content=self.to_dict(),
            status_code=self.status,
            media_type="application/problem+json",
            headers={"Cache-Control": "no-store", "Content-Language": "en"},
        )

    def to_cli_text(self) -> str:
        """``Error: <detail>`` plus an optional ``Hint:`` line."""
        hint = _CLI_HINTS.get(self.type, "")
        lines = [f"Error: {self.detail}"]
        if hint:
            lines.append(f"Hint: {hint}")
        return "\n".join(lines)


def _build(problem_type: ProblemType, detail: str, *, instance: str = "", extensions: dict[str, Any] | None = None):
    status, title = _TYPE_METADATA[problem_type]
    return ProblemDetail(
        type=problem_type.uri,
        title=title,
        status=status,
        detail=sanitize_detail(detail),
        instance=instance,
        extensions=dict(extensions or {}),
    )


# ── Exception → ProblemType mapping ──────────────────────────────────


def _exception_type_map() -> dict[type, ProblemType]:
    """Lazy to keep this module importable without the engine."""
    from .errors import (
        FetchFailureError,
        FetchTimeoutError,
        HttpStatusError,
        InvalidUrlError,
        NoVideoFoundError,
        UnsupportedContentTypeError,
    )

    return {
        InvalidUrlError: ProblemType.INVALID_URL,
        UnsupportedContentTypeError: ProblemType.UNSUPPORTED_CONTENT_TYPE,
        NoVideoFoundError: ProblemType.NO_VIDEO_FOUND,
        FetchTimeoutError: ProblemType.FETCH_TIMEOUT,
        FetchFailureError: ProblemType.FETCH_FAILED,
        HttpStatusError: ProblemType.UPSTREAM_HTTP_ERROR,
    }


# ── Factory functions ────────────────────────────────────────────────


def from_exception(exc: Exception, *, instance: str = "") -> ProblemDetail:
    """Map a ScrapeError to its problem; anything else becomes a generic 500."""
    from .errors import HttpStatusError, ScrapeError

    for exc_type, problem_type in _exception_type_map().items():
        if isinstance(exc, exc_type):
            ext: dict[str, Any] = {}
            if isinstance(exc, HttpStatusError):
                ext["upstream_status"] = exc.status
            return _build(problem_type, str(exc), instance=instance, extensions=ext)

    detail = sanitize_detail(str(exc)) if isinstance(exc, ScrapeError) and str(exc) else _GENERIC_DETAIL
    return ProblemDetail(type="about:blank", title="Internal Server Error", status=500, detail=detail, instance=instance)


def from_validation(detail: str, *, field_name: str = "", instance: str = "") -> ProblemDetail:
    """400 for malformed request bodies."""
    ext = {"field": field_name} if field_name else {}
    return _build(ProblemType.VALIDATION_ERROR, detail, instance=instance, extensions=ext)


def from_auth_missing(*, instance: str = "") -> ProblemDetail:
    return _build(ProblemType.AUTH_REQUIRED, "Authentication required.", instance=instance)
