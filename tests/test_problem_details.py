# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Tests for the RFC 9457 problem_details module.

Covers:
- Core ProblemDetail dataclass behaviour
- Starlette response generation
- Secret sanitization (including hypothesis property-based)
- ScrapeError -> status mapping
- Taxonomy completeness
"""

from __future__ import annotations

import json

import pytest
from hypothesis import given
from hypothesis import strategies as st

from demoscrape.errors import (
    FetchFailureError,
    FetchTimeoutError,
    HttpStatusError,
    InvalidUrlError,
    NoVideoFoundError,
    ScrapeError,
    UnsupportedContentTypeError,
)
from demoscrape.problem_details import (
    _CLI_HINTS,
    _ERROR_BASE,
    _GENERIC_DETAIL,
    _TYPE_METADATA,
    MAX_DETAIL_LENGTH,
    ProblemDetail,
    ProblemType,
    from_auth_missing,
    from_exception,
    from_validation,
    sanitize_detail,
)

# ── Core ProblemDetail ───────────────────────────────────────────────


class TestProblemDetail:
    def test_default_values(self):
        p = ProblemDetail()
        assert p.type == "about:blank"
        assert p.status == 500
        assert p.detail == ""
        assert p.extensions == {}

    def test_frozen_immutability(self):
        p = ProblemDetail()
        with pytest.raises(AttributeError):
            p.status = 404  # type: ignore[misc]

    def test_to_dict_omits_empty_fields(self):
        d = ProblemDetail(type="about:blank", status=500).to_dict()
        assert d == {"type": "about:blank", "status": 500}

    def test_to_dict_extensions_never_shadow_standard(self):
        p = ProblemDetail(title="Original", extensions={"type": "evil", "status": 999, "upstream_status": 404})
        d = p.to_dict()
        assert d["type"] == "about:blank"
        assert d["status"] == 500
        assert d["upstream_status"] == 404

    def test_to_json_non_ascii_preserved(self):
        p = ProblemDetail(detail="Vidéo introuvable")
        assert "Vidéo introuvable" in p.to_json()
        assert json.loads(p.to_json())["detail"] == "Vidéo introuvable"


class TestToResponse:
    def test_status_and_media_type(self):
        resp = ProblemDetail(status=422).to_response()
        assert resp.status_code == 422
        assert resp.media_type == "application/problem+json"

    def test_body_and_headers(self):
        resp = from_exception(InvalidUrlError(), instance="/api/videos/scrape-url").to_response()
        body = json.loads(resp.body)
        assert body["type"] == ProblemType.INVALID_URL.uri
        assert body["instance"] == "/api/videos/scrape-url"
        assert resp.headers["cache-control"] == "no-store"


class TestCliText:
    def test_with_hint(self):
        text = from_exception(InvalidUrlError()).to_cli_text()
        first, second = text.split("\n")
        assert first.startswith("Error: Invalid URL provided.")
        assert second == f"Hint: {_CLI_HINTS[ProblemType.INVALID_URL.uri]}"

    def test_without_hint(self):
        assert ProblemDetail(detail="boom").to_cli_text() == "Error: boom"


# ── Sanitization ─────────────────────────────────────────────────────


class TestSanitizeDetail:
    def test_bearer_token(self):
        assert "abc.def" not in sanitize_detail("rejected Bearer abc.def")

    def test_url_userinfo(self):
        out = sanitize_detail("Failed to fetch https://user:pw@site.example/p")
        assert "user:pw" not in out
        assert "site.example/p" in out

    def test_signed_url_query(self):
        out = sanitize_detail("https://cdn.example/v.mp4?sig=deadbeef&exp=1")
        assert "deadbeef" not in out
        assert "exp=1" in out

    def test_truncation(self):
        out = sanitize_detail("x" * 300)
        assert len(out) == MAX_DETAIL_LENGTH + 3
        assert out.endswith("...")

    @given(st.text(max_size=500))
    def test_never_longer_than_limit(self, text):
        assert len(sanitize_detail(text)) <= MAX_DETAIL_LENGTH + 3

    @given(st.text(alphabet=st.characters(min_codepoint=97, max_codepoint=122), min_size=10, max_size=40))
    def test_bearer_value_always_removed(self, secret):
        assert secret not in sanitize_detail(f"header Bearer {secret} sent")


# ── Factories ────────────────────────────────────────────────────────


class TestFromException:
    @pytest.mark.parametrize(
        "exc, problem_type, status",
        [
            (InvalidUrlError(), ProblemType.INVALID_URL, 400),
            (UnsupportedContentTypeError("application/json"), ProblemType.UNSUPPORTED_CONTENT_TYPE, 400),
            (NoVideoFoundError(), ProblemType.NO_VIDEO_FOUND, 422),
            (FetchTimeoutError(timeout=10), ProblemType.FETCH_TIMEOUT, 502),
            (FetchFailureError("Failed to fetch the provided URL: refused"), ProblemType.FETCH_FAILED, 502),
            (HttpStatusError(404), ProblemType.UPSTREAM_HTTP_ERROR, 502),
        ],
    )
    def test_mapping(self, exc, problem_type, status):
        p = from_exception(exc)
        assert p.type == problem_type.uri
        assert p.status == status
        assert p.detail == str(exc)

    def test_upstream_status_extension(self):
        assert from_exception(HttpStatusError(503)).to_dict()["upstream_status"] == 503

    def test_user_facing_messages(self):
        assert from_exception(NoVideoFoundError()).detail == "No downloadable demo videos were found on this page."
        assert from_exception(HttpStatusError(404)).detail == "Failed to fetch the provided URL (status 404)."
        assert (
            from_exception(UnsupportedContentTypeError()).detail
            == "The provided URL does not appear to be an HTML page."
        )

    def test_unexpected_exception_is_generic_500(self):
        p = from_exception(RuntimeError("db password=hunter2 exploded"))
        assert p.status == 500
        assert p.type == "about:blank"
        assert p.detail == _GENERIC_DETAIL

    def test_bare_scrape_error_keeps_message(self):
        p = from_exception(ScrapeError("Failed to scrape the page"))
        assert p.status == 500
        assert p.detail == "Failed to scrape the page"


class TestOtherFactories:
    def test_validation(self):
        p = from_validation("Invalid request body: Field required", field_name="url", instance="/x")
        assert p.status == 400
        assert p.to_dict()["field"] == "url"

    def test_auth_missing(self):
        p = from_auth_missing()
        assert p.status == 401
        assert p.type == f"{_ERROR_BASE}:auth-required"


class TestTaxonomy:
    def test_every_type_has_metadata(self):
        assert set(_TYPE_METADATA) == set(ProblemType)

    def test_uri_format(self):
        for pt in ProblemType:
            assert pt.uri == f"urn:demoscrape:problem:{pt.value}"

    def test_statuses_are_client_or_gateway(self):
        assert {status for status, _title in _TYPE_METADATA.values()} == {400, 401, 422, 502}
