# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""HTTP surface for the preview and import collaborators.

Routes:
    GET  /health
    POST /api/videos/scrape-url        {"url"} -> ScrapeResult JSON
    POST /api/videos/import-from-url   {"sourceUrl", "preferredVideoUrl", "overrides", "tags"}

Errors are RFC 9457 problem+json (see problem_details). Authentication lives
upstream; the import route only reads the caller id it forwards in
``X-Creator-Id``.
"""

from __future__ import annotations

import functools
import json
import logging
from contextlib import asynccontextmanager
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from .config import ScraperSettings
from .errors import ScrapeError
from .importer import ImportOverrides, import_from_url
from .problem_details import from_auth_missing, from_exception, from_validation
from .repository import InMemoryVideoRepository, VideoRepositoryProtocol
from .scraper import scrape_product_page

logger = logging.getLogger(__name__)

CREATOR_HEADER = "x-creator-id"


# ── Request bodies ───────────────────────────────────────────────────


class ScrapeRequest(BaseModel):
    url: str = Field(min_length=1, description="Product page URL including the protocol")


class OverridesBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str | None = None
    description: str | None = None
    product_url: str | None = Field(default=None, alias="productUrl")
    thumbnail_url: str | None = Field(default=None, alias="thumbnailUrl")


class ImportRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    source_url: str = Field(min_length=1, alias="sourceUrl")
    preferred_video_url: str | None = Field(default=None, alias="preferredVideoUrl")
    overrides: OverridesBody | None = None
    # non-string entries are dropped by the tag merge, not rejected
    tags: list[Any] = Field(default_factory=list)


async def _parse_body(request: Request, model: type[BaseModel]):
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None, from_validation("Request body must be JSON.", instance=request.url.path)
    try:
        return model.model_validate(payload), None
    except ValidationError as e:
        first = e.errors()[0] if e.errors() else {}
        field_name = ".".join(str(p) for p in first.get("loc", ()))
        return None, from_validation(
            f"Invalid request body: {first.get('msg', 'validation failed')}",
            field_name=field_name,
            instance=request.url.path,
        )


# ── Handlers ─────────────────────────────────────────────────────────


async def health(request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok"})


async def scrape_url(request: Request) -> JSONResponse:
    body, problem = await _parse_body(request, ScrapeRequest)
    if problem is not None:
        return problem.to_response()

    state = request.app.state
    try:
        result = await scrape_product_page(body.url, settings=state.settings, transport=state.transport)
    except ScrapeError as e:
        logger.info("scrape rejected: %s", type(e).__name__)
        return from_exception(e, instance=request.url.path).to_response()
    except Exception as e:
        logger.exception("scrape failed unexpectedly for %s", request.url.path)
        return from_exception(e, instance=request.url.path).to_response()
    return JSONResponse(result.to_dict())


async def import_url(request: Request) -> JSONResponse:
    creator_id = request.headers.get(CREATOR_HEADER, "").strip()
    if not creator_id:
        return from_auth_missing(instance=request.url.path).to_response()

    body, problem = await _parse_body(request, ImportRequest)
    if problem is not None:
        return problem.to_response()

    state = request.app.state
    overrides = ImportOverrides(**body.overrides.model_dump()) if body.overrides else None
    scrape = functools.partial(scrape_product_page, settings=state.settings, transport=state.transport)
    try:
        outcome = await import_from_url(
            body.source_url,
            repository=state.repository,
            creator_id=creator_id,
            preferred_video_url=body.preferred_video_url,
            overrides=overrides,
            tags=body.tags,
            scrape=scrape,
        )
    except ScrapeError as e:
        logger.info("import rejected: %s", type(e).__name__)
        return from_exception(e, instance=request.url.path).to_response()
    except Exception as e:
        logger.exception("import failed unexpectedly for %s", request.url.path)
        return from_exception(e, instance=request.url.path).to_response()

    return JSONResponse(
        {
            "video": outcome.video.to_dict(),
            "metadata": outcome.metadata.to_dict(),
            "selectedVideo": outcome.selected_video.to_dict(),
        },
        status_code=201,
    )


# ── App factory ──────────────────────────────────────────────────────


def create_app(
    *,
    settings: ScraperSettings | None = None,
    repository: VideoRepositoryProtocol | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Starlette:
    """Build the Starlette app. *transport* overrides outbound HTTP (tests)."""
    repo = repository or InMemoryVideoRepository()

    @asynccontextmanager
    async def lifespan(app: Starlette):
        yield
        await repo.close()

    app = Starlette(
        routes=[
            Route("/health", health, methods=["GET"]),
            Route("/api/videos/scrape-url", scrape_url, methods=["POST"]),
            Route("/api/videos/import-from-url", import_url, methods=["POST"]),
        ],
        lifespan=lifespan,
    )
    app.state.settings = settings or ScraperSettings()
    app.state.repository = repo
    app.state.transport = transport
    return app
