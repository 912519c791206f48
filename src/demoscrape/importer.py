# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Import flow: scrape a page, merge user overrides, persist one video.

The engine's result is only a proposal. This module owns the
``NoVideoFound`` contract (an empty ``video_sources`` never reaches the
repository) and the defaults used when neither the page nor the user
supplied a value.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlsplit

from .errors import NoVideoFoundError
from .models import ScrapeResult, VideoSource, VideoSourceType
from .repository import StoredVideo, VideoDraft, VideoRepositoryProtocol
from .scraper import scrape_product_page

logger = logging.getLogger(__name__)

MAX_IMPORT_TAGS = 10
MAX_IMPORT_TAG_LENGTH = 50

Scrape = Callable[[str], Awaitable[ScrapeResult]]


@dataclass(frozen=True, slots=True)
class ImportOverrides:
    """User edits from the preview step. Blank values mean "keep scraped"."""

    title: str | None = None
    description: str | None = None
    product_url: str | None = None
    thumbnail_url: str | None = None


@dataclass(frozen=True, slots=True)
class ImportOutcome:
    video: StoredVideo
    metadata: ScrapeResult
    selected_video: VideoSource


def _clean(value: str | None) -> str | None:
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    return trimmed or None


def select_video(result: ScrapeResult, preferred_url: str | None = None) -> VideoSource:
    """Preferred source when it matches exactly, otherwise the first one.

    Raises NoVideoFoundError when the scrape found nothing playable.
    """
    if not result.video_sources:
        raise NoVideoFoundError(url=result.original_url)
    preferred = _clean(preferred_url)
    if preferred:
        for source in result.video_sources:
            if source.url == preferred:
                return source
    return result.video_sources[0]


def merge_tags(user_tags: Iterable[Any] | None, scraped_tags: Iterable[str]) -> tuple[str, ...]:
    """User tags first, then scraped; trimmed, truncated, deduplicated, capped.

    Non-string user entries are skipped.
    """
    merged: dict[str, None] = {}
    for tag in [*(user_tags or ()), *scraped_tags]:
        cleaned = _clean(tag)
        if cleaned:
            merged.setdefault(cleaned[:MAX_IMPORT_TAG_LENGTH], None)
    return tuple(merged)[:MAX_IMPORT_TAGS]


def build_video_draft(
    result: ScrapeResult,
    *,
    creator_id: str,
    selected: VideoSource,
    overrides: ImportOverrides | None = None,
    tags: Iterable[Any] | None = None,
) -> VideoDraft:
    overrides = overrides or ImportOverrides()
    hostname = urlsplit(result.original_url).hostname or result.original_url
    is_hls = selected.type is VideoSourceType.HLS

    return VideoDraft(
        title=_clean(overrides.title) or result.title or f"Imported demo from {hostname}",
        description=_clean(overrides.description) or result.description or f"Demo imported from {result.original_url}",
        product_url=_clean(overrides.product_url) or result.canonical_url or result.original_url,
        video_path=selected.url,
        thumbnail_path=_clean(overrides.thumbnail_url) or result.thumbnail_url,
        creator_id=creator_id,
        provider="stream" if is_hls else "s3",
        hls_url=selected.url if is_hls else None,
        duration_s=result.duration_seconds,
        tags=merge_tags(tags, result.tags),
    )


async def import_from_url(
    source_url: str,
    *,
    repository: VideoRepositoryProtocol,
    creator_id: str,
    preferred_video_url: str | None = None,
    overrides: ImportOverrides | None = None,
    tags: Iterable[Any] | None = None,
    scrape: Scrape = scrape_product_page,
) -> ImportOutcome:
    """Scrape *source_url* and create one video record from it.

    Raises ScrapeError subclasses from the scrape, and NoVideoFoundError
    before touching the repository when no source survived filtering.
    """
    result = await scrape(source_url)
    selected = select_video(result, preferred_video_url)
    draft = build_video_draft(result, creator_id=creator_id, selected=selected, overrides=overrides, tags=tags)
    video = await repository.create_video_with_tags(draft)
    logger.info("imported video %s from %s (%s)", video.id, result.original_url, selected.type)
    return ImportOutcome(video=video, metadata=result, selected_video=selected)
