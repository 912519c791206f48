# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Turn a filled ExtractionContext into the immutable ScrapeResult."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TypeVar

from .context import FIELD_POLICIES, MAX_TAG_LENGTH, ExtractionContext, MergePolicy
from .models import ScrapeResult

MAX_TAGS = 20

T = TypeVar("T")


def choose_first(values: Iterable[T | None]) -> T | None:
    """First non-empty candidate. Strings are trimmed and blanks skipped."""
    for value in values:
        if isinstance(value, str):
            trimmed = value.strip()
            if trimmed:
                return trimmed  # type: ignore[return-value]
        elif value is not None:
            return value
    return None


def assemble_result(
    ctx: ExtractionContext,
    *,
    max_tags: int = MAX_TAGS,
    max_tag_length: int = MAX_TAG_LENGTH,
) -> ScrapeResult:
    """Apply first-wins to scalars, cap tags, filter and order video sources."""
    scalar_candidates = {
        "title": ctx.title_candidates,
        "description": ctx.description_candidates,
        "thumbnail_url": ctx.thumbnail_candidates,
        "duration_seconds": ctx.duration_candidates,
    }
    scalars = {
        field: choose_first(candidates)
        for field, candidates in scalar_candidates.items()
        if FIELD_POLICIES[field] is MergePolicy.FIRST_WINS
    }

    # caps can only tighten the limits
    max_tags = max(0, min(max_tags, MAX_TAGS))
    max_tag_length = max(1, min(max_tag_length, MAX_TAG_LENGTH))
    tags = tuple(tag[:max_tag_length] for tag in list(ctx.tags)[:max_tags])

    return ScrapeResult(
        original_url=ctx.page_url,
        canonical_url=ctx.canonical_url,
        tags=tags,
        video_sources=tuple(ctx.registry.resolved()),
        **scalars,
    )
