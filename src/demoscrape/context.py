# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""ExtractionContext: the accumulator threaded through every collector.

Scalar fields collect candidates in scan order and the assembler keeps the
first non-empty one. Video sources go through the registry and merge.
``FIELD_POLICIES`` names which rule applies to which result field.
"""

from __future__ import annotations

import dataclasses
import re
from enum import StrEnum
from typing import Any

from .duration import normalize_duration
from .registry import VideoSourceRegistry

MAX_TAG_LENGTH = 50

_KEYWORD_SPLIT_RE = re.compile(r"[,|#]")


class MergePolicy(StrEnum):
    """How repeated signals for one result field are reconciled."""

    FIRST_WINS = "first_wins"
    UNION = "union"
    MERGE_ON_CONFLICT = "merge_on_conflict"


FIELD_POLICIES: dict[str, MergePolicy] = {
    "title": MergePolicy.FIRST_WINS,
    "description": MergePolicy.FIRST_WINS,
    "thumbnail_url": MergePolicy.FIRST_WINS,
    "duration_seconds": MergePolicy.FIRST_WINS,
    "canonical_url": MergePolicy.FIRST_WINS,
    "tags": MergePolicy.UNION,
    "video_sources": MergePolicy.MERGE_ON_CONFLICT,
}


@dataclasses.dataclass(slots=True, kw_only=True)
class ExtractionContext:
    """Mutable per-invocation scan state. Never shared between scrapes."""

    page_url: str
    registry: VideoSourceRegistry = dataclasses.field(init=False)
    canonical_url: str | None = None
    title_candidates: list[str] = dataclasses.field(default_factory=list)
    description_candidates: list[str] = dataclasses.field(default_factory=list)
    thumbnail_candidates: list[str] = dataclasses.field(default_factory=list)
    duration_candidates: list[int] = dataclasses.field(default_factory=list)
    # dict as an insertion-ordered set
    tags: dict[str, None] = dataclasses.field(default_factory=dict)

    def __post_init__(self) -> None:
        self.registry = VideoSourceRegistry(self.page_url)

    def add_title(self, value: Any) -> None:
        if isinstance(value, str):
            self.title_candidates.append(value.strip())

    def add_description(self, value: Any) -> None:
        if isinstance(value, str):
            self.description_candidates.append(value.strip())

    def add_thumbnail(self, absolute_url: str | None) -> None:
        if absolute_url:
            self.thumbnail_candidates.append(absolute_url)

    def add_duration(self, value: Any) -> bool:
        """Normalize and append. Returns False when the value was discarded."""
        seconds = normalize_duration(value)
        if seconds is None:
            return False
        self.duration_candidates.append(seconds)
        return True

    def add_keywords(self, raw: Any) -> None:
        """Split keyword strings (recursing into lists) into the tag set."""
        if not raw:
            return
        if isinstance(raw, list):
            for item in raw:
                self.add_keywords(item)
            return
        if not isinstance(raw, str):
            return
        for part in _KEYWORD_SPLIT_RE.split(raw):
            part = part.strip()
            if part:
                self.tags.setdefault(part[:MAX_TAG_LENGTH], None)
