# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Deduplicating index of discovered video sources.

This is where every video signal converges. Unlike the scalar fields,
which keep the first candidate and ignore the rest, the registry merges:

- a new key stores the candidate with its inferred type;
- a known key only fills a missing label/MIME type, and only upgrades
  ``unknown`` to an explicit type. An explicit type is never changed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .models import VideoSource, VideoSourceType
from .urls import infer_video_type, normalize_video_url

logger = logging.getLogger(__name__)

# Final ordering: all file entries first, then hls; discovery order within a type.
_TYPE_RANK: dict[VideoSourceType, int] = {
    VideoSourceType.FILE: 0,
    VideoSourceType.HLS: 1,
}


@dataclass(slots=True)
class _Draft:
    url: str
    type: VideoSourceType
    label: str | None = None
    mime_type: str | None = None

    def freeze(self) -> VideoSource:
        return VideoSource(url=self.url, type=self.type, label=self.label, mime_type=self.mime_type)


class VideoSourceRegistry:
    """Insertion-ordered map of normalized absolute URL -> video draft."""

    __slots__ = ("_base_url", "_drafts")

    def __init__(self, base_url: str) -> None:
        self._base_url = base_url
        self._drafts: dict[str, _Draft] = {}

    def __len__(self) -> int:
        return len(self._drafts)

    def __contains__(self, url: object) -> bool:
        return url in self._drafts

    def add(
        self,
        value: str | None,
        *,
        label: str | None = None,
        mime_type: str | None = None,
        explicit_type: VideoSourceType | None = None,
    ) -> str | None:
        """Register one candidate. Returns its key, or None when rejected."""
        key = normalize_video_url(self._base_url, value)
        if key is None:
            return None

        label = label or None
        mime_type = mime_type or None
        candidate_type = explicit_type or infer_video_type(key, mime_type)

        existing = self._drafts.get(key)
        if existing is None:
            self._drafts[key] = _Draft(url=key, type=candidate_type, label=label, mime_type=mime_type)
            return key

        if label and not existing.label:
            existing.label = label
        if mime_type and not existing.mime_type:
            existing.mime_type = mime_type
        if existing.type is VideoSourceType.UNKNOWN and candidate_type is not VideoSourceType.UNKNOWN:
            logger.debug("video source type upgraded: %s -> %s", key, candidate_type)
            existing.type = candidate_type
        return key

    def snapshot(self) -> list[VideoSource]:
        """All entries in discovery order, including unresolved ones."""
        return [d.freeze() for d in self._drafts.values()]

    def resolved(self) -> list[VideoSource]:
        """Entries with an explicit type, file before hls (stable)."""
        kept = [d for d in self._drafts.values() if d.type in _TYPE_RANK]
        kept.sort(key=lambda d: _TYPE_RANK[d.type])
        return [d.freeze() for d in kept]
