# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Result types returned by the extraction engine.

Both are immutable value objects: built once by the assembler, handed to
the caller, never mutated afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class VideoSourceType(StrEnum):
    """Playability class of a discovered video URL."""

    FILE = "file"
    HLS = "hls"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class VideoSource:
    """One candidate video, keyed by its normalized absolute URL."""

    url: str
    type: VideoSourceType
    label: str | None = None
    mime_type: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """camelCase JSON dict. Absent optional fields are omitted."""
        d: dict[str, Any] = {"url": self.url, "type": self.type.value}
        if self.label is not None:
            d["label"] = self.label
        if self.mime_type is not None:
            d["mimeType"] = self.mime_type
        return d


@dataclass(frozen=True, slots=True)
class ScrapeResult:
    """Normalized metadata for one scraped page."""

    original_url: str
    canonical_url: str | None = None
    title: str | None = None
    description: str | None = None
    thumbnail_url: str | None = None
    tags: tuple[str, ...] = ()
    video_sources: tuple[VideoSource, ...] = ()
    duration_seconds: int | None = None

    @property
    def has_video(self) -> bool:
        return bool(self.video_sources)

    def to_dict(self) -> dict[str, Any]:
        """camelCase JSON dict matching the preview endpoint payload."""
        d: dict[str, Any] = {"originalUrl": self.original_url}
        optional = (
            ("canonicalUrl", self.canonical_url),
            ("title", self.title),
            ("description", self.description),
            ("thumbnailUrl", self.thumbnail_url),
        )
        for key, value in optional:
            if value is not None:
                d[key] = value
        d["tags"] = list(self.tags)
        d["videoSources"] = [s.to_dict() for s in self.video_sources]
        if self.duration_seconds is not None:
            d["durationSeconds"] = self.duration_seconds
        return d
