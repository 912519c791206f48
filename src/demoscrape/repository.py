# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Persistence boundary for imported videos.

Defines ``VideoRepositoryProtocol`` (what the import flow needs from storage)
and ``InMemoryVideoRepository`` for the development server and tests. Real
deployments plug in their own implementation; the extraction engine never
touches this module.
"""

from __future__ import annotations

import asyncio
import time
import uuid
from dataclasses import asdict, dataclass, field
from typing import Any, Protocol, runtime_checkable

# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True, kw_only=True)
class VideoDraft:
    """Merged scrape + user overrides, ready to persist."""

    title: str
    description: str
    product_url: str
    video_path: str
    creator_id: str
    provider: str
    thumbnail_path: str | None = None
    hls_url: str | None = None
    duration_s: int | None = None
    tags: tuple[str, ...] = ()
    status: str = "ready"


@dataclass(frozen=True, slots=True, kw_only=True)
class StoredVideo:
    """A persisted video record."""

    id: str
    draft: VideoDraft
    created_at: float = field(default_factory=time.time)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self.draft)
        d["tags"] = list(self.draft.tags)
        return {"id": self.id, "createdAt": self.created_at, **_camel_keys(d)}


def _camel_keys(d: dict[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, value in d.items():
        head, *rest = key.split("_")
        out[head + "".join(p.capitalize() for p in rest)] = value
    return out


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------


@runtime_checkable
class VideoRepositoryProtocol(Protocol):
    """Interface the import flow persists through."""

    async def create_video_with_tags(self, draft: VideoDraft) -> StoredVideo: ...

    async def close(self) -> None: ...


# ---------------------------------------------------------------------------
# In-memory implementation
# ---------------------------------------------------------------------------


class InMemoryVideoRepository:
    """Process-local store. Lost on restart."""

    def __init__(self) -> None:
        self._videos: dict[str, StoredVideo] = {}
        self._lock = asyncio.Lock()

    async def create_video_with_tags(self, draft: VideoDraft) -> StoredVideo:
        async with self._lock:
            video = StoredVideo(id=uuid.uuid4().hex, draft=draft)
            self._videos[video.id] = video
            return video

    async def get_video(self, video_id: str) -> StoredVideo | None:
        return self._videos.get(video_id)

    async def list_videos(self) -> list[StoredVideo]:
        return list(self._videos.values())

    async def close(self) -> None:
        self._videos.clear()
