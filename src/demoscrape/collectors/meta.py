# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Head collectors: ``<meta>``, ``<link rel="canonical">`` and ``<title>``.

One regex pass per tag kind over the whole document, no tree walk.
"""

from __future__ import annotations

import logging
import re

from ..context import ExtractionContext
from ..entities import decode_entities
from ..tokenizer import parse_attributes
from ..urls import to_absolute_url

logger = logging.getLogger(__name__)

_META_RE = re.compile(r"<meta\b[^>]*>", re.IGNORECASE)
_LINK_RE = re.compile(r"<link\b[^>]*>", re.IGNORECASE)
_TITLE_RE = re.compile(r"<title[^>]*>(.*?)</title>", re.IGNORECASE | re.DOTALL)

OPENGRAPH_VIDEO_LABEL = "OpenGraph video"
TWITTER_VIDEO_LABEL = "Twitter video"

_TITLE_PROPERTIES = frozenset({"og:title"})
_TITLE_NAMES = frozenset({"twitter:title", "title"})
_TITLE_ITEMPROPS = frozenset({"name"})

_DESCRIPTION_PROPERTIES = frozenset({"og:description", "product:description"})
_DESCRIPTION_NAMES = frozenset({"description", "twitter:description"})
_DESCRIPTION_ITEMPROPS = frozenset({"description"})

_IMAGE_PROPERTIES = frozenset({"og:image", "og:image:url"})
_IMAGE_NAMES = frozenset({"twitter:image"})
_IMAGE_ITEMPROPS = frozenset({"image", "thumbnailurl"})

_OG_VIDEO_PROPERTIES = frozenset({"og:video", "og:video:url", "og:video:secure_url"})
_OG_VIDEO_TYPE_PROPERTIES = frozenset({"og:video:type"})
_TWITTER_STREAM_NAMES = frozenset({"twitter:player:stream", "twitter:player:stream:src"})
_TWITTER_STREAM_TYPE_NAMES = frozenset({"twitter:player:stream:content_type"})

_DURATION_PROPERTIES = frozenset({"og:video:duration", "video:duration"})
_DURATION_NAMES = frozenset({"duration"})


def collect_meta_tags(html: str, ctx: ExtractionContext) -> None:
    """Map every ``<meta content=...>`` onto title/description/thumbnail/tag/video/duration candidates."""
    last_og_video: str | None = None
    last_twitter_stream: str | None = None

    for m in _META_RE.finditer(html):
        attrs = parse_attributes(m.group(0))
        content = attrs.get("content", "").strip()
        if not content:
            continue
        name = attrs.get("name", "").lower()
        prop = attrs.get("property", "").lower()
        itemprop = attrs.get("itemprop", "").lower()

        if prop in _TITLE_PROPERTIES or name in _TITLE_NAMES or itemprop in _TITLE_ITEMPROPS:
            ctx.add_title(content)

        if prop in _DESCRIPTION_PROPERTIES or name in _DESCRIPTION_NAMES or itemprop in _DESCRIPTION_ITEMPROPS:
            ctx.add_description(content)

        if prop in _IMAGE_PROPERTIES or name in _IMAGE_NAMES or itemprop in _IMAGE_ITEMPROPS:
            ctx.add_thumbnail(to_absolute_url(ctx.page_url, content))

        if name == "keywords" or itemprop == "keywords":
            ctx.add_keywords(content)

        if prop.endswith(":tag") or name.endswith(":tag"):
            ctx.add_keywords(content)

        if prop in _OG_VIDEO_PROPERTIES:
            last_og_video = ctx.registry.add(content, label=OPENGRAPH_VIDEO_LABEL) or last_og_video

        # og:video:type / stream content_type describe the preceding video URL
        if prop in _OG_VIDEO_TYPE_PROPERTIES and last_og_video:
            ctx.registry.add(last_og_video, mime_type=content)

        if prop in _DURATION_PROPERTIES or name in _DURATION_NAMES:
            if not ctx.add_duration(content):
                logger.debug("discarded meta duration: %r", content)

        if name in _TWITTER_STREAM_NAMES:
            last_twitter_stream = ctx.registry.add(content, label=TWITTER_VIDEO_LABEL) or last_twitter_stream

        if name in _TWITTER_STREAM_TYPE_NAMES and last_twitter_stream:
            ctx.registry.add(last_twitter_stream, mime_type=content)


def collect_canonical_link(html: str, ctx: ExtractionContext) -> None:
    """First ``<link rel="canonical" href>`` that resolves wins; the scan stops there."""
    for m in _LINK_RE.finditer(html):
        attrs = parse_attributes(m.group(0))
        rel = attrs.get("rel", "").lower().split()
        if "canonical" not in rel or not attrs.get("href"):
            continue
        absolute = to_absolute_url(ctx.page_url, attrs["href"])
        if absolute:
            ctx.canonical_url = absolute
            return


def collect_title_tag(html: str, ctx: ExtractionContext) -> None:
    """``<title>`` text, queued behind any meta title already collected."""
    m = _TITLE_RE.search(html)
    if m and m.group(1).strip():
        ctx.add_title(decode_entities(m.group(1).strip()))
