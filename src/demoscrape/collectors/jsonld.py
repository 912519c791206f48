# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""JSON-LD structured-data walker.

Harvests VideoObject and Product nodes from every
``<script type="application/ld+json">`` block. Sites nest these under
``@graph``, ``itemListElement``, ``subjectOf`` and friends, so the walker
visits the known container properties first and then every other
object-valued property, guarded by an identity-keyed visited set.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from ..context import ExtractionContext
from ..models import VideoSourceType
from ..urls import infer_video_type, to_absolute_url

logger = logging.getLogger(__name__)

_JSONLD_RE = re.compile(
    r'<script[^>]*type=["\']application/ld\+json["\'][^>]*>(.*?)</script>',
    re.DOTALL | re.IGNORECASE,
)
_HTML_COMMENT_RE = re.compile(r"<!--.*?-->", re.DOTALL)

# Properties that commonly hold nested entities, visited before the generic fallback.
CONTAINER_KEYS = (
    "video",
    "hasVideo",
    "itemListElement",
    "associatedMedia",
    "subjectOf",
    "mentions",
    "offers",
    "potentialAction",
    "mainEntity",
)

_DEFAULT_VIDEO_LABEL = "Video"


def parse_jsonld_block(raw: str) -> Any | None:
    """Parse one script body. None when nothing usable could be decoded.

    HTML comments are stripped first. Bodies that fail to parse and are not
    already bracketed get a second try wrapped in ``[...]``, which recovers
    the comma-joined object lists some sites emit.
    """
    cleaned = _HTML_COMMENT_RE.sub("", raw).strip()
    if not cleaned:
        return None

    attempts = [cleaned]
    if not cleaned.startswith("[") and not cleaned.endswith("]"):
        attempts.append(f"[{cleaned}]")

    for text in attempts:
        try:
            return json.loads(text)
        except (json.JSONDecodeError, RecursionError):
            continue
    logger.debug("skipping unparseable JSON-LD block (%d chars)", len(cleaned))
    return None


def _schema_types(node: dict) -> set[str]:
    """Lower-cased ``@type``/``type`` values with any schema.org prefix stripped."""
    raw = node.get("@type") or node.get("type")
    values = raw if isinstance(raw, list) else [raw]
    types: set[str] = set()
    for value in values:
        if not isinstance(value, str):
            continue
        short = value.strip().rsplit("/", 1)[-1].rsplit(":", 1)[-1]
        types.add(short.lower())
    return types


def _first(value: Any) -> Any:
    if isinstance(value, list):
        return value[0] if value else None
    return value


def _image_url(value: Any) -> str | None:
    """Image reference from a string, list, or ImageObject."""
    image = _first(value)
    if isinstance(image, dict):
        image = image.get("url") or image.get("contentUrl")
    return image if isinstance(image, str) else None


def _harvest_video_object(node: dict, ctx: ExtractionContext) -> None:
    name = node.get("name")
    ctx.add_title(name)
    ctx.add_description(node.get("description"))

    thumb = _first(node.get("thumbnailUrl"))
    if isinstance(thumb, str):
        ctx.add_thumbnail(to_absolute_url(ctx.page_url, thumb))

    if node.get("duration"):
        ctx.add_duration(node["duration"])

    label = name if isinstance(name, str) else _DEFAULT_VIDEO_LABEL
    encoding = node.get("encodingFormat")
    mime_type = encoding if isinstance(encoding, str) else None

    content_url = node.get("contentUrl")
    if isinstance(content_url, str):
        ctx.registry.add(content_url, label=label, mime_type=mime_type)

    # embedUrl is usually a player page; only keep it when it is plainly a media file
    embed_url = node.get("embedUrl")
    if isinstance(embed_url, str):
        inferred = infer_video_type(embed_url, mime_type)
        if inferred is not VideoSourceType.UNKNOWN:
            ctx.registry.add(embed_url, label=label, mime_type=mime_type, explicit_type=inferred)

    ctx.add_keywords(node.get("keywords"))


def _harvest_product(node: dict, ctx: ExtractionContext) -> None:
    ctx.add_title(node.get("name"))
    ctx.add_description(node.get("description"))

    image = _image_url(node.get("image"))
    if image:
        ctx.add_thumbnail(to_absolute_url(ctx.page_url, image))

    brand = node.get("brand")
    if isinstance(brand, dict):
        brand = brand.get("name")
    if isinstance(brand, str):
        ctx.add_keywords(brand)


def walk_jsonld(node: Any, ctx: ExtractionContext, visited: set[int] | None = None) -> None:
    """Depth-first walk of a parsed JSON-LD value.

    *visited* holds ``id()`` of every container already entered, so shared or
    cyclic references are processed once while structurally equal but
    distinct nodes are still each visited.
    """
    if not isinstance(node, (dict, list)):
        return
    if visited is None:
        visited = set()
    if id(node) in visited:
        return
    visited.add(id(node))

    if isinstance(node, list):
        for item in node:
            walk_jsonld(item, ctx, visited)
        return

    types = _schema_types(node)
    if "videoobject" in types:
        _harvest_video_object(node, ctx)
    if "product" in types:
        _harvest_product(node, ctx)

    for key in CONTAINER_KEYS:
        if key in node:
            walk_jsonld(node[key], ctx, visited)

    for value in node.values():
        if isinstance(value, (dict, list)):
            walk_jsonld(value, ctx, visited)


def collect_jsonld(html: str, ctx: ExtractionContext) -> None:
    """Parse and walk every JSON-LD block. Bad blocks are skipped, never raised."""
    for m in _JSONLD_RE.finditer(html):
        parsed = parse_jsonld_block(m.group(1))
        if parsed is None:
            continue
        try:
            walk_jsonld(parsed, ctx)
        except RecursionError:
            logger.debug("JSON-LD block nested too deeply; partial harvest kept")
