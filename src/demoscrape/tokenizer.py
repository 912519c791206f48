# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Attribute tokenizer shared by every tag scanner.

Works on one raw tag substring (``<meta ...>``, ``<video ...>``) rather than
a DOM tree, so malformed markup degrades to missing attributes instead of
an exception.
"""

from __future__ import annotations

import re

from .entities import decode_entities

_ATTR_RE = re.compile(r"""([a-zA-Z0-9_:-]+)\s*=\s*("[^"]*"|'[^']*')""")


def parse_attributes(tag: str) -> dict[str, str]:
    """Return ``{lower-cased name: decoded, trimmed value}`` for quoted attributes.

    Unquoted and valueless attributes are skipped. When a name repeats, the
    last occurrence wins.
    """
    attributes: dict[str, str] = {}
    for m in _ATTR_RE.finditer(tag):
        raw = m.group(2)[1:-1]
        attributes[m.group(1).lower()] = decode_entities(raw.strip())
    return attributes
