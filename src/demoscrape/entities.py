# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""HTML entity decoding for raw attribute and text values.

Only a fixed set of named entities plus numeric references are decoded.
Anything else is returned verbatim so no data is lost on exotic markup.
"""

from __future__ import annotations

import re

_ENTITY_RE = re.compile(r"&(#[xX][0-9a-fA-F]+|#[0-9]+|[a-zA-Z]+);")

_NAMED_ENTITIES: dict[str, str] = {
    "amp": "&",
    "lt": "<",
    "gt": ">",
    "quot": '"',
    "apos": "'",
    "nbsp": " ",
}

_MAX_CODE_POINT = 0x10FFFF


def _decode_numeric(ref: str) -> str | None:
    try:
        code_point = int(ref[2:], 16) if ref[1] in "xX" else int(ref[1:], 10)
    except ValueError:
        return None
    if code_point > _MAX_CODE_POINT or 0xD800 <= code_point <= 0xDFFF:
        return None
    return chr(code_point)


def _replace(match: re.Match[str]) -> str:
    entity = match.group(1)
    if entity.startswith("#"):
        decoded = _decode_numeric(entity)
    else:
        decoded = _NAMED_ENTITIES.get(entity.lower())
    return decoded if decoded is not None else match.group(0)


def decode_entities(value: str) -> str:
    """Decode ``&amp; &lt; &gt; &quot; &apos; &nbsp;`` and ``&#NN;``/``&#xHH;``.

    ``&#39;`` falls out of the numeric branch. Unknown or out-of-range
    entities are left as-is.
    """
    if "&" not in value:
        return value
    return _ENTITY_RE.sub(_replace, value)
