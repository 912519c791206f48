# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Runtime settings with ``DEMOSCRAPE_*`` environment overrides.

Leaf module. Malformed numeric overrides are ignored and the default kept;
out-of-range tag caps are clamped to 1..20 tags and 1..50 characters.
"""

from __future__ import annotations

import dataclasses
import math
import os
from collections.abc import Mapping
from contextlib import suppress

from . import __version__

DEFAULT_FETCH_TIMEOUT_SECONDS = 10.0
DEFAULT_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"
DEFAULT_USER_AGENT = f"demoscrape/{__version__}"

_TRUTHY = ("1", "true", "yes")

# Upper bounds for the tag caps; overrides may tighten them, never widen.
TAG_COUNT_LIMIT = 20
TAG_LENGTH_LIMIT = 50


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class ScraperSettings:
    """Knobs for one scraper process. Immutable; derive variants with ``dataclasses.replace``."""

    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT_SECONDS
    user_agent: str = DEFAULT_USER_AGENT
    accept: str = DEFAULT_ACCEPT
    max_tags: int = TAG_COUNT_LIMIT
    max_tag_length: int = TAG_LENGTH_LIMIT
    log_level: str = "INFO"
    log_json: bool = False
    host: str = "127.0.0.1"
    port: int = 8000

    def __post_init__(self) -> None:
        if not math.isfinite(self.fetch_timeout) or self.fetch_timeout <= 0:
            raise ValueError(f"fetch_timeout must be positive and finite, got {self.fetch_timeout}")
        if not 1 <= self.max_tags <= TAG_COUNT_LIMIT:
            raise ValueError(f"max_tags must be within 1..{TAG_COUNT_LIMIT}, got {self.max_tags}")
        if not 1 <= self.max_tag_length <= TAG_LENGTH_LIMIT:
            raise ValueError(f"max_tag_length must be within 1..{TAG_LENGTH_LIMIT}, got {self.max_tag_length}")

    @property
    def request_headers(self) -> dict[str, str]:
        return {"User-Agent": self.user_agent, "Accept": self.accept}

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ScraperSettings:
        env = os.environ if environ is None else environ
        overrides: dict[str, object] = {}

        raw_timeout = env.get("DEMOSCRAPE_FETCH_TIMEOUT", "").strip()
        if raw_timeout:
            with suppress(ValueError):
                timeout = float(raw_timeout)
                if math.isfinite(timeout) and timeout > 0:
                    overrides["fetch_timeout"] = timeout

        user_agent = env.get("DEMOSCRAPE_USER_AGENT", "").strip()
        if user_agent:
            overrides["user_agent"] = user_agent

        for key, field_name, limit in (
            ("DEMOSCRAPE_MAX_TAGS", "max_tags", TAG_COUNT_LIMIT),
            ("DEMOSCRAPE_MAX_TAG_LENGTH", "max_tag_length", TAG_LENGTH_LIMIT),
        ):
            raw = env.get(key, "").strip()
            if raw:
                with suppress(ValueError):
                    overrides[field_name] = min(max(int(raw), 1), limit)

        raw_port = env.get("DEMOSCRAPE_PORT", "").strip()
        if raw_port:
            with suppress(ValueError):
                overrides["port"] = int(raw_port)

        log_level = env.get("DEMOSCRAPE_LOG_LEVEL", "").strip().upper()
        if log_level:
            overrides["log_level"] = log_level

        overrides["log_json"] = env.get("DEMOSCRAPE_LOG_JSON", "").strip().lower() in _TRUTHY

        host = env.get("DEMOSCRAPE_HOST", "").strip()
        if host:
            overrides["host"] = host

        return cls(**overrides)
