# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Log setup for the CLI (console lines) and the server (JSON lines).

Library modules log through ``logging.getLogger(__name__)``. ``configure``
routes those records and any structlog loggers through one stderr handler,
and ``scrape_context`` tags every record emitted during a scrape with the
page being scraped.
"""

from __future__ import annotations

import logging
import sys
from contextlib import AbstractContextManager

import structlog
from structlog.typing import EventDict, Processor, WrappedLogger

# Chatty HTTP client loggers; kept at WARNING unless the root runs at DEBUG.
_NOISY_LOGGERS = ("httpx", "httpcore")

# Event keys that may carry raw page markup.
_BODY_KEYS = frozenset({"html", "body", "content"})


def _drop_page_bodies(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    for key in _BODY_KEYS & event_dict.keys():
        event_dict[key] = "<omitted>"
    return event_dict


def _pre_chain() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        _drop_page_bodies,
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]


def _stderr_handler(renderer: Processor, pre_chain: list[Processor]) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
            foreign_pre_chain=pre_chain,
        )
    )
    return handler


def _level_number(name: str) -> int:
    value = logging.getLevelName(name.upper())
    return value if isinstance(value, int) else logging.INFO


def configure(*, json_output: bool = False, level: str = "INFO") -> None:
    """Replace the root handlers with a single structlog-formatted stderr handler.

    Args:
        json_output: JSON lines (``serve``) instead of the console renderer (``scrape``).
        level: Root level name; unknown names fall back to INFO.
    """
    pre_chain = _pre_chain()
    renderer: Processor = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    root_level = _level_number(level)
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(_stderr_handler(renderer, pre_chain))
    root.setLevel(root_level)

    noisy_level = root_level if root_level <= logging.DEBUG else logging.WARNING
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(noisy_level)


def scrape_context(page_url: str) -> AbstractContextManager:
    """Bind ``scrape_url`` to every record logged inside the block."""
    return structlog.contextvars.bound_contextvars(scrape_url=page_url)
