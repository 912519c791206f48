# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Scrape stage timer for latency logging and timeout diagnostics.

Created before the fetch deadline starts so it survives cancellation and
can still describe where a timed-out scrape was stuck.
"""

from __future__ import annotations

import time
from dataclasses import dataclass

_STAGE_HINTS: dict[str, str] = {
    "fetch": "The site is slow to respond. Try again later or use a different URL.",
    "extract": "The page markup is unusually large.",
    "assemble": "Result assembly is stalling.",
}


@dataclass(slots=True)
class StageRecord:
    name: str
    start_ns: int
    end_ns: int = 0

    @property
    def elapsed_ms(self) -> float:
        return round((self.end_ns - self.start_ns) / 1e6, 1)


class PipelineTimer:
    """Track stage transitions (fetch -> extract -> assemble) of one scrape."""

    __slots__ = ("_stages", "_current", "_start_ns")

    def __init__(self) -> None:
        self._stages: list[StageRecord] = []
        self._current: StageRecord | None = None
        self._start_ns: int = time.monotonic_ns()

    def stage(self, name: str) -> None:
        """End the running stage and start *name*."""
        now = time.monotonic_ns()
        if self._current is not None:
            self._current.end_ns = now
            self._stages.append(self._current)
        self._current = StageRecord(name=name, start_ns=now)

    def finalize(self) -> None:
        if self._current is not None:
            self._current.end_ns = time.monotonic_ns()
            self._stages.append(self._current)
            self._current = None

    @property
    def current_stage(self) -> str | None:
        return self._current.name if self._current else None

    def elapsed_per_stage(self) -> dict[str, float]:
        """``{stage: elapsed_ms}`` including a still-running stage."""
        result = {s.name: s.elapsed_ms for s in self._stages}
        if self._current is not None:
            result[self._current.name] = round((time.monotonic_ns() - self._current.start_ns) / 1e6, 1)
        return result

    def total_ms(self) -> float:
        return round((time.monotonic_ns() - self._start_ns) / 1e6, 1)

    def timeout_report(self) -> dict:
        """Structured diagnostic logged when a scrape hits its deadline."""
        current = self.current_stage or "unknown"
        current_ms = (
            round((time.monotonic_ns() - self._current.start_ns) / 1e6, 1) if self._current else 0
        )
        return {
            "error": "timeout",
            "completed_stages": [{"stage": s.name, "ms": s.elapsed_ms} for s in self._stages],
            "timed_out_at": current,
            "timed_out_stage_ms": current_ms,
            "total_ms": self.total_ms(),
            "hint": self.hint_for_stage(current),
        }

    @staticmethod
    def hint_for_stage(stage: str) -> str:
        return _STAGE_HINTS.get(stage, f"Timed out during '{stage}' stage.")
