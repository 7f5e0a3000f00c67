"""Simple span helper for recording operation timings."""
from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Any, Dict, Iterator

from .logger import log_event


@contextmanager
def span(kind: str, interview_id: str = "-", **fields: Any) -> Iterator[Dict[str, Any]]:
    """Log ``kind`` with elapsed ms once the block exits.

    The yielded dict can be filled in by the block; its entries are added to
    the logged event.
    """

    extra: Dict[str, Any] = {}
    start = time.perf_counter()
    outcome = "ok"
    try:
        yield extra
    except Exception as exc:
        outcome = "error"
        extra.setdefault("error", type(exc).__name__)
        raise
    finally:
        elapsed_ms = int((time.perf_counter() - start) * 1000)
        payload = {**fields, **extra, "ms": elapsed_ms, "outcome": outcome}
        log_event(kind, interview_id, **payload)


__all__ = ["span"]
