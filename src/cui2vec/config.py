"""
Runtime configuration for loading and querying cui2vec models.

Defaults are read from the environment once, at import time:

    CUI2VEC_LOAD_WORKERS=0   # 0 = auto (one parser per CPU)
    CUI2VEC_QUERY_WORKERS=0  # 0 = auto (two comparisons per CPU)
    CUI2VEC_QUEUE_FACTOR=4   # load queue holds workers * factor lines
"""

from __future__ import annotations

import os

# =============================================================================
# Configuration
# =============================================================================

CPU_COUNT = os.cpu_count() or 1

DEFAULT_LOAD_WORKERS = int(os.environ.get("CUI2VEC_LOAD_WORKERS", "0")) or CPU_COUNT
DEFAULT_QUERY_WORKERS = int(os.environ.get("CUI2VEC_QUERY_WORKERS", "0")) or 2 * CPU_COUNT
QUEUE_FACTOR = max(int(os.environ.get("CUI2VEC_QUEUE_FACTOR", "4")), 1)


def resolve_workers(explicit: int | None, default: int) -> int:
    """Return the worker count to use, preferring a per-call override."""
    workers = default if explicit is None else explicit
    if workers < 1:
        raise ValueError(f"worker count must be >= 1, got {workers}")
    return workers


__all__ = [
    "CPU_COUNT",
    "DEFAULT_LOAD_WORKERS",
    "DEFAULT_QUERY_WORKERS",
    "QUEUE_FACTOR",
    "resolve_workers",
]
