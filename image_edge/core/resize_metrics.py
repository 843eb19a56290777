"""
Lightweight in-memory counters of how image requests were resolved.
"""

from threading import Lock
from typing import Dict

RESOLUTION_KINDS = (
    "cache_hit",
    "origin_cache_hit",
    "origin_fetch",
    "transformed",
    "invalid",
    "failed",
    "method_not_allowed",
)

_metrics_lock = Lock()
_metrics: Dict[str, int] = {kind: 0 for kind in RESOLUTION_KINDS}


def record_resolution(kind: str) -> None:
    """Count one occurrence of `kind`; unknown kinds are ignored."""
    if kind not in _metrics:
        return
    with _metrics_lock:
        _metrics[kind] += 1


def get_resolution_metrics() -> Dict[str, int]:
    """Return a snapshot of current resolution counters."""
    with _metrics_lock:
        return dict(_metrics)


def reset_resolution_metrics() -> None:
    with _metrics_lock:
        for kind in _metrics:
            _metrics[kind] = 0
