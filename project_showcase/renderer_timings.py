"""Timing utilities for showcase build profiling.

Enabled via the PROJECT_SHOWCASE_DEBUG_TIMING environment variable. When
disabled every helper here is a no-op.
"""

import os
import time
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Optional, Union

# Set to "1", "true", or "yes" to enable timing output
DEBUG_TIMING = os.getenv("PROJECT_SHOWCASE_DEBUG_TIMING", "").lower() in (
    "1",
    "true",
    "yes",
)

MARKDOWN_TIMINGS = "_markdown_timings"
README_FETCH_TIMINGS = "_readme_fetch_timings"

# Global timing data storage
_timing_data: dict[str, Any] = {}


def start_timing_collection() -> None:
    """Reset per-operation timing lists for a new build."""
    if DEBUG_TIMING:
        _timing_data[MARKDOWN_TIMINGS] = []
        _timing_data[README_FETCH_TIMINGS] = []
        _timing_data["_current_repo"] = ""


def set_current_repo(repo: str) -> None:
    """Label subsequent timing stats with the repository being processed."""
    if DEBUG_TIMING:
        _timing_data["_current_repo"] = repo


def get_timings(list_name: str) -> list[tuple[float, str]]:
    return list(_timing_data.get(list_name, []))


@contextmanager
def log_timing(
    phase: Union[str, Callable[[], str]],
    t_start: Optional[float] = None,
) -> Iterator[None]:
    """Context manager printing how long a build phase took.

    Args:
        phase: Phase name, or a callable returning it (evaluated at the end)
        t_start: Optional build start time, to also print the running total
    """
    if not DEBUG_TIMING:
        yield
        return

    t_phase_start = time.time()
    try:
        yield
    finally:
        t_now = time.time()
        phase_name = phase() if callable(phase) else phase
        line = f"[TIMING] {phase_name:40s} {t_now - t_phase_start:8.3f}s"
        if t_start is not None:
            line += f" (total: {t_now - t_start:8.3f}s)"
        print(line, flush=True)


@contextmanager
def timing_stat(list_name: str) -> Iterator[None]:
    """Record the duration of one operation under ``list_name``."""
    if not DEBUG_TIMING:
        yield
        return

    t_start = time.time()
    try:
        yield
    finally:
        duration = time.time() - t_start
        if list_name in _timing_data:
            repo = _timing_data.get("_current_repo", "")
            _timing_data[list_name].append((duration, repo))


def report_timing_statistics() -> None:
    """Print totals and the slowest operations for each collected list."""
    if not DEBUG_TIMING:
        return

    for operation_name, list_name in (
        ("README fetch", README_FETCH_TIMINGS),
        ("Markdown", MARKDOWN_TIMINGS),
    ):
        timings = get_timings(list_name)
        if not timings:
            continue
        total_time = sum(t[0] for t in timings)
        print(f"\n[TIMING] {operation_name}:", flush=True)
        print(f"[TIMING]   Total operations: {len(timings)}", flush=True)
        print(f"[TIMING]   Total time: {total_time:.3f}s", flush=True)
        print("[TIMING]   Slowest 5 operations:", flush=True)
        for duration, repo in sorted(timings, reverse=True)[:5]:
            print(f"[TIMING]     {repo or '-'}: {duration * 1000:.1f}ms", flush=True)
