# PATH: core/time.py
"""
Time utilities for XARB.

Wall-clock helpers used for processing durations.
"""

import time


def now_ms() -> int:
    """Get current Unix timestamp in milliseconds."""
    return int(time.time() * 1000)


def elapsed_ms(start_ms: int, end_ms: int | None = None) -> int:
    """
    Milliseconds elapsed since start_ms.

    Never negative, even if the wall clock steps backwards.
    """
    end = now_ms() if end_ms is None else end_ms
    return max(0, end - start_ms)
