# PATH: core/time.py
"""
Time utilities for DEXARB.
"""

import time


def now_ms() -> int:
    """Get current Unix timestamp in milliseconds."""
    return int(time.time() * 1000)


def elapsed_ms(start_monotonic: float) -> int:
    """Milliseconds elapsed since a time.monotonic() reading."""
    return int((time.monotonic() - start_monotonic) * 1000)
