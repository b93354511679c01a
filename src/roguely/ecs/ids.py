from __future__ import annotations

import itertools
import threading

_lock = threading.Lock()
_counter = itertools.count(1)


def next_id() -> int:
    """Process-unique, monotonically increasing id; never reused."""
    with _lock:
        return next(_counter)
