"""Time-ordered image identifiers (UUID version 7 layout)."""

from __future__ import annotations

import os
import threading
import time
import uuid

_COUNTER_MAX = 0xFFF

_lock = threading.Lock()
_last_ms = 0
_counter = 0


def new_image_id() -> uuid.UUID:
    """Return a UUIDv7 that sorts strictly after every id issued before it.

    The 48-bit millisecond timestamp is followed by a 12-bit counter that
    breaks ties within the same millisecond; if the counter runs out or the
    clock steps back, the timestamp is carried forward instead.
    """
    global _last_ms, _counter

    with _lock:
        now_ms = time.time_ns() // 1_000_000
        if now_ms > _last_ms:
            _last_ms = now_ms
            _counter = 0
        else:
            _counter += 1
            if _counter > _COUNTER_MAX:
                _last_ms += 1
                _counter = 0
        timestamp, counter = _last_ms, _counter

    rand_b = int.from_bytes(os.urandom(8), "big") & ((1 << 62) - 1)
    value = (timestamp & ((1 << 48) - 1)) << 80
    value |= 0x7 << 76
    value |= counter << 64
    value |= 0b10 << 62
    value |= rand_b
    return uuid.UUID(int=value)
