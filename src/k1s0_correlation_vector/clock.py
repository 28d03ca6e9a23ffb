"""Spin 演算子が参照する時刻源・乱数源"""

from __future__ import annotations

import os
import time
from collections.abc import Callable

TimeSource = Callable[[], int]
RandomBytesSource = Callable[[int], bytes]


def ticks_since_epoch() -> int:
    """UNIX エポックからの経過時間を 100ns 単位の ticks で返す。"""
    return time.time_ns() // 100


def default_random_bytes(size: int) -> bytes:
    return os.urandom(size)
