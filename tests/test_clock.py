"""時刻源・乱数源のユニットテスト"""

import time

from k1s0_correlation_vector.clock import default_random_bytes, ticks_since_epoch


def test_ticks_since_epoch_uses_100ns_units() -> None:
    """ticks が 100ns 単位であること。"""
    before = time.time_ns() // 100
    ticks = ticks_since_epoch()
    after = time.time_ns() // 100
    assert before <= ticks <= after


def test_default_random_bytes_length() -> None:
    """指定したバイト数の乱数が返ること。"""
    assert default_random_bytes(0) == b""
    assert len(default_random_bytes(4)) == 4
