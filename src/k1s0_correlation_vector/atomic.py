"""compare-and-set 付きの整数セル"""

from __future__ import annotations

import threading


class AtomicInteger:
    """compare_and_set でのみ更新される整数。

    ロックは比較と代入の間だけ保持する。呼び出し側は失敗時に再試行する。
    """

    def __init__(self, value: int = 0) -> None:
        self._value = value
        self._lock = threading.Lock()

    def get(self) -> int:
        return self._value

    def compare_and_set(self, expected: int, new_value: int) -> bool:
        """現在値が expected と一致する場合のみ new_value に更新する。"""
        with self._lock:
            if self._value != expected:
                return False
            self._value = new_value
            return True
