"""不正な相関ベクトルのエラーを蓄積する ErrorSink"""

from __future__ import annotations

import threading
from collections import deque

import structlog

from .exceptions import AggregateError
from .settings import CorrelationVectorSettings

logger = structlog.get_logger(__name__)

MAX_SAVED_ERRORS_LIMIT = 100


class ErrorSink:
    """容量付きの FIFO でエラーを保持する。

    容量を超えた場合は古いエラーから破棄する。容量 0 のときは何も保存しない。
    """

    def __init__(self, max_saved_errors: int = 1) -> None:
        self._lock = threading.Lock()
        self._errors: deque[Exception] = deque()
        self._max_saved_errors = _clamp(max_saved_errors)

    @classmethod
    def from_settings(cls, settings: CorrelationVectorSettings) -> ErrorSink:
        return cls(max_saved_errors=settings.max_saved_errors)

    @property
    def max_saved_errors(self) -> int:
        """保存するエラーの最大件数（0〜100）。"""
        return self._max_saved_errors

    @max_saved_errors.setter
    def max_saved_errors(self, value: int) -> None:
        with self._lock:
            self._max_saved_errors = _clamp(value)
            self._purge()

    @property
    def saved_error_count(self) -> int:
        return len(self._errors)

    def report(self, error: Exception) -> None:
        """エラーを記録する。"""
        with self._lock:
            if self._max_saved_errors == 0:
                return
            self._errors.append(error)
            self._purge()

    def has_saved_errors(self) -> bool:
        return len(self._errors) > 0

    def throw_saved_errors(self) -> None:
        """保存済みのエラーを取り出して AggregateError として送出する。

        保存済みのエラーがなければ何もしない。

        Raises:
            AggregateError: 保存済みのエラーが 1 件以上ある場合
        """
        with self._lock:
            if not self._errors:
                return
            drained = list(self._errors)
            self._errors.clear()
        raise AggregateError(drained)

    def clear_errors(self) -> None:
        with self._lock:
            self._errors.clear()

    def _purge(self) -> None:
        dropped = 0
        while len(self._errors) > self._max_saved_errors:
            self._errors.popleft()
            dropped += 1
        if dropped:
            logger.debug("Discarded oldest saved errors", dropped=dropped)


def _clamp(value: int) -> int:
    return max(0, min(value, MAX_SAVED_ERRORS_LIMIT))


default_error_sink = ErrorSink()
