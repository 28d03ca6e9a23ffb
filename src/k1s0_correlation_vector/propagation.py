"""contextvars とヘッダー辞書を使った相関ベクトルの伝播"""

from __future__ import annotations

import contextvars
from collections.abc import Mapping, MutableMapping
from typing import Any

from .errors import ErrorSink
from .headers import MS_CV
from .settings import CorrelationVectorSettings
from .vector import CorrelationVector

_correlation_vector_var: contextvars.ContextVar[CorrelationVector | None] = (
    contextvars.ContextVar("correlation_vector", default=None)
)

_CorrelationVectorToken = contextvars.Token[CorrelationVector | None]


def set_correlation_vector(cv: CorrelationVector) -> _CorrelationVectorToken:
    """現在のコンテキストに相関ベクトルをセットする。"""
    return _correlation_vector_var.set(cv)


def get_correlation_vector() -> CorrelationVector | None:
    """現在のコンテキストから相関ベクトルを取得する。"""
    return _correlation_vector_var.get()


def reset_correlation_vector(token: contextvars.Token[Any]) -> None:
    """set_correlation_vector で取得したトークンでリセットする。"""
    _correlation_vector_var.reset(token)


def extract_from_headers(
    headers: Mapping[str, str],
    *,
    settings: CorrelationVectorSettings | None = None,
    error_sink: ErrorSink | None = None,
) -> CorrelationVector:
    """受信ヘッダーから相関ベクトルを取り出して拡張する。

    MS-CV ヘッダーが存在しない場合は新規生成する。
    """
    value = headers.get(MS_CV) or headers.get(MS_CV.lower())
    if not value:
        return CorrelationVector()
    return CorrelationVector.extend(value, settings=settings, error_sink=error_sink)


def inject_into_headers(cv: CorrelationVector, headers: MutableMapping[str, str]) -> str:
    """相関ベクトルを 1 進め、その値を送信ヘッダー辞書に注入する（in-place）。"""
    value = cv.increment()
    headers[MS_CV] = value
    return value
