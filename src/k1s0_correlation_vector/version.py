"""相関ベクトルのバージョン定義"""

from __future__ import annotations

from enum import Enum


class CorrelationVectorVersion(Enum):
    """相関ベクトルのワイヤーフォーマットのバージョン。"""

    V1 = "V1"
    V2 = "V2"

    @property
    def base_length(self) -> int:
        """ベース部の文字数。"""
        return 16 if self is CorrelationVectorVersion.V1 else 22

    @property
    def max_length(self) -> int:
        """シリアライズ後の最大文字数。"""
        return 63 if self is CorrelationVectorVersion.V1 else 127
