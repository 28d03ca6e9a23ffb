"""Spin 演算子のパラメータ定義"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SpinCounterInterval(Enum):
    """カウンターの進む間隔。値は ticks から落とす下位ビット数。"""

    # 約 1.67 秒ごとに進む
    COARSE = 24
    # 約 6.5 ミリ秒ごとに進む
    FINE = 16


class SpinCounterPeriodicity(Enum):
    """カウンターがゼロに戻る周期。値はカウンターに割り当てるビット数。"""

    NONE = 0
    SHORT = 16
    MEDIUM = 24
    LONG = 32


class SpinEntropy(Enum):
    """Spin 値に混ぜる乱数のバイト数。"""

    NONE = 0
    ONE = 1
    TWO = 2
    THREE = 3
    FOUR = 4


@dataclass(frozen=True)
class SpinParameters:
    """Spin 演算子の設定。"""

    interval: SpinCounterInterval = SpinCounterInterval.COARSE
    periodicity: SpinCounterPeriodicity = SpinCounterPeriodicity.SHORT
    entropy: SpinEntropy = SpinEntropy.TWO

    @property
    def ticks_bits_to_drop(self) -> int:
        return self.interval.value

    @property
    def entropy_bytes(self) -> int:
        return self.entropy.value

    @property
    def total_bits(self) -> int:
        """カウンターと乱数を合わせた Spin 値のビット数（最大 64）。"""
        return self.periodicity.value + self.entropy_bytes * 8
