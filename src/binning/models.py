"""
📁 src/binning/models.py
=========================
비닝 도메인 객체.

[역할] 관측치(Observation), 구간(Bin), 최종 결과(BinningResult)를 정의합니다.
       모두 frozen dataclass — 단계마다 새 객체를 만들고 기존 객체는 수정하지 않습니다.

구간 규칙:
  - (min, max] 반개구간, 첫 구간만 [min, max] 폐구간
  - bins[i].max == bins[i+1].min (빈틈/겹침 없음)
  - count == 0 인 구간은 만들지 않음
"""

from dataclasses import dataclass, field, replace
from typing import Sequence

import numpy as np


@dataclass(frozen=True)
class Observation:
    """(피처값, 타겟값) 한 쌍. 타겟 1 = 불량(bad)"""
    feature_value: float
    target_value: int


@dataclass(frozen=True, eq=False)
class ObservationSet:
    """
    피처값 기준으로 정렬된 관측치 집합.

    구간 생성기는 인덱스 슬라이스 [start, stop)로 구간을 표현하고,
    불량 건수는 누적합으로 O(1)에 계산합니다.

    사용법:
        data = ObservationSet.from_arrays(feature, target)
        goods, bads = data.class_counts(0, 50)
    """
    feature: np.ndarray
    target: np.ndarray
    _cum_bads: np.ndarray = field(repr=False)

    @classmethod
    def from_arrays(cls, feature: Sequence[float], target: Sequence[int]) -> "ObservationSet":
        f = np.asarray(feature, dtype=np.float64)
        t = np.asarray(target).astype(np.int64)
        # 안정 정렬 → 같은 피처값은 입력 순서 유지 (결과 재현성)
        order = np.argsort(f, kind="stable")
        f, t = f[order], t[order]
        cum = np.concatenate(([0], np.cumsum(t)))
        return cls(feature=f, target=t, _cum_bads=cum)

    @classmethod
    def from_observations(cls, observations: Sequence[Observation]) -> "ObservationSet":
        return cls.from_arrays(
            [o.feature_value for o in observations],
            [o.target_value for o in observations],
        )

    def __len__(self) -> int:
        return len(self.feature)

    def __getitem__(self, i: int) -> Observation:
        """정렬 후 i번째 관측치"""
        return Observation(float(self.feature[i]), int(self.target[i]))

    @property
    def min_value(self) -> float:
        return float(self.feature[0])

    @property
    def max_value(self) -> float:
        return float(self.feature[-1])

    def class_counts(self, start: int, stop: int) -> tuple[int, int]:
        """슬라이스 [start, stop)의 (goods, bads)"""
        bads = int(self._cum_bads[stop] - self._cum_bads[start])
        return (stop - start) - bads, bads


@dataclass(frozen=True)
class Bin:
    """하나의 구간과 그 통계값"""
    id: int
    min: float
    max: float
    count: int
    goods: int
    bads: int
    woe: float = 0.0
    iv: float = 0.0

    @property
    def bad_rate(self) -> float:
        return self.bads / self.count if self.count else 0.0

    @property
    def range(self) -> str:
        return f"{self.min:.2f} - {self.max:.2f}"

    def with_stats(self, woe: float, iv: float) -> "Bin":
        return replace(self, woe=float(woe), iv=float(iv))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "min": self.min,
            "max": self.max,
            "count": self.count,
            "goods": self.goods,
            "bads": self.bads,
            "bad_rate": self.bad_rate,
            "woe": self.woe,
            "iv": self.iv,
            "range": self.range,
        }


def merge_bins(left: Bin, right: Bin) -> Bin:
    """인접한 두 구간을 합칩니다. WoE/IV는 다시 계산해야 하므로 0으로 초기화."""
    return Bin(
        id=left.id,
        min=left.min,
        max=right.max,
        count=left.count + right.count,
        goods=left.goods + right.goods,
        bads=left.bads + right.bads,
    )


def renumber(bins: Sequence[Bin]) -> list[Bin]:
    """id를 1부터 순서대로 다시 매깁니다."""
    return [b if b.id == i else replace(b, id=i) for i, b in enumerate(bins, start=1)]


@dataclass(frozen=True)
class BinningResult:
    """
    비닝 최종 결과. 성공한 실행의 마지막에 한 번만 생성됩니다.

    processing_time_ms를 제외하면 같은 입력 + 같은 설정에 대해 항상 동일합니다.
    """
    bins: tuple[Bin, ...]
    total_iv: float
    gini_coefficient: float
    ks_statistic: float
    is_monotonic: bool
    processing_time_ms: int
    warnings: tuple[str, ...] = ()

    @property
    def n_bins(self) -> int:
        return len(self.bins)

    @property
    def total_count(self) -> int:
        return sum(b.count for b in self.bins)

    def to_dict(self) -> dict:
        """JSON 직렬화 가능한 dict (API 응답/리포트용)"""
        return {
            "bins": [b.to_dict() for b in self.bins],
            "total_iv": self.total_iv,
            "gini_coefficient": self.gini_coefficient,
            "ks_statistic": self.ks_statistic,
            "is_monotonic": self.is_monotonic,
            "processing_time_ms": self.processing_time_ms,
            "warnings": list(self.warnings),
        }
