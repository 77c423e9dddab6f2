"""
📁 src/binning/builders.py
===========================
초기 구간 생성기.

[패턴] Strategy — 구간화 방식을 교체 가능하게 분리합니다.
[위치] engine.py에서 BinBuilderFactory로 생성하여 사용합니다.

구간화 방식:
  - EqualWidth: 피처 범위를 같은 폭으로 분할 → 빈 구간은 생략
  - EqualFrequency: 정렬된 관측치를 같은 건수로 분할 → 마지막 구간이 나머지 흡수
  - Optimal: 한 구간에서 시작해 가장 앞쪽의 큰 구간을 건수 기준 중앙에서 반복 분할

공통 규칙:
  - 같은 피처값이 두 구간에 걸치지 않도록 분할점을 값이 바뀌는 위치로 옮깁니다.
  - 구간 경계는 연결됩니다: bins[i].min == bins[i-1].max
  - WoE/IV는 0 (statistics.py에서 계산)
"""

from abc import ABC, abstractmethod
from typing import Optional

import numpy as np

from config.binning_config import BinningConfiguration, BinningMode
from src.binning.models import Bin, ObservationSet
from src.utils.logger import get_logger

logger = get_logger(__name__)

# (start, stop, upper) — 관측치 슬라이스 [start, stop)와 구간 상한
Partition = tuple[int, int, float]


# ================================================================
# 구간 생성기 인터페이스 (Strategy 패턴)
# ================================================================
class BaseBinBuilder(ABC):
    """구간 생성기 공통 인터페이스. 정렬된 관측치 → 오름차순 구간 목록"""

    def build(self, data: ObservationSet, config: BinningConfiguration) -> list[Bin]:
        partitions = [p for p in self._partition(data, config) if p[1] > p[0]]

        bins: list[Bin] = []
        for start, stop, upper in partitions:
            goods, bads = data.class_counts(start, stop)
            lower = bins[-1].max if bins else data.min_value
            bins.append(Bin(
                id=len(bins) + 1,
                min=lower,
                max=upper,
                count=stop - start,
                goods=goods,
                bads=bads,
            ))

        # 마지막 구간은 관측 최댓값에서 끝남
        if bins and bins[-1].max != data.max_value:
            last = bins[-1]
            bins[-1] = Bin(last.id, last.min, data.max_value, last.count, last.goods, last.bads)

        logger.debug("%s: %d개 구간 생성", self.name, len(bins))
        return bins

    @abstractmethod
    def _partition(self, data: ObservationSet, config: BinningConfiguration) -> list[Partition]:
        """관측치를 오름차순 슬라이스로 나눕니다 (빈 슬라이스는 build()에서 제거)."""
        ...

    @property
    def name(self) -> str:
        return type(self).__name__


def snap_cut(data: ObservationSet, cut: int, lo: int, hi: int) -> Optional[int]:
    """
    분할점 cut을 같은 값 묶음(tie run)의 경계로 옮깁니다.

    cut 양쪽 값이 다르면 그대로, 같으면 묶음 끝으로 (불가능하면 묶음 시작으로).
    (lo, hi) 안에 유효한 분할점이 없으면 None.
    """
    f = data.feature
    if cut <= lo or cut >= hi:
        return None
    if f[cut - 1] != f[cut]:
        return cut

    run_end = int(np.searchsorted(f, f[cut], side="right"))
    if run_end < hi:
        return run_end
    run_start = int(np.searchsorted(f, f[cut], side="left"))
    if run_start > lo:
        return run_start
    return None


# ================================================================
# 등간격
# ================================================================
class EqualWidthBinBuilder(BaseBinBuilder):
    """
    [min, max]를 max_bins개의 같은 폭으로 나눕니다.

    첫 구간은 [min, e1], 이후는 (e_i, e_i+1] — 최솟값이 두 번 세어지지 않습니다.
    빈 구간은 생략되고, 그 범위는 다음 구간이 흡수합니다.
    """

    def _partition(self, data, config):
        n_bins = config.max_bins
        lo, hi = data.min_value, data.max_value
        width = (hi - lo) / n_bins

        partitions = []
        start = 0
        for i in range(n_bins):
            upper = hi if i == n_bins - 1 else lo + (i + 1) * width
            stop = len(data) if i == n_bins - 1 else int(np.searchsorted(data.feature, upper, side="right"))
            partitions.append((start, stop, upper))
            start = stop
        return partitions


# ================================================================
# 등빈도
# ================================================================
class EqualFrequencyBinBuilder(BaseBinBuilder):
    """정렬된 관측치를 floor(n / max_bins)건씩 자릅니다. 마지막 구간이 나머지를 흡수합니다."""

    def _partition(self, data, config):
        n = len(data)
        size = n // config.max_bins

        cuts = []
        for i in range(1, config.max_bins):
            cut = snap_cut(data, i * size, 0, n)
            if cut is not None and (not cuts or cut > cuts[-1]):
                cuts.append(cut)

        bounds = [0] + cuts + [n]
        return [
            (start, stop, float(data.feature[stop - 1]))
            for start, stop in zip(bounds[:-1], bounds[1:])
        ]


# ================================================================
# 탐욕적 재귀 분할
# ================================================================
class OptimalBinBuilder(BaseBinBuilder):
    """
    한 구간에서 시작해 분할 가능한 가장 앞쪽 구간을 건수 기준 중앙에서 나눕니다.

    분할 조건: 구간 건수 >= 2 × 최소 모집단
    종료 조건: 구간 수 == max_bins 또는 더 나눌 구간이 없음
    되돌리기(backtracking)나 분할 후 재병합은 하지 않습니다.
    """

    def _partition(self, data, config):
        threshold = config.min_population_count(len(data))
        slices = [(0, len(data))]

        while len(slices) < config.max_bins:
            split = self._find_split(data, slices, threshold)
            if split is None:
                break
            idx, cut = split
            start, stop = slices[idx]
            slices[idx:idx + 1] = [(start, cut), (cut, stop)]

        return [(start, stop, float(data.feature[stop - 1])) for start, stop in slices]

    @staticmethod
    def _find_split(
            data: ObservationSet, slices: list[tuple[int, int]], threshold: int,
    ) -> Optional[tuple[int, int]]:
        """(슬라이스 인덱스, 분할점). 가장 앞쪽의 분할 가능한 구간을 선택합니다."""
        for idx, (start, stop) in enumerate(slices):
            if stop - start < 2 * threshold:
                continue
            cut = snap_cut(data, start + (stop - start) // 2, start, stop)
            if cut is not None:
                return idx, cut
        return None


# ================================================================
# 생성기 팩토리
# ================================================================
class BinBuilderFactory:
    """[패턴] Factory — 설정의 mode에 맞는 구간 생성기를 만듭니다."""

    _BUILDERS: dict[BinningMode, type[BaseBinBuilder]] = {
        BinningMode.EQUAL_WIDTH: EqualWidthBinBuilder,
        BinningMode.EQUAL_FREQUENCY: EqualFrequencyBinBuilder,
        BinningMode.OPTIMAL: OptimalBinBuilder,
    }

    @staticmethod
    def create(mode: BinningMode) -> BaseBinBuilder:
        builder = BinBuilderFactory._BUILDERS[BinningMode(mode)]()
        logger.debug("구간 생성기 선택: %s", builder.name)
        return builder
