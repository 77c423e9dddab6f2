"""
📁 src/binning/constraints.py
==============================
구간 제약 조건 적용.

[패턴] Pipeline — 세 단계를 순서대로 적용하고, 단계마다 새 구간 목록을 만듭니다.
[역할] 초기 구간을 실무에서 쓸 수 있는 형태로 다듬습니다.

단계:
  1) 최소 모집단: 기준 미만 구간을 이웃 구간에 병합 (삭제하지 않음 → 범위/건수 보존)
  2) 단조성 (옵션): 추세를 거스르는 인접 쌍을 단조가 될 때까지 병합
  3) 유사 불량률 (옵션): 불량률 차이가 임계값 미만인 인접 쌍을 병합

병합된 구간의 WoE/IV는 0으로 초기화되며, 오케스트레이터가 다시 계산합니다.
단계 2, 3은 min_bins 아래로 구간 수를 줄이지 않습니다.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from config.binning_config import BinningConfiguration
from src.binning.models import Bin, merge_bins, renumber
from src.utils.logger import get_logger

logger = get_logger(__name__)


def check_monotonicity(bins: Sequence[Bin]) -> bool:
    """
    불량률이 단조 증가 또는 단조 감소인지.

    증가 전이가 0개이거나 감소 전이가 0개면 단조 (같은 값은 어느 쪽도 아님).
    """
    if len(bins) < 2:
        return True

    increasing = decreasing = 0
    for prev, cur in zip(bins, bins[1:]):
        if cur.bad_rate > prev.bad_rate:
            increasing += 1
        elif cur.bad_rate < prev.bad_rate:
            decreasing += 1
    return increasing == 0 or decreasing == 0


def _merge_at(bins: list[Bin], i: int) -> list[Bin]:
    """bins[i]와 bins[i+1]을 병합한 새 목록"""
    return bins[:i] + [merge_bins(bins[i], bins[i + 1])] + bins[i + 2:]


@dataclass(frozen=True)
class ConstraintOutcome:
    """제약 적용 결과"""
    bins: list[Bin]
    merges: int
    warnings: tuple[str, ...] = ()


class ConstraintEngine:
    """
    제약 조건 엔진.

    사용법:
        engine = ConstraintEngine(config)
        outcome = engine.apply(bins)
        outcome.bins, outcome.merges, outcome.warnings
    """

    def __init__(self, config: BinningConfiguration):
        self._config = config

    def apply(self, bins: Sequence[Bin]) -> ConstraintOutcome:
        cfg = self._config
        current = list(bins)
        warnings: list[str] = []
        n_rows = sum(b.count for b in current)

        # 1) 최소 모집단
        threshold = cfg.min_population_count(n_rows)
        current, pop_merges = self.merge_low_population(current, threshold)
        if pop_merges:
            warnings.append(
                f"Merged {pop_merges} under-populated bin(s) below the minimum population of {threshold}"
            )

        # 2) 단조성
        mono_merges = 0
        if cfg.enforce_monotonicity:
            before = len(current)
            current = self.enforce_monotonicity(current)
            mono_merges = before - len(current)
            if not check_monotonicity(current):
                warnings.append(
                    f"Bad rate is not monotonic: merging stopped at the minimum of {cfg.min_bins} bins"
                )

        # 3) 유사 불량률
        similar_merges = 0
        if cfg.merge_similar_rates:
            before = len(current)
            current = self.merge_similar_bins(current)
            similar_merges = before - len(current)

        if len(current) < cfg.min_bins:
            warnings.append(
                f"Final bin count ({len(current)}) is below the configured minimum ({cfg.min_bins})"
            )

        merges = pop_merges + mono_merges + similar_merges
        logger.info(
            "제약 적용: %d → %d개 구간 (모집단 %d, 단조성 %d, 유사 불량률 %d 병합)",
            len(bins), len(current), pop_merges, mono_merges, similar_merges,
        )
        return ConstraintOutcome(bins=renumber(current), merges=merges, warnings=tuple(warnings))

    # ================================================================
    # 1) 최소 모집단
    # ================================================================
    def merge_low_population(self, bins: list[Bin], threshold: int) -> tuple[list[Bin], int]:
        """
        기준 미만 구간을 이웃에 병합합니다.

        양 끝 구간은 유일한 이웃에, 가운데 구간은 불량률이 더 가까운 이웃에
        (같으면 왼쪽) 병합합니다. 구간이 하나만 남으면 멈춥니다.
        """
        merges = 0
        while len(bins) > 1:
            idx = self._first_below(bins, threshold)
            if idx is None:
                break

            if idx == 0:
                left = 0
            elif idx == len(bins) - 1:
                left = idx - 1
            else:
                rate = bins[idx].bad_rate
                d_left = abs(rate - bins[idx - 1].bad_rate)
                d_right = abs(rate - bins[idx + 1].bad_rate)
                left = idx - 1 if d_left <= d_right else idx

            bins = _merge_at(bins, left)
            merges += 1
        return bins, merges

    @staticmethod
    def _first_below(bins: Sequence[Bin], threshold: int) -> Optional[int]:
        for i, b in enumerate(bins):
            if b.count < threshold:
                return i
        return None

    # ================================================================
    # 2) 단조성
    # ================================================================
    def enforce_monotonicity(self, bins: list[Bin]) -> list[Bin]:
        """
        추세 방향을 거스르는 첫 인접 쌍을 반복 병합합니다.

        방향: 마지막 구간 불량률 >= 첫 구간 불량률 이면 증가, 아니면 감소.
        단조가 되거나 구간 수가 min_bins에 도달하면 멈춥니다.
        """
        if len(bins) < 2:
            return bins
        direction = 1 if bins[-1].bad_rate >= bins[0].bad_rate else -1

        while len(bins) > self._config.min_bins and not check_monotonicity(bins):
            idx = next(
                i for i in range(len(bins) - 1)
                if (bins[i + 1].bad_rate - bins[i].bad_rate) * direction < 0
            )
            bins = _merge_at(bins, idx)
        return bins

    # ================================================================
    # 3) 유사 불량률
    # ================================================================
    def merge_similar_bins(self, bins: list[Bin]) -> list[Bin]:
        """왼쪽부터 훑으며 |불량률 차이| < merge_threshold 인 첫 쌍을 반복 병합합니다."""
        threshold = self._config.merge_threshold
        while len(bins) > self._config.min_bins:
            idx = next(
                (i for i in range(len(bins) - 1)
                 if abs(bins[i].bad_rate - bins[i + 1].bad_rate) < threshold),
                None,
            )
            if idx is None:
                break
            bins = _merge_at(bins, idx)
        return bins
