"""
📁 src/binning/statistics.py
=============================
구간 통계 계산 (WoE, IV, Gini, KS).

[역할] 원격 통계 서버를 먼저 호출하고, 실패하면 로컬 공식으로 대체합니다.
       대체 계산은 절대 예외를 던지지 않습니다 — 항상 최선의 결과를 반환합니다.

공식 (구간 i, G/B = 전체 goods/bads):
  WoE_i = ln( (g_i / G) / (b_i / B) )
  IV_i  = (g_i / G − b_i / B) × WoE_i
  IV    = Σ IV_i

한쪽 클래스가 0건인 구간:
  로그 안의 비율만 평활화된 비율 (g_i + a) / (G + a·k) 로 계산해 WoE를 유한하게 유지합니다.
  IV는 항상 원래 비율 차이 × WoE 이므로 IV_i 공식이 모든 구간에서 그대로 성립합니다.
  a = 0 이면 평활화 없이 원래 값(±inf)을 그대로 보고합니다.
"""

import math
from dataclasses import dataclass
from typing import Optional, Sequence

from src.binning.exceptions import StatisticsServiceError
from src.binning.models import Bin
from src.stats_service.client import StatisticsClient
from src.utils.logger import get_logger

logger = get_logger(__name__)

FALLBACK_WARNING = "Some statistics calculated using simplified client-side methods."


# ================================================================
# 로컬 공식
# ================================================================
def _woe(goods: int, bads: int, total_goods: int, total_bads: int, smoothing: float, k: int) -> float:
    if goods > 0 and bads > 0:
        return math.log((goods / total_goods) / (bads / total_bads))
    if smoothing > 0:
        good_share = (goods + smoothing) / (total_goods + smoothing * k)
        bad_share = (bads + smoothing) / (total_bads + smoothing * k)
        return math.log(good_share / bad_share)
    if goods == 0 and bads == 0:
        return math.nan
    return math.inf if bads == 0 else -math.inf


def calculate_woe_iv(bins: Sequence[Bin], smoothing: float = 0.5) -> list[Bin]:
    """구간별 WoE/IV를 로컬에서 계산한 새 구간 목록"""
    total_goods = sum(b.goods for b in bins)
    total_bads = sum(b.bads for b in bins)
    k = len(bins)

    result = []
    for b in bins:
        woe = _woe(b.goods, b.bads, total_goods, total_bads, smoothing, k)
        diff = b.goods / total_goods - b.bads / total_bads
        result.append(b.with_stats(woe=woe, iv=diff * woe))
    return result


# ================================================================
# 원격 우선 계산기
# ================================================================
@dataclass(frozen=True)
class AggregateStatistics:
    """전체 통계"""
    total_iv: float
    gini_coefficient: float
    ks_statistic: float
    warnings: tuple[str, ...] = ()
    used_fallback: bool = False


class StatisticsCalculator:
    """
    WoE/IV + 전체 통계 계산기.

    사용법:
        calc = StatisticsCalculator(StatisticsClient())
        bins, used_fallback = calc.compute_woe_iv(bins, smoothing=0.5)
        stats = calc.compute_aggregates(bins)
        stats.gini_coefficient   # 대체 계산이면 0.0
    """

    def __init__(self, client: Optional[StatisticsClient] = None):
        self._client = client

    @property
    def is_remote(self) -> bool:
        return self._client is not None and self._client.is_configured

    def compute_woe_iv(self, bins: Sequence[Bin], smoothing: float = 0.5) -> tuple[list[Bin], bool]:
        """
        구간별 WoE/IV.

        Returns:
            (WoE/IV가 채워진 구간 목록, 로컬 대체 계산 사용 여부)
        """
        if self.is_remote:
            try:
                resp = self._client.calculate_woe_iv(bins)
                return [
                    b.with_stats(woe=w, iv=v)
                    for b, w, v in zip(bins, resp.woe_values, resp.iv_values)
                ], False
            except StatisticsServiceError as e:
                logger.warning("원격 WoE/IV 계산 실패 → 로컬 계산으로 대체: %s", e)

        return calculate_woe_iv(bins, smoothing), True

    def compute_aggregates(self, bins: Sequence[Bin]) -> AggregateStatistics:
        """전체 IV, Gini, KS. 로컬 대체 시 Gini/KS = 0 + 경고."""
        if self.is_remote:
            try:
                resp = self._client.calculate_statistics(bins)
                return AggregateStatistics(
                    total_iv=resp.total_iv,
                    gini_coefficient=resp.gini_coefficient,
                    ks_statistic=resp.ks_statistic,
                    warnings=tuple(resp.warnings),
                )
            except StatisticsServiceError as e:
                logger.warning("원격 통계 계산 실패 → 로컬 계산으로 대체: %s", e)

        return AggregateStatistics(
            total_iv=sum(b.iv for b in bins),
            gini_coefficient=0.0,
            ks_statistic=0.0,
            warnings=(FALLBACK_WARNING,),
            used_fallback=True,
        )
