"""
📁 src/binning/engine.py
=========================
비닝 오케스트레이터 — 전체 비닝 흐름의 핵심.

[패턴] Pipeline + State Machine — 단계를 순서대로 실행하고 단계마다 진행률을 알립니다.
[역할] 검증 → 초기 구간 → WoE/IV → 제약 적용 → 최종 통계 → BinningResult

상태 전이:
  IDLE → VALIDATING → BUILDING_BINS → COMPUTING_STATISTICS
       → APPLYING_CONSTRAINTS → FINALIZING → COMPLETE
  (어느 단계에서든 실패하면 FAILED)

핵심 원칙:
- 요청별 상태는 BinningContext에만 둡니다 → 엔진 인스턴스를 여러 요청이 공유해도 안전
- 실패하면 부분 결과 없이 BinningError (ValidationError는 그대로 전달)
- 진행률 콜백은 참고용 — 콜백이 실패해도 파이프라인에는 영향 없음
"""

import math
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional, Sequence

from config.binning_config import BinningConfiguration, DEFAULT_BINNING_CONFIG
from src.binning.builders import BinBuilderFactory
from src.binning.constraints import ConstraintEngine, check_monotonicity
from src.binning.exceptions import BinningError
from src.binning.models import Bin, BinningResult, ObservationSet
from src.binning.statistics import FALLBACK_WARNING, StatisticsCalculator
from src.binning.validator import validate_data
from src.utils.logger import get_logger
from src.utils.timer import elapsed_ms

logger = get_logger(__name__)

ProgressCallback = Callable[[str, int], None]


class BinningStage(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    BUILDING_BINS = "building_bins"
    COMPUTING_STATISTICS = "computing_statistics"
    APPLYING_CONSTRAINTS = "applying_constraints"
    FINALIZING = "finalizing"
    COMPLETE = "complete"
    FAILED = "failed"


# 단계별 (표시 문구, 진행률 %)
STAGE_PROGRESS: dict[BinningStage, tuple[str, int]] = {
    BinningStage.VALIDATING: ("Validating data...", 10),
    BinningStage.BUILDING_BINS: ("Creating initial bins...", 25),
    BinningStage.COMPUTING_STATISTICS: ("Calculating WOE and IV...", 50),
    BinningStage.APPLYING_CONSTRAINTS: ("Applying constraints...", 70),
    BinningStage.FINALIZING: ("Calculating final statistics...", 85),
    BinningStage.COMPLETE: ("Complete", 100),
}


@dataclass
class BinningContext:
    """요청 1건의 실행 상태 (단계, 경고, 시작 시각)"""
    config: BinningConfiguration
    on_progress: Optional[ProgressCallback] = None
    stage: BinningStage = BinningStage.IDLE
    warnings: list[str] = field(default_factory=list)
    started_at: float = field(default_factory=time.perf_counter)

    def advance(self, stage: BinningStage) -> None:
        self.stage = stage
        step, percent = STAGE_PROGRESS[stage]
        logger.debug("비닝 단계: %s (%d%%)", stage.value, percent)
        if self.on_progress is None:
            return
        try:
            self.on_progress(step, percent)
        except Exception as e:
            logger.warning("진행률 콜백 실패 (무시): %s", e)

    def add_warning(self, message: str) -> None:
        if message not in self.warnings:
            self.warnings.append(message)


class BinningEngine:
    """
    비닝 엔진.

    사용법:
        engine = BinningEngine()                                   # 로컬 계산만
        engine = BinningEngine(StatisticsCalculator(StatisticsClient()))  # 원격 우선

        result = engine.run(feature, target, BinningConfiguration(mode="equal_width", max_bins=5))
        for b in result.bins:
            print(b.range, b.bad_rate, b.woe)
    """

    def __init__(self, calculator: Optional[StatisticsCalculator] = None):
        self._calculator = calculator or StatisticsCalculator()

    def run(
            self,
            feature: Sequence[float],
            target: Sequence[int],
            config: BinningConfiguration = DEFAULT_BINNING_CONFIG,
            on_progress: Optional[ProgressCallback] = None,
    ) -> BinningResult:
        """
        전체 비닝 실행.

        Raises:
            ValidationError: 입력 데이터를 쓸 수 없음
            BinningError: 그 밖의 모든 실패 (원인 예외는 __cause__)
        """
        ctx = BinningContext(config=config, on_progress=on_progress)

        try:
            result = self._run(feature, target, ctx)
        except BinningError as e:
            ctx.stage = BinningStage.FAILED
            logger.warning("비닝 실패: %s", e)
            raise
        except Exception as e:
            ctx.stage = BinningStage.FAILED
            logger.error("비닝 실패: %s", e, exc_info=True)
            raise BinningError(f"Binning failed: {e}") from e

        logger.info(
            "비닝 완료: %d개 구간, IV=%.4f, 단조=%s (%dms)",
            result.n_bins, result.total_iv, result.is_monotonic, result.processing_time_ms,
        )
        return result

    def _run(self, feature, target, ctx: BinningContext) -> BinningResult:
        config = ctx.config

        # Step 1: 검증
        ctx.advance(BinningStage.VALIDATING)
        validate_data(feature, target)
        data = ObservationSet.from_arrays(feature, target)
        logger.info("비닝 시작: %d행, mode=%s", len(data), config.mode.value)

        # Step 2: 초기 구간
        ctx.advance(BinningStage.BUILDING_BINS)
        bins = BinBuilderFactory.create(config.mode).build(data, config)

        # Step 3: WoE/IV
        ctx.advance(BinningStage.COMPUTING_STATISTICS)
        bins = self._with_woe_iv(bins, ctx)

        # Step 4: 제약 적용
        ctx.advance(BinningStage.APPLYING_CONSTRAINTS)
        outcome = ConstraintEngine(config).apply(bins)
        for w in outcome.warnings:
            ctx.add_warning(w)
        bins = outcome.bins

        # Step 5: 최종 통계 (병합된 구간이 있으면 WoE/IV 갱신)
        ctx.advance(BinningStage.FINALIZING)
        if outcome.merges:
            bins = self._with_woe_iv(bins, ctx)
        non_finite = sum(1 for b in bins if not math.isfinite(b.woe))
        if non_finite:
            ctx.add_warning(
                f"WOE is not finite for {non_finite} bin(s); set woe_smoothing > 0 for finite values"
            )
        stats = self._calculator.compute_aggregates(bins)
        for w in stats.warnings:
            ctx.add_warning(w)

        result = BinningResult(
            bins=tuple(bins),
            total_iv=stats.total_iv,
            gini_coefficient=stats.gini_coefficient,
            ks_statistic=stats.ks_statistic,
            is_monotonic=check_monotonicity(bins),
            processing_time_ms=elapsed_ms(ctx.started_at),
            warnings=tuple(ctx.warnings),
        )
        ctx.advance(BinningStage.COMPLETE)
        return result

    def _with_woe_iv(self, bins: list[Bin], ctx: BinningContext) -> list[Bin]:
        bins, used_fallback = self._calculator.compute_woe_iv(bins, ctx.config.woe_smoothing)
        if used_fallback:
            ctx.add_warning(FALLBACK_WARNING)
        return bins
