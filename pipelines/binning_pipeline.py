"""
📁 pipelines/binning_pipeline.py
=================================
CSV → 비닝 → 리포트 파이프라인.

[패턴] Template Method — 로드 → 비닝 → 리포트 골격을 정의하고 각 단계는 교체 가능
[역할] 노트북이나 배치 작업에서 CSV 파일 하나를 바로 분석할 때 사용합니다.

데이터 흐름:
  CSV → (feature, target) 배열 → BinningEngine → BinningResult → JSON 리포트
"""

from pathlib import Path
from typing import Optional

from config.binning_config import BinningConfiguration, DEFAULT_BINNING_CONFIG
from config.settings import get_settings
from src.binning.engine import BinningEngine, ProgressCallback
from src.binning.statistics import StatisticsCalculator
from src.data_collection.csv_loader import load_feature_target
from src.evaluation.reporter import BinningReporter
from src.stats_service.client import StatisticsClient
from src.utils.logger import get_logger
from src.utils.timer import timer

logger = get_logger(__name__)


class BinningPipeline:
    """
    비닝 파이프라인.

    사용법:
        pipeline = BinningPipeline(config=BinningConfiguration(mode="equal_frequency"))
        report = pipeline.run("data/loans.csv", "income", "is_bad", save_path="reports/income.json")
    """

    def __init__(
            self,
            config: BinningConfiguration = DEFAULT_BINNING_CONFIG,
            engine: Optional[BinningEngine] = None,
            reporter: Optional[BinningReporter] = None,
    ):
        self._config = config
        self._engine = engine or BinningEngine(StatisticsCalculator(StatisticsClient()))
        self._reporter = reporter or BinningReporter()

    @timer("비닝 파이프라인")
    def run(
            self,
            data_path: str,
            feature_column: str,
            target_column: str,
            save_path: Optional[str] = None,
            on_progress: Optional[ProgressCallback] = None,
    ) -> dict:
        """
        전체 파이프라인 실행.

        단계:
        1. 로드 (csv_loader)
        2. 비닝 (engine)
        3. 리포트 (reporter)
        """
        logger.info("━━━ Step 1: 데이터 로드 ━━━")
        feature, target = load_feature_target(data_path, feature_column, target_column)

        logger.info("━━━ Step 2: 비닝 ━━━")
        result = self._engine.run(feature, target, self._config, on_progress=on_progress)

        logger.info("━━━ Step 3: 리포트 ━━━")
        report = self._reporter.generate(
            result,
            feature_name=feature_column,
            config=self._config.to_dict(),
            save_path=save_path,
        )
        logger.info("결과: %s", report["summary"])
        return report

    @staticmethod
    def default_report_path(feature_column: str) -> str:
        """설정의 REPORT_DIR 아래 기본 리포트 경로"""
        return str(Path(get_settings().REPORT_DIR) / f"binning_{feature_column}.json")
