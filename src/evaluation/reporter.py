"""
📁 src/evaluation/reporter.py
===============================
비닝 리포트 생성.

[패턴] Template Method — 리포트 형식을 정의하고 내용만 교체
[역할] BinningResult → 사람이 읽기 쉬운 요약 + JSON 리포트로 변환
"""

from datetime import datetime

from config.binning_config import IV_GRADES, IV_GRADE_SUSPICIOUS
from src.binning.models import BinningResult
from src.utils import io
from src.utils.logger import get_logger

logger = get_logger(__name__)


def iv_grade(total_iv: float) -> str:
    """IV 예측력 등급 (useless / weak / medium / strong / suspicious)"""
    for upper, grade in IV_GRADES:
        if total_iv < upper:
            return grade
    return IV_GRADE_SUSPICIOUS


class BinningReporter:
    """
    비닝 리포트 생성기.

    사용법:
        reporter = BinningReporter()
        reporter.generate(result, feature_name="income", save_path="reports/income.json")
    """

    def generate(
            self,
            result: BinningResult,
            feature_name: str = "",
            config: dict = None,
            save_path: str = None,
    ) -> dict:
        """
        리포트를 생성하고 선택적으로 파일로 저장합니다.

        Returns:
            리포트 딕셔너리
        """
        report = {
            "timestamp": datetime.now().isoformat(),
            "feature": feature_name,
            "config": config or {},
            "iv_grade": iv_grade(result.total_iv),
            "summary": self._summarize(result),
            "result": result.to_dict(),
        }

        if save_path:
            io.save_json(report, save_path)
            logger.info("리포트 저장: %s", save_path)

        return report

    def _summarize(self, result: BinningResult) -> str:
        """결과를 한 줄 요약으로 변환"""
        return (
            f"{result.n_bins} bins, IV={result.total_iv:.4f} ({iv_grade(result.total_iv)}), "
            f"Gini={result.gini_coefficient:.3f}, KS={result.ks_statistic:.3f}, "
            f"monotonic={'yes' if result.is_monotonic else 'no'}"
        )
