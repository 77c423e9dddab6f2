"""
📁 src/data_collection/csv_loader.py
=====================================
CSV → (피처, 타겟) 배열 어댑터.

[패턴] Adapter — CSV 파일을 비닝 엔진이 받는 두 개의 정렬된 숫자 배열로 변환
[역할] 두 컬럼을 숫자로 변환하고, 숫자가 아니거나 유한하지 않은 행은 건너뜁니다.

사용법:
    feature, target = load_feature_target("data/loans.csv", "income", "is_bad")
"""

import numpy as np
import pandas as pd

from src.binning.exceptions import ValidationError
from src.utils import io
from src.utils.logger import get_logger

logger = get_logger(__name__)


def extract_feature_target(
        df: pd.DataFrame, feature_column: str, target_column: str,
) -> tuple[np.ndarray, np.ndarray]:
    """
    DataFrame에서 피처/타겟 배열을 추출합니다.

    Returns:
        (feature: float64[], target: int64[]) — 같은 길이

    Raises:
        ValidationError: 컬럼이 없거나 유효한 행이 하나도 없음
    """
    for col, role in ((feature_column, "Feature"), (target_column, "Target")):
        if col not in df.columns:
            raise ValidationError(f"{role} column '{col}' not found")

    feature = pd.to_numeric(df[feature_column], errors="coerce").astype(np.float64)
    target = pd.to_numeric(df[target_column], errors="coerce").astype(np.float64)

    valid = np.isfinite(feature.to_numpy()) & np.isfinite(target.to_numpy())
    skipped = int((~valid).sum())
    if skipped:
        logger.warning("유효하지 않은 행 %d건 제외 (%s, %s)", skipped, feature_column, target_column)

    if not valid.any():
        raise ValidationError("No valid numeric data found in the specified columns")

    f = feature.to_numpy()[valid]
    t = target.to_numpy()[valid]
    # 0/1이 아닌 타겟은 그대로 남겨 검증 단계에서 거부되게 함
    t = t.astype(np.int64) if np.all(t == np.round(t)) else t
    return f, t


def load_feature_target(
        path: str, feature_column: str, target_column: str,
) -> tuple[np.ndarray, np.ndarray]:
    """CSV 파일에서 피처/타겟 배열을 로드합니다."""
    df = io.load_csv(path, usecols=lambda c: c in (feature_column, target_column))
    return extract_feature_target(df, feature_column, target_column)
