"""
📁 src/binning/validator.py
============================
입력 데이터 검증.

[역할] 피처/타겟 배열이 비닝에 쓸 수 있는 상태인지 확인합니다.
       문제가 있으면 ValidationError를 던지고, 통과하면 아무것도 반환하지 않습니다 (가드 절).
"""

from typing import Sequence

import numpy as np

from src.binning.exceptions import ValidationError

MIN_ROWS = 100            # 이보다 적으면 통계적으로 신뢰하기 어려움
MIN_UNIQUE_FEATURES = 10  # 이보다 적으면 구간을 나눌 수 없음


def validate_data(feature: Sequence[float], target: Sequence[int]) -> None:
    """
    피처/타겟 검증.

    Raises:
        ValidationError: 길이 불일치, 100행 미만, 타겟이 {0, 1}이 아님,
                         피처 고유값 10개 미만, 피처에 NaN/inf 포함
    """
    if len(feature) != len(target):
        raise ValidationError("Feature and target arrays must have the same length")

    if len(feature) < MIN_ROWS:
        raise ValidationError(f"Minimum {MIN_ROWS} data points required for reliable binning")

    try:
        f = np.asarray(feature, dtype=np.float64)
        t = np.asarray(target, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Feature and target must be numeric: {e}") from e

    if set(np.unique(t).tolist()) != {0, 1}:
        raise ValidationError("Target must be binary (0 and 1 values only)")

    if not np.isfinite(f).all():
        raise ValidationError("Feature contains NaN or infinite values")

    if len(np.unique(f)) < MIN_UNIQUE_FEATURES:
        raise ValidationError(
            f"Feature must have at least {MIN_UNIQUE_FEATURES} unique values for binning"
        )
