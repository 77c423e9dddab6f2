"""
비닝 설정 정의서.

구간화 전략, 구간 수 범위, 최소 모집단, 단조성/병합 옵션을 한 곳에서 관리합니다.
분석 요청마다 한 번 생성되고, 이후 어떤 단계도 이 객체를 수정하지 않습니다.

[패턴] Value Object — frozen dataclass + 생성 시점 검증
"""

from dataclasses import dataclass
from enum import Enum


class BinningMode(str, Enum):
    """초기 구간 생성 전략"""
    OPTIMAL = "optimal"                  # 탐욕적 재귀 분할
    EQUAL_WIDTH = "equal_width"          # 등간격
    EQUAL_FREQUENCY = "equal_frequency"  # 등빈도


# ── IV 예측력 등급 (상한값, 등급) ──
IV_GRADES: tuple[tuple[float, str], ...] = (
    (0.02, "useless"),
    (0.1, "weak"),
    (0.3, "medium"),
    (0.5, "strong"),
)
IV_GRADE_SUSPICIOUS = "suspicious"  # 0.5 이상: 타겟 누수 의심


@dataclass(frozen=True)
class BinningConfiguration:
    """비닝 설정. frozen=True → 실수로 변경 방지"""

    mode: BinningMode = BinningMode.OPTIMAL
    max_bins: int = 10                  # 등간격/등빈도의 구간 수, 최적 분할의 상한
    min_bins: int = 2                   # 병합 단계가 이 아래로 줄이지 않음
    min_population: float = 0.05        # < 1 → 전체 비율, >= 1 → 절대 건수
    enforce_monotonicity: bool = False
    merge_similar_rates: bool = False
    merge_threshold: float = 0.05       # 불량률 차이가 이보다 작으면 이웃 구간 병합
    woe_smoothing: float = 0.5          # 한쪽 클래스가 0건인 구간에만 적용

    def __post_init__(self):
        # 문자열 모드 → Enum (frozen이므로 object.__setattr__ 사용)
        if not isinstance(self.mode, BinningMode):
            try:
                object.__setattr__(self, "mode", BinningMode(self.mode))
            except ValueError:
                valid = ", ".join(m.value for m in BinningMode)
                raise ValueError(f"Unknown binning mode '{self.mode}' (expected one of: {valid})")

        if self.max_bins < 2:
            raise ValueError("max_bins must be at least 2")
        if self.min_bins < 1:
            raise ValueError("min_bins must be at least 1")
        if self.min_bins > self.max_bins:
            raise ValueError(f"min_bins ({self.min_bins}) cannot exceed max_bins ({self.max_bins})")
        if self.min_population <= 0:
            raise ValueError("min_population must be positive")
        if not 0 <= self.merge_threshold < 1:
            raise ValueError("merge_threshold must be in [0, 1)")
        if self.woe_smoothing < 0:
            raise ValueError("woe_smoothing cannot be negative")

    def min_population_count(self, n_rows: int) -> int:
        """최소 모집단 기준을 건수로 환산합니다 (최소 1건)."""
        if self.min_population < 1:
            return max(1, int(self.min_population * n_rows + 1e-9))
        return int(self.min_population)

    def to_dict(self) -> dict:
        return {
            "mode": self.mode.value,
            "max_bins": self.max_bins,
            "min_bins": self.min_bins,
            "min_population": self.min_population,
            "enforce_monotonicity": self.enforce_monotonicity,
            "merge_similar_rates": self.merge_similar_rates,
            "merge_threshold": self.merge_threshold,
            "woe_smoothing": self.woe_smoothing,
        }


# 전역 기본 설정 인스턴스
DEFAULT_BINNING_CONFIG = BinningConfiguration()
