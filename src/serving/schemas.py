"""
📁 src/serving/schemas.py
===========================
Pydantic 요청/응답 스키마.

Swagger UI 문서 자동 생성에 사용됩니다.
"""

from typing import Any, Optional
from pydantic import BaseModel, Field

from config.binning_config import BinningConfiguration, BinningMode


class BinningConfigSchema(BaseModel):
    """비닝 설정 (BinningConfiguration과 1:1)"""
    mode: BinningMode = Field(default=BinningMode.OPTIMAL, description="구간화 전략")
    max_bins: int = Field(default=10, ge=2, description="최대 구간 수")
    min_bins: int = Field(default=2, ge=1, description="최소 구간 수")
    min_population: float = Field(default=0.05, gt=0, description="< 1: 비율, >= 1: 건수")
    enforce_monotonicity: bool = Field(default=False, description="불량률 단조성 강제")
    merge_similar_rates: bool = Field(default=False, description="유사 불량률 구간 병합")
    merge_threshold: float = Field(default=0.05, ge=0, lt=1, description="병합 불량률 차이 임계값")
    woe_smoothing: float = Field(default=0.5, gt=0, description="0건 클래스 구간 평활화 상수 (±inf 방지를 위해 > 0)")

    def to_config(self) -> BinningConfiguration:
        """검증된 값 객체로 변환 (min_bins > max_bins 등은 여기서 ValueError)"""
        return BinningConfiguration(**self.model_dump())


class BinningRequest(BaseModel):
    """비닝 분석 API 요청"""
    feature: list[float] = Field(..., description="피처 값")
    target: list[int] = Field(..., description="타겟 값 (0=good, 1=bad)")
    config: BinningConfigSchema = Field(default_factory=BinningConfigSchema)

    class Config:
        json_schema_extra = {
            "example": {
                "feature": [12.5, 40.0, 73.2],
                "target": [0, 0, 1],
                "config": {"mode": "equal_width", "max_bins": 5},
            }
        }


class BinningResponse(BaseModel):
    """비닝 분석 API 응답. 실패는 HTTP 상태 코드 + {detail}로 전달됩니다."""
    success: bool = True
    data: Optional[dict[str, Any]] = None
