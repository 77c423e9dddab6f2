"""
📁 src/stats_service/schemas.py
================================
원격 통계 서버 요청/응답 스키마.

[역할] 요청 본문을 직렬화하고, 응답 본문이 약속된 형태인지 검증합니다.
       형태가 다르면 pydantic.ValidationError → 클라이언트가 StatisticsServiceError로 변환.

엔드포인트:
  POST /api/binning/calculate-woe-iv      {bins: [{goods, bads, count}]}
  POST /api/binning/calculate-statistics  {bins: [{woe, iv, goods, bads, count}]}
"""

from pydantic import BaseModel, Field


class BinCounts(BaseModel):
    """구간별 건수"""
    goods: int = Field(..., ge=0)
    bads: int = Field(..., ge=0)
    count: int = Field(..., gt=0)


class BinStatistics(BinCounts):
    """구간별 건수 + WoE/IV"""
    woe: float
    iv: float


class WoeIvRequest(BaseModel):
    bins: list[BinCounts]


class WoeIvResponse(BaseModel):
    """요청의 bins와 인덱스가 맞춰진 WoE/IV 배열"""
    woe_values: list[float]
    iv_values: list[float]


class StatisticsRequest(BaseModel):
    bins: list[BinStatistics]


class StatisticsResponse(BaseModel):
    total_iv: float
    gini_coefficient: float
    ks_statistic: float
    warnings: list[str] = Field(default_factory=list)
