"""
📁 src/serving/dependencies.py
=================================
FastAPI 의존성 주입 설정.

[패턴] Factory — 통계 클라이언트와 비닝 엔진 인스턴스를 생성합니다.
"""

from functools import lru_cache

from src.binning.engine import BinningEngine
from src.binning.statistics import StatisticsCalculator
from src.stats_service.client import StatisticsClient
from src.utils.logger import get_logger

logger = get_logger(__name__)


@lru_cache()
def get_stats_client() -> StatisticsClient:
    """통계 서버 클라이언트 싱글턴."""
    client = StatisticsClient()
    if client.is_configured:
        logger.info("원격 통계 서버: %s", client.base_url)
    else:
        logger.warning("STATS_API_URL 미설정 → 로컬 통계 계산만 사용")
    return client


@lru_cache()
def get_engine() -> BinningEngine:
    """비닝 엔진 싱글턴. 요청별 상태가 없으므로 공유해도 안전."""
    return BinningEngine(StatisticsCalculator(get_stats_client()))
