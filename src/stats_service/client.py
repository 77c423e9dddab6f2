"""
📁 src/stats_service/client.py
================================
원격 통계 서버 API 클라이언트.

[패턴] Adapter — 서버의 JSON 응답을 검증된 스키마 객체로 변환
[역할] 구간별 WoE/IV와 전체 IV/Gini/KS를 서버에서 계산합니다.
       Gini/KS는 전체 모집단 순위가 필요해서 서버 계산 값을 우선 사용합니다.

실패(타임아웃, 네트워크, 2xx 아님, 응답 형태 불일치)는 모두
StatisticsServiceError로 던집니다. 로컬 대체 계산은 호출하는 쪽(statistics.py)의 몫입니다.

timeout 제한:
  requests의 timeout은 연결과 각 읽기에 따로 적용되는 값이라 전체 대기 시간 상한이 아닙니다.
  재시도는 첫 시도부터 남은 시간만 timeout으로 쓰고, 남은 시간이 없으면 하지 않습니다.
  응답을 조금씩 느리게 보내는 서버는 한 번의 시도 안에서 이 값을 넘길 수 있습니다.
"""

import time
from typing import Optional, Sequence

import pydantic
import requests

from config.settings import get_settings
from src.binning.exceptions import StatisticsServiceError
from src.binning.models import Bin
from src.stats_service.schemas import (
    BinCounts, BinStatistics,
    WoeIvRequest, WoeIvResponse,
    StatisticsRequest, StatisticsResponse,
)
from src.utils.logger import get_logger

logger = get_logger(__name__)

# 재시도 시간 예산용 시계
_clock = time.monotonic


class StatisticsClient:
    """
    원격 통계 서버 클라이언트.

    사용법:
        client = StatisticsClient()                    # 설정(STATS_API_URL)에서 주소 로드
        if client.is_configured:
            resp = client.calculate_woe_iv(bins)
            print(resp.woe_values)
    """

    WOE_IV_PATH = "/api/binning/calculate-woe-iv"
    STATISTICS_PATH = "/api/binning/calculate-statistics"

    def __init__(
            self,
            base_url: Optional[str] = None,
            timeout: Optional[float] = None,
            max_retries: Optional[int] = None,
            session: Optional[requests.Session] = None,
    ):
        settings = get_settings()
        self._base_url = (settings.STATS_API_URL if base_url is None else base_url).rstrip("/")
        self._timeout = settings.STATS_API_TIMEOUT if timeout is None else timeout
        self._max_retries = settings.STATS_API_MAX_RETRIES if max_retries is None else max_retries
        self._session = session or requests.Session()

    @property
    def is_configured(self) -> bool:
        """서버 주소가 설정되어 있는지"""
        return bool(self._base_url)

    @property
    def base_url(self) -> str:
        return self._base_url

    def calculate_woe_iv(self, bins: Sequence[Bin]) -> WoeIvResponse:
        """구간별 WoE/IV 계산 요청. 응답 배열 길이가 구간 수와 다르면 실패로 처리."""
        payload = WoeIvRequest(bins=[
            BinCounts(goods=b.goods, bads=b.bads, count=b.count) for b in bins
        ])
        data = self._post(self.WOE_IV_PATH, payload)
        resp = self._parse(WoeIvResponse, data)

        if len(resp.woe_values) != len(bins) or len(resp.iv_values) != len(bins):
            raise StatisticsServiceError(
                f"WoE/IV response not aligned with request: "
                f"{len(resp.woe_values)}/{len(resp.iv_values)} values for {len(bins)} bins"
            )
        return resp

    def calculate_statistics(self, bins: Sequence[Bin]) -> StatisticsResponse:
        """전체 IV, Gini, KS 계산 요청"""
        payload = StatisticsRequest(bins=[
            BinStatistics(woe=b.woe, iv=b.iv, goods=b.goods, bads=b.bads, count=b.count)
            for b in bins
        ])
        data = self._post(self.STATISTICS_PATH, payload)
        return self._parse(StatisticsResponse, data)

    def _post(self, path: str, payload: pydantic.BaseModel) -> dict:
        """
        POST + 재시도. 마지막 실패를 StatisticsServiceError로 감싸서 던집니다.

        모든 시도가 timeout 초 하나를 나눠 씁니다 (재시도는 남은 시간만큼만 대기).
        """
        if not self.is_configured:
            raise StatisticsServiceError("Statistics service URL is not configured")

        url = f"{self._base_url}{path}"
        last_error: Optional[Exception] = None
        deadline = _clock() + self._timeout

        for attempt in range(1, self._max_retries + 2):
            timeout = self._timeout
            if attempt > 1:
                timeout = deadline - _clock()
                if timeout <= 0:
                    logger.warning("통계 서버 재시도 중단 (%s): 제한 시간 %.1f초 초과", path, self._timeout)
                    break
            try:
                resp = self._session.post(url, json=payload.model_dump(), timeout=timeout)
                resp.raise_for_status()
                return resp.json()
            except (requests.RequestException, ValueError) as e:
                last_error = e
                logger.warning("통계 서버 호출 실패 (%s, 시도 %d): %s", path, attempt, e)

        raise StatisticsServiceError(f"Statistics service call failed: {path}") from last_error

    @staticmethod
    def _parse(schema: type[pydantic.BaseModel], data: dict):
        try:
            return schema.model_validate(data)
        except pydantic.ValidationError as e:
            raise StatisticsServiceError(f"Malformed statistics response: {e}") from e
