"""
📁 tests/conftest.py
=====================
pytest 공통 설정 파일.

[역할] 모든 테스트에서 공유하는 픽스처(fixture)를 정의합니다.
       pytest가 자동으로 이 파일을 로드합니다.

[패턴] Fixture — 테스트에 필요한 객체를 미리 생성하여 주입
"""

import sys
from pathlib import Path

import pytest
import numpy as np
import requests

# 프로젝트 루트를 경로에 추가
sys.path.insert(0, str(Path(__file__).parent.parent))


# ================================================================
# 공통 데이터 픽스처
# ================================================================
@pytest.fixture
def step_data() -> tuple[np.ndarray, np.ndarray]:
    """0~99 등간격 피처, 80 이상이면 불량 (100행)"""
    feature = np.arange(100, dtype=np.float64)
    target = (feature >= 80).astype(int)
    return feature, target


@pytest.fixture
def risk_data() -> tuple[np.ndarray, np.ndarray]:
    """피처가 클수록 불량 확률이 높아지는 데이터 (2000행)"""
    rng = np.random.default_rng(42)
    feature = np.round(rng.normal(50, 15, 2000), 1)
    p_bad = 1 / (1 + np.exp(-(feature - 60) / 8))
    target = (rng.random(2000) < p_bad).astype(int)
    return feature, target


@pytest.fixture
def tied_data() -> tuple[np.ndarray, np.ndarray]:
    """같은 값이 많이 반복되는 정수 피처 (20개 고유값, 1000행)"""
    rng = np.random.default_rng(7)
    feature = rng.integers(0, 20, 1000).astype(np.float64)
    target = (rng.random(1000) < 0.1 + feature / 40).astype(int)
    return feature, target


@pytest.fixture(autouse=True)
def local_only_settings(monkeypatch):
    """테스트는 기본적으로 원격 통계 서버 없이 실행"""
    from config.settings import get_settings
    monkeypatch.setenv("STATS_API_URL", "")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# ================================================================
# 원격 통계 서버 가짜 세션
# ================================================================
class FakeResponse:
    """requests.Response 대역"""

    def __init__(self, payload=None, status_code: int = 200):
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON body")
        return self._payload


class FakeSession:
    """
    경로별로 응답(또는 예외)을 돌려주는 세션.

    handlers: {경로: callable(json_body) → FakeResponse 또는 예외 인스턴스}
    """

    def __init__(self, handlers: dict):
        self._handlers = handlers
        self.calls: list[tuple[str, dict, float]] = []

    def post(self, url, json=None, timeout=None):
        path = "/" + url.split("/", 3)[-1]
        self.calls.append((path, json, timeout))
        outcome = self._handlers[path](json)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def fake_session_factory():
    return FakeSession


@pytest.fixture
def fake_response():
    return FakeResponse
