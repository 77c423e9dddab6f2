"""
📁 config/settings.py
=====================
환경별 설정 관리.

[패턴] Singleton — @lru_cache로 앱 전체에서 하나의 인스턴스만 유지
[역할] .env 파일과 환경변수에서 설정값을 로드합니다.

사용법:
    from config.settings import get_settings
    s = get_settings()
    print(s.STATS_API_URL)
"""

from functools import lru_cache
from pathlib import Path
from pydantic_settings import BaseSettings

# 프로젝트 루트 (이 파일 기준 한 단계 위)
ROOT = Path(__file__).parent.parent


class Settings(BaseSettings):
    """앱 전체 설정. 우선순위: 환경변수 > .env > 기본값"""

    # ── 기본 ──
    APP_NAME: str = "credit-binning"
    APP_VERSION: str = "0.1.0"
    ENV: str = "development"          # development | production
    DEBUG: bool = True

    # ── 원격 통계 서버 ──
    STATS_API_URL: str = ""           # 비어 있으면 로컬 계산만 사용
    STATS_API_TIMEOUT: float = 30.0   # 요청 타임아웃 (초)
    STATS_API_MAX_RETRIES: int = 0    # 실패 시 재시도 횟수

    # ── 리포트 경로 ──
    REPORT_DIR: str = str(ROOT / "reports")

    # ── API 서버 ──
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000

    # ── 로깅 ──
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = str(ROOT / "logs")

    class Config:
        env_file = str(ROOT / ".env")
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    """설정 싱글턴. 테스트 시 get_settings.cache_clear() 호출."""
    return Settings()
