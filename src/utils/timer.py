"""
📁 src/utils/timer.py
======================
실행 시간 측정 유틸리티.

[패턴] Decorator — 함수에 @timer를 붙이면 실행시간을 자동 로깅합니다.

사용법:
    @timer("비닝 파이프라인")
    def run():
        ...
    # 출력: [TIMER] 비닝 파이프라인 완료: 0.4초
"""

import time
import functools
from src.utils.logger import get_logger

logger = get_logger(__name__)


def elapsed_ms(start: float) -> int:
    """time.perf_counter() 기준 시작 시각부터 경과한 밀리초"""
    return int(round((time.perf_counter() - start) * 1000))


def timer(label: str = ""):
    """실행 시간 측정 데코레이터"""
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            name = label or func.__name__
            start = time.perf_counter()
            logger.info("[TIMER] %s 시작...", name)

            result = func(*args, **kwargs)

            logger.info("[TIMER] %s 완료: %.1f초", name, time.perf_counter() - start)
            return result
        return wrapper
    return decorator
