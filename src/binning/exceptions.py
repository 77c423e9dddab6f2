"""
📁 src/binning/exceptions.py
=============================
비닝 엔진 예외 계층.

  BinningError             → 파이프라인 중단 (부분 결과 없음)
  └─ ValidationError       → 호출자가 넘긴 데이터를 쓸 수 없음 (재시도 안 함)
  StatisticsServiceError   → 원격 통계 서버 실패 (계산기 내부에서 로컬 계산으로 대체)
"""


class BinningError(Exception):
    """비닝 파이프라인 실패. 원인 예외는 __cause__로 연결됩니다."""


class ValidationError(BinningError):
    """입력 데이터 검증 실패"""


class StatisticsServiceError(Exception):
    """원격 통계 서버 호출 실패 (타임아웃, 네트워크, 비정상 응답)"""
