"""
📁 src/utils/io.py
===================
파일 읽기/쓰기 유틸리티.

[역할] CSV 로드와 JSON 리포트 저장을 표준화합니다.
       경로 생성, 인코딩을 한 곳에서 관리합니다.
"""

import json
from pathlib import Path
from typing import Any

import pandas as pd

from src.utils.logger import get_logger

logger = get_logger(__name__)


def load_csv(path: str, **kwargs) -> pd.DataFrame:
    """CSV → DataFrame 로드."""
    df = pd.read_csv(path, **kwargs)
    logger.info("CSV 로드: %s (%d행 × %d열)", path, *df.shape)
    return df


def save_json(obj: Any, path: str) -> None:
    """dict → JSON 저장. 디렉토리 자동 생성."""
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(obj, f, ensure_ascii=False, indent=2)
    logger.info("JSON 저장: %s", path)


def load_json(path: str) -> Any:
    """JSON 로드"""
    with open(path, encoding="utf-8") as f:
        obj = json.load(f)
    logger.info("JSON 로드: %s", path)
    return obj
