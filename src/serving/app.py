"""
📁 src/serving/app.py
======================
FastAPI 애플리케이션.

엔드포인트:
  GET  /health                → 서버 상태
  POST /api/binning/analyze   → 비닝 분석 (구간 + WoE/IV + Gini/KS)

실행: uvicorn src.serving.app:app --reload
문서: http://localhost:8000/docs
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Depends, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from config.settings import get_settings
from src.binning.engine import BinningEngine
from src.binning.exceptions import BinningError, ValidationError
from src.serving.schemas import BinningRequest, BinningResponse
from src.serving.dependencies import get_engine, get_stats_client
from src.utils.logger import setup_logging, get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info("🚀 서버 시작: %s", get_settings().APP_VERSION)
    yield
    logger.info("👋 서버 종료")


app = FastAPI(
    title="Credit Binning API",
    description="WoE/IV 기반 최적 구간화 서비스",
    version=get_settings().APP_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health():
    client = get_stats_client()
    return {
        "status": "ok",
        "version": get_settings().APP_VERSION,
        "stats_api": client.base_url if client.is_configured else "local",
    }


@app.post("/api/binning/analyze", response_model=BinningResponse)
def analyze(
        req: BinningRequest,
        engine: BinningEngine = Depends(get_engine),
):
    """비닝 분석. 입력 오류는 422, 그 밖의 실패는 500."""
    try:
        config = req.config.to_config()
    except ValueError as e:
        raise HTTPException(422, detail=str(e))

    try:
        result = engine.run(req.feature, req.target, config)
        return BinningResponse(success=True, data=result.to_dict())
    except ValidationError as e:
        raise HTTPException(422, detail=str(e))
    except BinningError as e:
        logger.error("비닝 실패: %s", e, exc_info=True)
        raise HTTPException(500, detail=str(e))
