"""
📁 scripts/run_binning.py
==========================
CSV 파일 비닝 실행 스크립트.

실행: python scripts/run_binning.py --data data/loans.csv --feature income --target is_bad
      python scripts/run_binning.py --data data/loans.csv --feature age --target is_bad \
          --mode equal_width --max-bins 5 --monotonic
"""

import sys
import argparse
from pathlib import Path

# 프로젝트 루트를 Python 경로에 추가
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv
load_dotenv()

from config.binning_config import BinningConfiguration, BinningMode
from src.binning.exceptions import BinningError
from src.utils.logger import setup_logging, get_logger
from pipelines.binning_pipeline import BinningPipeline

logger = get_logger(__name__)


def main():
    parser = argparse.ArgumentParser(description="WoE/IV 비닝 분석")
    parser.add_argument("--data", type=str, required=True, help="입력 CSV 경로")
    parser.add_argument("--feature", type=str, required=True, help="피처 컬럼명")
    parser.add_argument("--target", type=str, required=True, help="타겟 컬럼명 (0/1)")
    parser.add_argument("--mode", choices=[m.value for m in BinningMode], default=BinningMode.OPTIMAL.value)
    parser.add_argument("--max-bins", type=int, default=10)
    parser.add_argument("--min-bins", type=int, default=2)
    parser.add_argument("--min-population", type=float, default=0.05, help="< 1: 비율, >= 1: 건수")
    parser.add_argument("--monotonic", action="store_true", help="불량률 단조성 강제")
    parser.add_argument("--merge-threshold", type=float, default=None, help="지정 시 유사 불량률 구간 병합")
    parser.add_argument("--output", type=str, default=None, help="리포트 JSON 경로")
    args = parser.parse_args()

    setup_logging()

    try:
        config = BinningConfiguration(
            mode=args.mode,
            max_bins=args.max_bins,
            min_bins=args.min_bins,
            min_population=args.min_population,
            enforce_monotonicity=args.monotonic,
            merge_similar_rates=args.merge_threshold is not None,
            merge_threshold=args.merge_threshold if args.merge_threshold is not None else 0.05,
        )
    except ValueError as e:
        parser.error(str(e))

    pipeline = BinningPipeline(config=config)
    output = args.output or pipeline.default_report_path(args.feature)

    try:
        report = pipeline.run(
            args.data, args.feature, args.target,
            save_path=output,
            on_progress=lambda step, pct: logger.info("[%3d%%] %s", pct, step),
        )
    except BinningError as e:
        logger.error("비닝 실패: %s", e)
        sys.exit(1)

    for b in report["result"]["bins"]:
        logger.info(
            "  #%-2d %-22s n=%-6d bad_rate=%.3f woe=%+.4f iv=%.4f",
            b["id"], b["range"], b["count"], b["bad_rate"], b["woe"], b["iv"],
        )
    for w in report["result"]["warnings"]:
        logger.warning("⚠️ %s", w)


if __name__ == "__main__":
    main()
