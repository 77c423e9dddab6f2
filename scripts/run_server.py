"""
📁 scripts/run_server.py
=========================
비닝 API 서버 실행 스크립트.

실행: python scripts/run_server.py
      python scripts/run_server.py --port 9000
"""

import sys
import argparse
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv
load_dotenv()

import uvicorn
from config.settings import get_settings


def main():
    s = get_settings()
    parser = argparse.ArgumentParser(description="비닝 API 서버")
    parser.add_argument("--host", type=str, default=s.API_HOST)
    parser.add_argument("--port", type=int, default=s.API_PORT)
    args = parser.parse_args()

    uvicorn.run(
        "src.serving.app:app",
        host=args.host,
        port=args.port,
        reload=(s.ENV == "development"),
        log_level=s.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
