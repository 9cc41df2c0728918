#!/usr/bin/env python3
"""
FastAPIサーバーを起動するエントリポイント
"""
import sys
from pathlib import Path

# プロジェクトルートをPYTHONPATHに追加
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import uvicorn

from infrastructure.config.app_config import AppConfig
from infrastructure.logging.log_setup import setup_console_logging

if __name__ == "__main__":
    config = AppConfig.from_env()
    setup_console_logging(level=config.log_level)
    uvicorn.run(
        "api.main:app",
        host=config.host,
        port=config.port,
        reload=config.environment == "development",  # 開発時の自動リロード
        log_config=None,
    )
