"""FastAPI エントリポイント。"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI

from tasklens.api import dashboard, dependencies, export, quick_memos, tasks
from tasklens.config import Config, load_config, set_global_config
from tasklens.db import init_db
from tasklens.logging_config import setup_logging, suppress_uvicorn_access_log_paths


logger = logging.getLogger(__name__)


def create_app(config: Optional[Config] = None) -> FastAPI:
    """アプリ生成と初期化（設定→ロギング→DB→ルータ登録）をまとめて行う。"""

    # 1. TOML設定読み込み（引数で渡された場合はそれを使う）
    if config is None:
        config = load_config()
    setup_logging(
        config.log_level,
        log_file_enabled=config.log_file_enabled,
        log_file_path=config.log_file_path,
    )
    suppress_uvicorn_access_log_paths("/api/health")
    set_global_config(config)

    # 2. タスクDB初期化
    init_db(config.database_url)

    # 3. FastAPIアプリ作成
    app = FastAPI(title="TaskLens API")

    app.include_router(tasks.router, prefix="/api")
    app.include_router(dependencies.router, prefix="/api")
    app.include_router(dashboard.router, prefix="/api")
    app.include_router(quick_memos.router, prefix="/api")
    app.include_router(export.router, prefix="/api")

    @app.get("/api/health")
    async def health():
        """稼働確認用のヘルスチェック。"""
        return {"status": "healthy"}

    @app.get("/")
    async def root():
        """ルートの簡易応答（動作確認用）。"""
        return {"message": "TaskLens API is running"}

    logger.info("TaskLens API initialized")
    return app
