"""テスト共通 fixture（テストごとに一時SQLiteを使う）。"""

from __future__ import annotations

from pathlib import Path
from typing import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from tasklens import db as db_module
from tasklens.config import Config


@pytest.fixture()
def config(tmp_path: Path) -> Config:
    """一時ディレクトリのDBを指す設定。"""
    return Config(
        log_level="WARNING",
        database_url=f"sqlite:///{tmp_path / 'tasklens_test.db'}",
        quick_memo_limit=50,
    )


@pytest.fixture()
def db(config: Config) -> Iterator[Session]:
    """初期化済みDBのセッション。"""
    db_module.init_db(config.database_url)
    session = db_module.SessionLocal()
    try:
        yield session
    finally:
        session.close()
        db_module.dispose_db()


@pytest.fixture()
def client(config: Config) -> Iterator[TestClient]:
    """create_app で組み立てたアプリに対する TestClient。"""
    from tasklens.main import create_app

    app = create_app(config)
    with TestClient(app) as c:
        yield c
    db_module.dispose_db()
