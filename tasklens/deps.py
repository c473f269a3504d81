"""依存オブジェクトの生成。"""

from __future__ import annotations

from typing import Iterator

from sqlalchemy.orm import Session

from tasklens.config import Config, get_config
from tasklens.db import get_db


def get_config_dep() -> Config:
    """FastAPI依存性注入用。"""
    return get_config()


def get_db_dep() -> Iterator[Session]:
    """タスクDBセッションのFastAPI依存性注入用。"""
    yield from get_db()
