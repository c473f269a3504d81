"""
タスクDB接続とセッション管理

tasks / task_dependencies / quick_memos を1つのDBで扱う。
既定は data/tasklens.db（SQLite）。database_url を変えればSQLAlchemyが扱える別DBも使える。
"""

from __future__ import annotations

import contextlib
import logging
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker


logger = logging.getLogger(__name__)

Base = declarative_base()

# グローバルセッション（init_db で作成）
SessionLocal: sessionmaker | None = None
_engine: Engine | None = None


def _create_engine(db_url: str) -> Engine:
    """DBエンジンを作成する（SQLiteは接続ごとにPRAGMAを適用）。"""
    is_sqlite = db_url.startswith("sqlite")
    connect_args = {"check_same_thread": False, "timeout": 10.0} if is_sqlite else {}
    engine = create_engine(db_url, future=True, connect_args=connect_args)

    if is_sqlite:

        @event.listens_for(engine, "connect")
        def apply_sqlite_pragmas(dbapi_conn, connection_record):
            # NOTE: 依存関係の端点はアプリ側の責務なので foreign_keys は有効化しない。
            try:
                dbapi_conn.execute("PRAGMA journal_mode=WAL")
                dbapi_conn.execute("PRAGMA synchronous=NORMAL")
            except Exception as exc:  # noqa: BLE001
                logger.warning("SQLite PRAGMAの適用に失敗しました", exc_info=exc)

    return engine


def init_db(db_url: str) -> None:
    """
    DBを初期化する（起動時）。

    - セッションファクトリを作成する
    - テーブルを作成する
    """

    global SessionLocal, _engine

    dispose_db()
    engine = _create_engine(db_url)
    SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False, future=True)

    # テーブル群を作成（モデル import が必要）
    import tasklens.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    _engine = engine
    logger.info("task DB initialized: %s", engine.url.render_as_string(hide_password=True))


def dispose_db() -> None:
    """エンジンを破棄する（再初期化・テスト後片付け用）。"""

    global SessionLocal, _engine
    if _engine is not None:
        _engine.dispose()
    _engine = None
    SessionLocal = None


def get_db() -> Iterator[Session]:
    """
    DBセッションを取得する（FastAPI依存性注入用）。

    使用後は自動でクローズされる。
    """

    if SessionLocal is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@contextlib.contextmanager
def session_scope() -> Iterator[Session]:
    """
    DBのセッションスコープ（with文用）。

    正常終了時はコミット、例外時はロールバックする。
    """

    if SessionLocal is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
