"""
タスクDBのORMモデル

- tasks: 自動化候補タスク本体
- task_dependencies: 依存関係（task_id は depends_on_task_id の完了後に開始できる）
- quick_memos: クイックメモ（追記のみ）
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, DateTime, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from tasklens.db import Base
from tasklens.task_enums import DEFAULT_PRIORITY


_ENUM_MAX_LEN = 16


def utcnow() -> datetime:
    """現在時刻（UTC、tzinfoなし）を返す。DBには naive UTC で保存する。"""

    return datetime.now(timezone.utc).replace(tzinfo=None)


class Task(Base):
    """
    タスク定義テーブル。

    列挙値の列（automation_level / priority など）は文字列のまま保存し、
    値の検証は API 側の pydantic モデルで行う。
    """

    __tablename__ = "tasks"
    # 削除済みIDを再利用しない
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    task_name: Mapped[str] = mapped_column(Text, nullable=False)
    task_goal: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    automation_level: Mapped[Optional[str]] = mapped_column(String(_ENUM_MAX_LEN), nullable=True)
    tobe_owner: Mapped[Optional[str]] = mapped_column(String(_ENUM_MAX_LEN), nullable=True)
    input_info: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    output_info: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    data_standard: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    trigger_event: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    asis_owner: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    agent_capability: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    tools_systems: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    exception_cases: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    error_handling: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    target_time: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    target_time_unit: Mapped[Optional[str]] = mapped_column(String(_ENUM_MAX_LEN), nullable=True)
    confidentiality: Mapped[Optional[str]] = mapped_column(String(_ENUM_MAX_LEN), nullable=True)
    audit_log_required: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    learning_mechanism: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    kpi_metrics: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    cost_benefit: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    comments: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    priority: Mapped[Optional[str]] = mapped_column(String(_ENUM_MAX_LEN), nullable=True, default=DEFAULT_PRIORITY)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)


class TaskDependency(Base):
    """
    依存関係テーブル（有向辺）。

    NOTE:
    - 端点が tasks に存在することはアプリ側で保証する（外部キー制約は張らない）。
    - 循環は構造的には防いでいない。
    """

    __tablename__ = "task_dependencies"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    task_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    depends_on_task_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)


class QuickMemo(Base):
    """クイックメモ（タスクへの紐付けは任意）。"""

    __tablename__ = "quick_memos"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    task_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    task_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    memo_content: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)


# CSVエクスポート等で使う tasks の列順
TASK_COLUMNS: list[str] = [c.name for c in Task.__table__.columns]
