"""
タスクDBのリポジトリ（Task Store）

目的:
- tasks / task_dependencies / quick_memos のCRUDをここに集約する。
- API/テストから同じロジックを呼べるようにする。

方針:
- コミットは呼び出し側（APIルータ / session_scope）が行う。ここでは flush まで。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Iterable, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from tasklens.config import DEFAULT_QUICK_MEMO_LIMIT
from tasklens.models import QuickMemo, Task, TaskDependency, utcnow
from tasklens.schemas import QuickMemoCreateRequest, TaskCreateRequest, TaskUpdateRequest
from tasklens.task_enums import DEFAULT_PRIORITY


logger = logging.getLogger(__name__)

SORT_FIELDS = {"updated_at", "id"}


class UnknownTaskError(ValueError):
    """存在しないタスクIDが指定された。"""

    def __init__(self, task_ids: Iterable[int]) -> None:
        self.task_ids = sorted(set(int(t) for t in task_ids))
        super().__init__(f"unknown task id(s): {', '.join(str(t) for t in self.task_ids)}")


@dataclass
class TaskFilters:
    """
    タスク一覧の絞り込み/並び替え条件。

    - automation_level / priority は "all" または空なら絞り込まない
    - start_date / end_date は updated_at の日付で比較（両端含む）
    """

    search: Optional[str] = None
    automation_level: Optional[str] = None
    priority: Optional[str] = None
    owner: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    sort_field: str = "updated_at"
    sort_order: str = "desc"


def _is_active_choice(value: Optional[str]) -> bool:
    s = str(value or "").strip()
    return bool(s) and s != "all"


def list_tasks(db: Session, filters: Optional[TaskFilters] = None) -> list[Task]:
    """条件に合うタスクを並び替えて返す。"""

    f = filters or TaskFilters()
    query = db.query(Task)

    # --- 絞り込み ---
    search = str(f.search or "").strip()
    if search:
        query = query.filter(
            or_(
                Task.task_name.contains(search, autoescape=True),
                Task.task_goal.contains(search, autoescape=True),
            )
        )
    if _is_active_choice(f.automation_level):
        query = query.filter(Task.automation_level == str(f.automation_level).strip())
    if _is_active_choice(f.priority):
        query = query.filter(Task.priority == str(f.priority).strip())

    owner = str(f.owner or "").strip()
    if owner:
        # NOTE: To-Be 担当者が未設定のタスクは担当候補として常に含める。
        query = query.filter(
            or_(
                Task.tobe_owner == owner,
                Task.asis_owner == owner,
                Task.tobe_owner.is_(None),
            )
        )

    if f.start_date is not None:
        query = query.filter(Task.updated_at >= datetime.combine(f.start_date, time.min))
    if f.end_date is not None:
        query = query.filter(Task.updated_at < datetime.combine(f.end_date + timedelta(days=1), time.min))

    # --- 並び替え（同値は id で安定化） ---
    sort_field = f.sort_field if f.sort_field in SORT_FIELDS else "updated_at"
    column = Task.id if sort_field == "id" else Task.updated_at
    if f.sort_order == "asc":
        query = query.order_by(column.asc(), Task.id.asc())
    else:
        query = query.order_by(column.desc(), Task.id.desc())
    return query.all()


def get_task(db: Session, task_id: int) -> Optional[Task]:
    """IDでタスクを取得する。無ければ None。"""

    return db.get(Task, int(task_id))


def create_task(db: Session, data: TaskCreateRequest) -> Task:
    """タスクを作成する（priority 未指定時は「中」）。"""

    values = data.model_dump()
    if values.get("priority") is None:
        values["priority"] = DEFAULT_PRIORITY
    task = Task(**values)
    db.add(task)
    db.flush()
    logger.info("task created: id=%s name=%s", task.id, task.task_name)
    return task


def update_task(db: Session, task_id: int, data: TaskUpdateRequest) -> Optional[Task]:
    """タスクを部分更新する。対象が無ければ None。"""

    task = get_task(db, task_id)
    if task is None:
        return None

    for key, value in data.task_updates().items():
        setattr(task, key, value)
    # 項目の変更が無くても更新日時は進める
    task.updated_at = utcnow()
    db.flush()
    return task


def delete_task(db: Session, task_id: int) -> bool:
    """
    タスクを削除する（依存関係とクイックメモも併せて削除）。

    戻り値はタスクが存在したかどうか。
    """

    tid = int(task_id)
    db.query(TaskDependency).filter(
        or_(TaskDependency.task_id == tid, TaskDependency.depends_on_task_id == tid)
    ).delete()
    db.query(QuickMemo).filter(QuickMemo.task_id == tid).delete()
    deleted = db.query(Task).filter(Task.id == tid).delete()
    db.flush()
    if deleted:
        logger.info("task deleted: id=%s", tid)
    return bool(deleted)


def replace_dependencies(db: Session, task_id: int, depends_on: Iterable[int]) -> list[TaskDependency]:
    """
    task_id の依存先を丸ごと置き換える。

    - 自己参照と重複は捨てる（指定順は維持）
    - 存在しないタスクIDが含まれていれば UnknownTaskError
    """

    tid = int(task_id)
    seen: set[int] = set()
    targets: list[int] = []
    for raw in depends_on:
        dep = int(raw)
        if dep == tid or dep in seen:
            continue
        seen.add(dep)
        targets.append(dep)

    # --- 端点の存在確認（ストレージ側では制約を張っていない） ---
    if targets:
        found = {row[0] for row in db.query(Task.id).filter(Task.id.in_(targets)).all()}
        missing = [t for t in targets if t not in found]
        if missing:
            raise UnknownTaskError(missing)

    # --- 置き換え ---
    db.query(TaskDependency).filter(TaskDependency.task_id == tid).delete()
    rows = [TaskDependency(task_id=tid, depends_on_task_id=dep) for dep in targets]
    db.add_all(rows)
    db.flush()
    logger.debug("dependencies replaced: task_id=%s depends_on=%s", tid, targets)
    return rows


def list_dependencies(db: Session) -> list[TaskDependency]:
    """全ての依存関係を登録順で返す。"""

    return db.query(TaskDependency).order_by(TaskDependency.id.asc()).all()


def create_quick_memo(db: Session, data: QuickMemoCreateRequest) -> QuickMemo:
    """クイックメモを追加する。task_id だけ指定された場合はタスク名を補う。"""

    task_name = data.task_name
    if task_name is None and data.task_id is not None:
        task = get_task(db, data.task_id)
        if task is not None:
            task_name = task.task_name

    memo = QuickMemo(
        task_id=data.task_id,
        task_name=task_name,
        memo_content=data.memo_content,
    )
    db.add(memo)
    db.flush()
    return memo


def list_quick_memos(db: Session, limit: int = DEFAULT_QUICK_MEMO_LIMIT) -> list[QuickMemo]:
    """クイックメモを新しい順に最大 limit 件返す。"""

    return (
        db.query(QuickMemo)
        .order_by(QuickMemo.created_at.desc(), QuickMemo.id.desc())
        .limit(int(limit))
        .all()
    )
