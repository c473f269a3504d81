"""
タスクAPI（/api/tasks/*）

目的:
- タスクの作成/一覧/取得/部分更新/削除を行う。
- 部分更新では dependsOn を受け取り、依存関係を丸ごと置き換える。
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from tasklens import schemas
from tasklens.deps import get_db_dep
from tasklens.tasks_repo import (
    TaskFilters,
    UnknownTaskError,
    create_task,
    delete_task,
    get_task,
    list_tasks,
    replace_dependencies,
    update_task,
)


router = APIRouter(prefix="/tasks", tags=["tasks"])
logger = logging.getLogger(__name__)


@router.get("", response_model=schemas.TaskListResponse)
def get_tasks(
    q: Optional[str] = Query(None),
    automation_level: Optional[str] = Query(None, alias="automationLevel"),
    priority: Optional[str] = Query(None),
    owner: Optional[str] = Query(None),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    sort_field: str = Query("updated_at", alias="sortField"),
    sort_order: str = Query("desc", alias="sortOrder"),
    db: Session = Depends(get_db_dep),
) -> schemas.TaskListResponse:
    """タスク一覧を返す（絞り込み/並び替え付き）。"""

    filters = TaskFilters(
        search=q,
        automation_level=automation_level,
        priority=priority,
        owner=owner,
        start_date=start_date,
        end_date=end_date,
        sort_field=sort_field,
        sort_order=sort_order,
    )
    tasks = list_tasks(db, filters)
    return schemas.TaskListResponse(tasks=[schemas.TaskItem.model_validate(t) for t in tasks])


@router.post("", response_model=schemas.TaskCreatedResponse, status_code=status.HTTP_201_CREATED)
def post_task(
    request: schemas.TaskCreateRequest,
    db: Session = Depends(get_db_dep),
) -> schemas.TaskCreatedResponse:
    """タスクを作成する。"""

    task = create_task(db, request)
    db.commit()
    return schemas.TaskCreatedResponse(id=int(task.id))


@router.get("/{task_id}", response_model=schemas.TaskDetailResponse)
def get_task_detail(task_id: int, db: Session = Depends(get_db_dep)) -> schemas.TaskDetailResponse:
    """タスクを1件返す。"""

    task = get_task(db, task_id)
    if task is None:
        raise HTTPException(status_code=404, detail="task not found")
    return schemas.TaskDetailResponse(task=schemas.TaskItem.model_validate(task))


@router.put("/{task_id}", response_model=schemas.OkResponse)
def put_task(
    task_id: int,
    request: schemas.TaskUpdateRequest,
    db: Session = Depends(get_db_dep),
) -> schemas.OkResponse:
    """タスクを部分更新する（dependsOn があれば依存関係も置き換える）。"""

    # --- 本体の更新 ---
    task = update_task(db, task_id, request)
    if task is None:
        raise HTTPException(status_code=404, detail="task not found")

    # --- 依存関係の置き換え ---
    if request.depends_on is not None:
        try:
            replace_dependencies(db, task_id, request.depends_on)
        except UnknownTaskError as exc:
            db.rollback()
            raise HTTPException(status_code=400, detail=str(exc)) from exc

    db.commit()
    return schemas.OkResponse()


@router.delete("/{task_id}", response_model=schemas.OkResponse)
def delete_task_endpoint(task_id: int, db: Session = Depends(get_db_dep)) -> schemas.OkResponse:
    """タスクを削除する（依存関係・メモも削除）。存在しなくても成功扱い。"""

    delete_task(db, task_id)
    db.commit()
    return schemas.OkResponse()
