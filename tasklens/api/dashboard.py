"""/dashboard エンドポイント。"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tasklens import schemas
from tasklens.dashboard import summarize_dashboard
from tasklens.deps import get_db_dep
from tasklens.tasks_repo import TaskFilters, list_tasks


router = APIRouter(tags=["dashboard"])


@router.get("/dashboard", response_model=schemas.DashboardSummary)
def get_dashboard(db: Session = Depends(get_db_dep)) -> schemas.DashboardSummary:
    """全タスクを集計してダッシュボード用サマリを返す。"""
    tasks = list_tasks(db, TaskFilters(sort_field="id", sort_order="asc"))
    return summarize_dashboard(tasks)
