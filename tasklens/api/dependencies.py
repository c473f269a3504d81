"""
依存関係API（/api/dependencies/*）

- /dependencies: タスクと依存関係の生データ（描画側でグラフを組む用）
- /dependencies/diagram: クリティカルパスを強調した Mermaid 定義
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tasklens import schemas
from tasklens.critical_path import find_critical_path, render_mermaid
from tasklens.deps import get_db_dep
from tasklens.tasks_repo import TaskFilters, list_dependencies, list_tasks


router = APIRouter(prefix="/dependencies", tags=["dependencies"])


@router.get("", response_model=schemas.DependenciesResponse)
def get_dependencies(db: Session = Depends(get_db_dep)) -> schemas.DependenciesResponse:
    """全タスクと全依存関係を返す。"""

    tasks = list_tasks(db)
    dependencies = list_dependencies(db)
    return schemas.DependenciesResponse(
        tasks=[schemas.TaskItem.model_validate(t) for t in tasks],
        dependencies=[schemas.DependencyItem.model_validate(d) for d in dependencies],
    )


@router.get("/diagram", response_model=schemas.DiagramResponse)
def get_dependency_diagram(db: Session = Depends(get_db_dep)) -> schemas.DiagramResponse:
    """Mermaid 定義とクリティカルパスを返す。"""

    # --- ノードの並びを安定させるため id 昇順で渡す ---
    tasks = list_tasks(db, TaskFilters(sort_field="id", sort_order="asc"))
    dependencies = list_dependencies(db)

    result = find_critical_path(tasks, dependencies)
    return schemas.DiagramResponse(
        diagram=render_mermaid(tasks, dependencies, result),
        critical_path=list(result.path),
        cycle_detected=bool(result.cycle_detected),
    )
