"""/export エンドポイント（CSVダウンロード）。"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from tasklens.deps import get_db_dep
from tasklens.export import tasks_to_csv
from tasklens.tasks_repo import list_tasks


router = APIRouter(tags=["export"])

SUPPORTED_FORMATS = {"csv"}


@router.get("/export")
def export_tasks(
    format: str = Query("csv"),  # noqa: A002
    db: Session = Depends(get_db_dep),
) -> Response:
    """全タスクをファイルとして返す（現状はCSVのみ）。"""

    fmt = str(format or "csv").strip().lower()
    if fmt not in SUPPORTED_FORMATS:
        raise HTTPException(status_code=400, detail=f"unsupported format: {fmt} (supported: csv)")

    body = tasks_to_csv(list_tasks(db))
    return Response(
        content=body,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": 'attachment; filename="tasks.csv"'},
    )
