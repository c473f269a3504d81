"""
クイックメモAPI（/api/quick-memos）

メモは追記のみ。一覧は新しい順に上限件数まで返す。
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from tasklens import schemas
from tasklens.config import Config
from tasklens.deps import get_config_dep, get_db_dep
from tasklens.tasks_repo import create_quick_memo, list_quick_memos


router = APIRouter(prefix="/quick-memos", tags=["quick-memos"])


def _memo_items(db: Session, limit: int) -> list[schemas.QuickMemoItem]:
    return [schemas.QuickMemoItem.model_validate(m) for m in list_quick_memos(db, limit=limit)]


@router.get("", response_model=schemas.QuickMemosResponse)
def get_quick_memos(
    db: Session = Depends(get_db_dep),
    config: Config = Depends(get_config_dep),
) -> schemas.QuickMemosResponse:
    """クイックメモ一覧を返す。"""
    return schemas.QuickMemosResponse(memos=_memo_items(db, config.quick_memo_limit))


@router.post("", response_model=schemas.QuickMemoCreatedResponse, status_code=status.HTTP_201_CREATED)
def post_quick_memo(
    request: schemas.QuickMemoCreateRequest,
    db: Session = Depends(get_db_dep),
    config: Config = Depends(get_config_dep),
) -> schemas.QuickMemoCreatedResponse:
    """クイックメモを追加し、最新の一覧と併せて返す。"""

    memo = create_quick_memo(db, request)
    db.commit()
    return schemas.QuickMemoCreatedResponse(
        memo_id=int(memo.id),
        memos=_memo_items(db, config.quick_memo_limit),
    )
