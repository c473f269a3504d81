"""
ダッシュボード集計

タスク一覧から件数の内訳・平均目標時間・登録推移（週/月）を求める。
DB/HTTP に依存しない純粋ロジック。入力は ORM 行・pydantic モデル・dict のどれでもよい。
"""

from __future__ import annotations

import logging
import numbers
from collections import Counter
from datetime import date, datetime, timezone
from typing import Any, Iterable, Optional

from tasklens.schemas import DashboardSummary, MonthlyTrendPoint, WeeklyTrendPoint
from tasklens.task_enums import AUTOMATION_LEVELS, LEVELS


logger = logging.getLogger(__name__)


def _field(obj: Any, name: str) -> Any:
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def parse_created_at(value: Any) -> Optional[datetime]:
    """
    created_at を datetime に正規化する。

    - datetime / date / ISO-8601 文字列（末尾 Z も可）を受け付ける
    - タイムゾーン付きは UTC に揃えてから tzinfo を外す
    - 解釈できなければ None
    """

    if value is None:
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(s)
        except ValueError:
            return None
    else:
        return None

    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def iso_week_key(dt: date) -> str:
    """ISO-8601 の週番号キー（YYYY-Www）。年は週の木曜日が属する年。"""
    iso_year, iso_week, _ = dt.isocalendar()
    return f"{iso_year}-W{iso_week:02d}"


def month_key(dt: date) -> str:
    """月キー（YYYY-MM）。"""
    return f"{dt.year}-{dt.month:02d}"


def _count_fixed(tasks: list[Any], name: str, keys: list[str]) -> dict[str, int]:
    """固定キーで件数を数える（未設定・想定外の値は数えない）。"""
    counts = {k: 0 for k in keys}
    for task in tasks:
        value = _field(task, name)
        value = getattr(value, "value", value)
        if value in counts:
            counts[value] += 1
    return counts


def _is_positive_number(value: Any) -> bool:
    # bool は数値扱いしない
    return isinstance(value, numbers.Real) and not isinstance(value, bool) and value > 0


def summarize_dashboard(tasks: Iterable[Any]) -> DashboardSummary:
    """
    タスク一覧をダッシュボード用に集計する。

    created_at が無い（または解釈できない）タスクは totalTasks などには数えるが、
    週/月の推移には含めない。
    """

    items = list(tasks)

    # --- 平均目標時間（正の値が設定されたものだけ） ---
    target_times = [float(_field(t, "target_time")) for t in items if _is_positive_number(_field(t, "target_time"))]
    average_target_time = sum(target_times) / len(target_times) if target_times else None

    # --- 登録推移 ---
    weekly: Counter[str] = Counter()
    monthly: Counter[str] = Counter()
    skipped = 0
    for task in items:
        created_at = parse_created_at(_field(task, "created_at"))
        if created_at is None:
            skipped += 1
            continue
        weekly[iso_week_key(created_at)] += 1
        monthly[month_key(created_at)] += 1
    if skipped:
        logger.debug("tasks without created_at excluded from trends: %d", skipped)

    return DashboardSummary(
        total_tasks=len(items),
        automation_level_counts=_count_fixed(items, "automation_level", AUTOMATION_LEVELS),
        priority_counts=_count_fixed(items, "priority", LEVELS),
        confidentiality_counts=_count_fixed(items, "confidentiality", LEVELS),
        average_target_time=average_target_time,
        weekly_trend=[WeeklyTrendPoint(week=k, count=v) for k, v in sorted(weekly.items())],
        monthly_trend=[MonthlyTrendPoint(month=k, count=v) for k, v in sorted(monthly.items())],
    )
