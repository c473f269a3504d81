"""タスク一覧のCSVエクスポート。"""

from __future__ import annotations

import csv
import io
from datetime import date, datetime
from typing import Any, Iterable

from tasklens.models import TASK_COLUMNS


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(getattr(value, "value", value))


def tasks_to_csv(tasks: Iterable[Any]) -> str:
    """
    タスク一覧をCSV文字列にする。

    - 列は tasks テーブルの定義順
    - 0件なら空文字（ヘッダも出さない）
    """

    rows = list(tasks)
    if not rows:
        return ""

    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(TASK_COLUMNS)
    for task in rows:
        if isinstance(task, dict):
            writer.writerow([_cell(task.get(c)) for c in TASK_COLUMNS])
        else:
            writer.writerow([_cell(getattr(task, c, None)) for c in TASK_COLUMNS])
    return buf.getvalue()
