"""CSVエクスポートのテスト。"""

from __future__ import annotations

import csv
import io
from datetime import datetime

from tasklens.export import tasks_to_csv
from tasklens.models import TASK_COLUMNS


def test_empty_task_list_exports_empty_string():
    assert tasks_to_csv([]) == ""


def test_header_follows_table_column_order():
    body = tasks_to_csv([{"id": 1, "task_name": "A"}])
    header = body.splitlines()[0].split(",")

    assert header == TASK_COLUMNS
    assert header[:2] == ["id", "task_name"]


def test_values_are_formatted_and_quoted():
    task = {
        "id": 3,
        "task_name": 'カンマ, と "引用符"',
        "audit_log_required": True,
        "target_time": None,
        "comments": "1行目\n2行目",
        "created_at": datetime(2024, 1, 2, 3, 4, 5),
    }
    rows = list(csv.DictReader(io.StringIO(tasks_to_csv([task]))))

    assert len(rows) == 1
    row = rows[0]
    assert row["id"] == "3"
    assert row["task_name"] == 'カンマ, と "引用符"'
    assert row["audit_log_required"] == "true"
    assert row["target_time"] == ""
    assert row["comments"] == "1行目\n2行目"
    assert row["created_at"] == "2024-01-02T03:04:05"


def test_orm_rows_are_exported(db):
    from tasklens.schemas import TaskCreateRequest
    from tasklens.tasks_repo import create_task, list_tasks

    create_task(db, TaskCreateRequest(task_name="出荷指示", audit_log_required=False))
    db.commit()

    rows = list(csv.DictReader(io.StringIO(tasks_to_csv(list_tasks(db)))))
    assert rows[0]["task_name"] == "出荷指示"
    assert rows[0]["audit_log_required"] == "false"
    assert rows[0]["priority"] == "中"
