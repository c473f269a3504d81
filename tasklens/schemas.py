"""API リクエスト/レスポンスの Pydantic モデル。"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tasklens.task_enums import AutomationLevel, Level, OwnerType, TargetTimeUnit


def _strip_required(value: Optional[str], field: str) -> str:
    s = str(value or "").strip()
    if not s:
        raise ValueError(f"{field} is required")
    return s


class TaskFields(BaseModel):
    """タスクの任意項目（作成/更新で共通）。"""

    model_config = ConfigDict(use_enum_values=True)

    task_goal: Optional[str] = None
    automation_level: Optional[AutomationLevel] = None
    tobe_owner: Optional[OwnerType] = None
    input_info: Optional[str] = None
    output_info: Optional[str] = None
    data_standard: Optional[str] = None
    trigger_event: Optional[str] = None
    asis_owner: Optional[str] = None
    agent_capability: Optional[str] = None
    tools_systems: Optional[str] = None
    exception_cases: Optional[str] = None
    error_handling: Optional[str] = None
    target_time: Optional[int] = Field(default=None, gt=0)
    target_time_unit: Optional[TargetTimeUnit] = None
    confidentiality: Optional[Level] = None
    audit_log_required: Optional[bool] = None
    learning_mechanism: Optional[str] = None
    kpi_metrics: Optional[str] = None
    cost_benefit: Optional[float] = None
    comments: Optional[str] = None
    priority: Optional[Level] = None


class TaskCreateRequest(TaskFields):
    """POST /tasks 用リクエスト。"""

    task_name: str

    @field_validator("task_name")
    @classmethod
    def _validate_task_name(cls, v: str) -> str:
        return _strip_required(v, "task_name")


class TaskUpdateRequest(TaskFields):
    """
    PUT /tasks/{id} 用リクエスト（部分更新）。

    明示的に送られた項目だけを更新する。dependsOn があれば依存関係も置き換える。
    """

    model_config = ConfigDict(use_enum_values=True, populate_by_name=True)

    task_name: Optional[str] = None
    depends_on: Optional[List[int]] = Field(default=None, alias="dependsOn")

    @field_validator("task_name")
    @classmethod
    def _validate_task_name(cls, v: Optional[str]) -> str:
        # None を明示的に送るのも不可（必須項目を消せないようにする）
        return _strip_required(v, "task_name")

    def task_updates(self) -> Dict[str, object]:
        """tasks テーブルへ適用する項目（送られたものだけ）を返す。"""
        return self.model_dump(exclude_unset=True, exclude={"depends_on"})


class TaskItem(BaseModel):
    """タスク1件のレスポンス表現。"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    task_name: str
    task_goal: Optional[str] = None
    automation_level: Optional[str] = None
    tobe_owner: Optional[str] = None
    input_info: Optional[str] = None
    output_info: Optional[str] = None
    data_standard: Optional[str] = None
    trigger_event: Optional[str] = None
    asis_owner: Optional[str] = None
    agent_capability: Optional[str] = None
    tools_systems: Optional[str] = None
    exception_cases: Optional[str] = None
    error_handling: Optional[str] = None
    target_time: Optional[int] = None
    target_time_unit: Optional[str] = None
    confidentiality: Optional[str] = None
    audit_log_required: Optional[bool] = None
    learning_mechanism: Optional[str] = None
    kpi_metrics: Optional[str] = None
    cost_benefit: Optional[float] = None
    comments: Optional[str] = None
    priority: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class TaskListResponse(BaseModel):
    tasks: List[TaskItem]


class TaskDetailResponse(BaseModel):
    task: TaskItem


class TaskCreatedResponse(BaseModel):
    id: int


class OkResponse(BaseModel):
    ok: bool = True


class DependencyItem(BaseModel):
    """依存関係1件（task_id は depends_on_task_id の完了後に開始）。"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    task_id: int
    depends_on_task_id: int


class DependenciesResponse(BaseModel):
    """/dependencies のレスポンス（描画側でグラフを組み立てるための素材）。"""
    tasks: List[TaskItem]
    dependencies: List[DependencyItem]


class DiagramResponse(BaseModel):
    """/dependencies/diagram のレスポンス（Mermaid定義とクリティカルパス）。"""

    model_config = ConfigDict(populate_by_name=True)

    diagram: str
    critical_path: List[int] = Field(alias="criticalPath")
    cycle_detected: bool = Field(alias="cycleDetected")


class QuickMemoCreateRequest(BaseModel):
    """/quick-memos 用リクエスト。"""

    model_config = ConfigDict(populate_by_name=True)

    task_id: Optional[int] = Field(default=None, alias="taskId")
    task_name: Optional[str] = Field(default=None, alias="taskName", min_length=1)
    memo_content: str = Field(alias="memoContent")

    @field_validator("memo_content")
    @classmethod
    def _validate_memo_content(cls, v: str) -> str:
        return _strip_required(v, "memoContent")


class QuickMemoItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    task_id: Optional[int] = None
    task_name: Optional[str] = None
    memo_content: str
    created_at: datetime


class QuickMemosResponse(BaseModel):
    memos: List[QuickMemoItem]


class QuickMemoCreatedResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    memo_id: int = Field(alias="memoId")
    memos: List[QuickMemoItem]


class WeeklyTrendPoint(BaseModel):
    week: str
    count: int


class MonthlyTrendPoint(BaseModel):
    month: str
    count: int


class DashboardSummary(BaseModel):
    """ダッシュボード集計結果（JSONのキーは camelCase）。"""

    model_config = ConfigDict(populate_by_name=True)

    total_tasks: int = Field(alias="totalTasks")
    automation_level_counts: Dict[str, int] = Field(alias="automationLevelCounts")
    priority_counts: Dict[str, int] = Field(alias="priorityCounts")
    confidentiality_counts: Dict[str, int] = Field(alias="confidentialityCounts")
    average_target_time: Optional[float] = Field(default=None, alias="averageTargetTime")
    weekly_trend: List[WeeklyTrendPoint] = Field(alias="weeklyTrend")
    monthly_trend: List[MonthlyTrendPoint] = Field(alias="monthlyTrend")
