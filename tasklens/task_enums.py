"""タスク属性のEnum定義。"""

from __future__ import annotations

from enum import Enum


class AutomationLevel(str, Enum):
    """自動化可能性（◎: 完全 / △: 部分 / ×: 不可）。"""
    FULL = "◎"
    PARTIAL = "△"
    NONE = "×"


class OwnerType(str, Enum):
    """To-Be 担当者。"""
    AGENT = "エージェント"
    HUMAN = "人間"
    SHARED = "共同"


class Level(str, Enum):
    """優先度・機密度の3段階。"""
    HIGH = "高"
    MEDIUM = "中"
    LOW = "低"


class TargetTimeUnit(str, Enum):
    """目標時間の単位。"""
    SECOND = "秒"
    MINUTE = "分"
    HOUR = "時間"


AUTOMATION_LEVELS: list[str] = [v.value for v in AutomationLevel]
LEVELS: list[str] = [v.value for v in Level]
DEFAULT_PRIORITY = Level.MEDIUM.value
