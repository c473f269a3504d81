"""tasklens package."""

__all__ = [
    "config",
    "db",
    "models",
    "schemas",
    "tasks_repo",
    "critical_path",
    "dashboard",
    "export",
]
