"""Background task execution for long-running import work."""

from .config import SUPPORTED_BACKENDS, TaskSettings, get_task_settings
from .executor import schedule_task

__all__ = ["SUPPORTED_BACKENDS", "TaskSettings", "get_task_settings", "schedule_task"]
