"""Background task infrastructure for loaders."""

from loadview.task_manager.cancellation import CancellationToken
from loadview.task_manager.task_handle import TaskHandle
from loadview.task_manager.task_manager import TaskManager
from loadview.task_manager.task_slot import TaskSlot
from loadview.task_manager.task_state import TaskState

__all__ = [
    "CancellationToken",
    "TaskHandle",
    "TaskManager",
    "TaskSlot",
    "TaskState",
]
