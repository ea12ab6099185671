"""Task lifecycle states."""

from enum import Enum, auto


class TaskState(Enum):
    """Lifecycle states for managed tasks."""

    PENDING = auto()  # Submitted but not yet started
    RUNNING = auto()  # Currently executing
    COMPLETED = auto()  # Finished successfully
    FAILED = auto()  # Raised an exception
    CANCELLED = auto()  # Cancelled before or during execution

    @property
    def is_terminal(self) -> bool:
        """Settled states; a handle in one of these never changes again."""
        return self in (TaskState.COMPLETED, TaskState.FAILED, TaskState.CANCELLED)
