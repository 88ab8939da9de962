"""Task runner: sequential or concurrent work with skip, retry and a live view."""

from .models import RunResult, TaskSpec, TaskState, TaskStatus, TaskSummary
from .runner import TaskRunner
from .view import TaskListView, format_duration, run_tasks
from .shell import CommandError, CommandTask, command_task, load_task_file, run_command

__all__ = [
    "RunResult",
    "TaskSpec",
    "TaskState",
    "TaskStatus",
    "TaskSummary",
    "TaskRunner",
    "TaskListView",
    "format_duration",
    "run_tasks",
    "CommandError",
    "CommandTask",
    "command_task",
    "load_task_file",
    "run_command",
]
