"""Task runner data models."""

from enum import Enum
from typing import Any, Callable, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field


class TaskStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    SUCCESS = "success"
    ERROR = "error"
    SKIPPED = "skipped"

    @property
    def is_terminal(self) -> bool:
        return self in (TaskStatus.SUCCESS, TaskStatus.ERROR, TaskStatus.SKIPPED)


SkipCondition = Union[bool, Callable[[], Any]]


class TaskSpec(BaseModel):
    """One unit of work for the task runner."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    title: str = Field(..., description="Label shown in the task list")
    task: Callable[..., Any] = Field(..., description="Sync or async work function")
    skip: SkipCondition = Field(default=False, description="Static flag or sync/async predicate")
    retry: int = Field(default=0, ge=0, description="Extra attempts after the first failure")


class TaskState(BaseModel):
    """Observable run state of one task."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    status: TaskStatus = TaskStatus.PENDING
    error: Optional[BaseException] = None
    start_time: Optional[float] = Field(default=None, description="time.monotonic() at start")
    end_time: Optional[float] = None
    retry_count: int = 0

    def duration_ms(self, now: Optional[float] = None) -> Optional[int]:
        if self.start_time is None:
            return None
        end = self.end_time if self.end_time is not None else now
        if end is None:
            return None
        return int((end - self.start_time) * 1000)


class TaskSummary(BaseModel):
    total: int = 0
    success: int = 0
    failed: int = 0
    skipped: int = 0
    pending: int = 0
    running: int = 0
    duration_ms: int = 0

    @property
    def is_complete(self) -> bool:
        return self.success + self.failed + self.skipped == self.total

    @property
    def percent(self) -> float:
        return self.success / self.total * 100 if self.total else 0.0

    @classmethod
    def from_states(cls, states: Sequence[TaskState], duration_ms: int = 0) -> "TaskSummary":
        counts = {status: 0 for status in TaskStatus}
        for state in states:
            counts[state.status] += 1
        return cls(
            total=len(states),
            success=counts[TaskStatus.SUCCESS],
            failed=counts[TaskStatus.ERROR],
            skipped=counts[TaskStatus.SKIPPED],
            pending=counts[TaskStatus.PENDING],
            running=counts[TaskStatus.RUNNING],
            duration_ms=duration_ms,
        )


class RunResult(BaseModel):
    """Outcome passed to ``on_complete`` and returned by ``TaskRunner.run``."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    success: bool
    errors: list[BaseException] = Field(default_factory=list)
