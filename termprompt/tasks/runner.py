"""Runs task lists sequentially or concurrently with skip, retry and timing."""

import asyncio
import inspect
import logging
import time
from typing import Any, Callable, Iterable, Optional, Union

from ..state import CancellationToken, State
from ..state.emitter import Unsubscribe
from .models import RunResult, TaskSpec, TaskState, TaskStatus, TaskSummary

logger = logging.getLogger(__name__)

DEFAULT_RETRY_DELAY = 1.0

TaskLike = Union[TaskSpec, dict]


def to_task(task: TaskLike) -> TaskSpec:
    if isinstance(task, TaskSpec):
        return task
    return TaskSpec.model_validate(task)


def accepts_token(func: Callable[..., Any]) -> bool:
    """True if ``func`` takes a ``token`` keyword argument."""
    try:
        parameters = inspect.signature(func).parameters
    except (TypeError, ValueError):
        return False
    return "token" in parameters


class TaskRunner:
    """Executes tasks and publishes their states through an observable cell.

    Work functions that declare a ``token`` parameter receive the runner's
    cancellation token.
    """

    def __init__(self,
                 tasks: Iterable[TaskLike],
                 *,
                 concurrent: bool = False,
                 exit_on_error: bool = True,
                 retry_delay: float = DEFAULT_RETRY_DELAY,
                 on_complete: Optional[Callable[[RunResult], Any]] = None):
        self.tasks = [to_task(task) for task in tasks]
        self.concurrent = concurrent
        self.exit_on_error = exit_on_error
        self.retry_delay = retry_delay
        self.on_complete = on_complete
        self.state: State[tuple[TaskState, ...]] = State(tuple(TaskState() for _ in self.tasks))
        self.token = CancellationToken(name="task-runner")
        self.started_at: Optional[float] = None
        self.finished_at: Optional[float] = None
        self.result: Optional[RunResult] = None
        self._errors: dict[int, BaseException] = {}
        self._running = False

    @property
    def states(self) -> tuple[TaskState, ...]:
        return self.state.get()

    @property
    def finished(self) -> bool:
        return self.finished_at is not None

    def subscribe(self, handler: Callable[[tuple[TaskState, ...]], Any]) -> Unsubscribe:
        return self.state.subscribe(handler)

    def elapsed_ms(self, now: Optional[float] = None) -> int:
        if self.started_at is None:
            return 0
        end = self.finished_at if self.finished_at is not None else (now or time.monotonic())
        return int((end - self.started_at) * 1000)

    def summary(self) -> TaskSummary:
        return TaskSummary.from_states(self.states, self.elapsed_ms())

    def cancel(self) -> None:
        """Stop scheduling tasks; results of work still in flight are discarded."""
        self.token.cancel()

    def _patch(self, index: int, **changes: Any) -> None:
        def apply(states: tuple[TaskState, ...]) -> tuple[TaskState, ...]:
            updated = states[index].model_copy(update=changes)
            return states[:index] + (updated,) + states[index + 1:]

        self.state.set(apply)

    async def _should_skip(self, spec: TaskSpec) -> bool:
        if not callable(spec.skip):
            return bool(spec.skip)
        outcome = spec.skip()
        if inspect.isawaitable(outcome):
            outcome = await outcome
        return bool(outcome)

    async def _call(self, spec: TaskSpec) -> Any:
        kwargs = {"token": self.token} if accepts_token(spec.task) else {}
        if inspect.iscoroutinefunction(spec.task):
            return await spec.task(**kwargs)
        loop = asyncio.get_running_loop()
        outcome = await loop.run_in_executor(None, lambda: spec.task(**kwargs))
        if inspect.isawaitable(outcome):
            outcome = await outcome
        return outcome

    async def run_task(self, index: int) -> bool:
        """Run one task to a terminal state; returns False if it ended in error."""
        spec = self.tasks[index]
        if self.token.cancelled:
            return False

        try:
            skip = await self._should_skip(spec)
        except Exception as e:
            logger.error(f"Skip check for task {spec.title!r} failed: {e}")
            self._errors[index] = e
            now = time.monotonic()
            self._patch(index, status=TaskStatus.ERROR, error=e, start_time=now, end_time=now)
            return False
        if skip:
            logger.info(f"Skipping task {spec.title!r}")
            self._patch(index, status=TaskStatus.SKIPPED)
            return True

        self._patch(index, status=TaskStatus.RUNNING, start_time=time.monotonic())
        retry_count = 0
        error: Optional[BaseException] = None
        while True:
            try:
                await self._call(spec)
                error = None
                break
            except Exception as e:
                error = e
                if self.token.cancelled or retry_count >= spec.retry:
                    break
                retry_count += 1
                logger.warning(f"Task {spec.title!r} failed ({e}), retry {retry_count}/{spec.retry}")
                self._patch(index, retry_count=retry_count)
                await asyncio.sleep(self.retry_delay)
                if self.token.cancelled:
                    break

        if self.token.cancelled:
            logger.debug(f"Discarding result of task {spec.title!r} after cancellation")
            return False

        if error is None:
            logger.info(f"Task {spec.title!r} succeeded")
            self._patch(index, status=TaskStatus.SUCCESS, end_time=time.monotonic(), retry_count=retry_count)
            return True

        logger.error(f"Task {spec.title!r} failed: {error}")
        self._errors[index] = error
        self._patch(index, status=TaskStatus.ERROR, error=error,
                    end_time=time.monotonic(), retry_count=retry_count)
        return False

    async def run(self) -> RunResult:
        """Run every task and return the overall result.

        Raises:
            RuntimeError: If the runner has already been started
        """
        if self._running or self.finished:
            raise RuntimeError("TaskRunner can only be run once")
        self._running = True
        self.started_at = time.monotonic()
        mode = "concurrently" if self.concurrent else "sequentially"
        logger.info(f"Running {len(self.tasks)} task(s) {mode}")

        try:
            if self.concurrent:
                await asyncio.gather(*(self.run_task(i) for i in range(len(self.tasks))))
            else:
                for index in range(len(self.tasks)):
                    ok = await self.run_task(index)
                    if self.token.cancelled:
                        break
                    if not ok and self.exit_on_error:
                        logger.warning(f"Stopping after failed task {self.tasks[index].title!r}")
                        break
        finally:
            self.finished_at = time.monotonic()
            self._running = False

        errors = [self._errors[index] for index in sorted(self._errors)]
        self.result = RunResult(success=not errors, errors=errors)
        if self.token.cancelled:
            logger.info("Task run cancelled")
        elif self.on_complete is not None:
            self.on_complete(self.result)
        return self.result
