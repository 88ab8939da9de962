"""Tests for the task runner and its live view."""

import asyncio
import io
import pytest
from unittest.mock import AsyncMock, Mock

from rich.console import Console

from termprompt.tasks import (
    RunResult,
    TaskListView,
    TaskRunner,
    TaskSpec,
    TaskStatus,
    format_duration,
    run_tasks,
)


def failing(message):
    def work():
        raise RuntimeError(message)
    return Mock(side_effect=work)


def render(renderable) -> str:
    console = Console(file=io.StringIO(), width=80, color_system=None)
    console.print(renderable)
    return console.file.getvalue()


class TestSequentialRun:
    """Sequential task execution."""

    @pytest.mark.asyncio
    async def test_stops_after_exhausted_retries(self):
        """A fails three times, B never starts."""
        task_a = failing("A broke")
        task_b = Mock()
        runner = TaskRunner([
            TaskSpec(title="A", task=task_a, retry=2),
            TaskSpec(title="B", task=task_b),
        ], retry_delay=0)

        result = await runner.run()

        state_a, state_b = runner.states
        assert state_a.status is TaskStatus.ERROR
        assert state_a.retry_count == 2
        assert str(state_a.error) == "A broke"
        assert state_a.end_time is not None
        assert task_a.call_count == 3
        assert state_b.status is TaskStatus.PENDING
        task_b.assert_not_called()
        assert not result.success
        assert len(result.errors) == 1

    @pytest.mark.asyncio
    async def test_retry_recovers(self):
        """A task that fails once and then succeeds ends in success."""
        attempts = []

        async def flaky():
            attempts.append(1)
            if len(attempts) == 1:
                raise RuntimeError("first try")

        retries_seen = []
        runner = TaskRunner([TaskSpec(title="flaky", task=flaky, retry=1)], retry_delay=0)
        runner.subscribe(lambda states: retries_seen.append(states[0].retry_count))

        result = await runner.run()

        assert result == RunResult(success=True)
        assert runner.states[0].status is TaskStatus.SUCCESS
        assert runner.states[0].retry_count == 1
        assert 1 in retries_seen

    @pytest.mark.asyncio
    async def test_keep_going_after_error(self):
        task_b = AsyncMock()
        runner = TaskRunner([
            {"title": "A", "task": failing("nope")},
            {"title": "B", "task": task_b},
        ], exit_on_error=False)

        await runner.run()

        assert [s.status for s in runner.states] == [TaskStatus.ERROR, TaskStatus.SUCCESS]
        task_b.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_skip_flag_and_predicates(self):
        """Skipped tasks never run and count as success."""
        work = Mock()

        async def async_skip():
            return True

        runner = TaskRunner([
            TaskSpec(title="static", task=work, skip=True),
            TaskSpec(title="sync", task=work, skip=lambda: True),
            TaskSpec(title="async", task=work, skip=async_skip),
            TaskSpec(title="runs", task=work, skip=lambda: False),
        ])

        result = await runner.run()

        assert [s.status for s in runner.states] == [
            TaskStatus.SKIPPED, TaskStatus.SKIPPED, TaskStatus.SKIPPED, TaskStatus.SUCCESS,
        ]
        assert work.call_count == 1
        assert result.success

    @pytest.mark.asyncio
    async def test_failing_skip_predicate_is_a_task_error(self):
        def broken_skip():
            raise OSError("cannot stat")

        runner = TaskRunner([TaskSpec(title="A", task=Mock(), skip=broken_skip)])
        result = await runner.run()

        assert runner.states[0].status is TaskStatus.ERROR
        assert str(result.errors[0]) == "cannot stat"

    @pytest.mark.asyncio
    async def test_work_receives_cancellation_token(self):
        seen = []

        async def work(token):
            seen.append(token)

        runner = TaskRunner([TaskSpec(title="A", task=work)])
        await runner.run()

        assert seen == [runner.token]

    @pytest.mark.asyncio
    async def test_cancel_stops_scheduling(self):
        """After cancel the running task's result is discarded and nothing else starts."""
        on_complete = Mock()
        later = Mock()
        async def first():
            runner.cancel()

        runner = TaskRunner([
            TaskSpec(title="first", task=first),
            TaskSpec(title="later", task=later),
        ], on_complete=on_complete)

        await runner.run()

        assert runner.states[0].status is TaskStatus.RUNNING
        later.assert_not_called()
        on_complete.assert_not_called()

    @pytest.mark.asyncio
    async def test_runs_only_once(self):
        runner = TaskRunner([TaskSpec(title="A", task=Mock())])
        await runner.run()
        with pytest.raises(RuntimeError):
            await runner.run()


class TestConcurrentRun:
    """Concurrent task execution."""

    @pytest.mark.asyncio
    async def test_all_tasks_settle(self):
        """Both tasks finish and the callback reports B's error only."""
        on_complete = Mock()
        runner = TaskRunner([
            TaskSpec(title="A", task=AsyncMock()),
            TaskSpec(title="B", task=failing("B broke")),
        ], concurrent=True, on_complete=on_complete)

        await runner.run()

        assert [s.status for s in runner.states] == [TaskStatus.SUCCESS, TaskStatus.ERROR]
        on_complete.assert_called_once()
        result = on_complete.call_args.args[0]
        assert result.success is False
        assert [str(e) for e in result.errors] == ["B broke"]

    @pytest.mark.asyncio
    async def test_tasks_overlap(self):
        """Concurrent tasks start before earlier ones finish."""
        started = []
        release = asyncio.Event()

        async def wait_for_release(name):
            started.append(name)
            await release.wait()

        async def first():
            await wait_for_release("first")

        async def second():
            await wait_for_release("second")

        runner = TaskRunner([TaskSpec(title="1", task=first), TaskSpec(title="2", task=second)],
                            concurrent=True)
        run = asyncio.ensure_future(runner.run())
        await asyncio.sleep(0.01)
        assert sorted(started) == ["first", "second"]
        assert runner.summary().running == 2

        release.set()
        result = await run
        assert result.success


class TestTaskListView:
    """Rendering of task states."""

    def test_format_duration(self):
        assert format_duration(123) == "123ms"
        assert format_duration(1234) == "1.23s"
        assert format_duration(0) == "0ms"
        assert format_duration(None) == "0s"

    @pytest.mark.asyncio
    async def test_error_without_message_shows_its_type(self):
        runner = TaskRunner([TaskSpec(title="Fetch", task=Mock(side_effect=RuntimeError()))])
        await runner.run()

        output = render(TaskListView(runner, show_timer=False))

        assert "  RuntimeError" in output

    @pytest.mark.asyncio
    async def test_final_view(self):
        runner = TaskRunner([
            TaskSpec(title="Build", task=failing("compiler exploded"), retry=1),
            TaskSpec(title="Deploy", task=Mock()),
        ], retry_delay=0)
        await runner.run()

        output = render(TaskListView(runner, show_timer=False))

        assert "✗ Build (retry 1/1)" in output
        assert "compiler exploded" in output
        assert "Summary: 0 passed, 1 failed, 1 pending (2 total)" in output

    @pytest.mark.asyncio
    async def test_skipped_and_timer(self):
        runner = TaskRunner([
            TaskSpec(title="Lint", task=Mock(), skip=True),
            TaskSpec(title="Test", task=Mock()),
        ])
        await runner.run()

        output = render(TaskListView(runner))

        assert "↓ Lint" in output
        assert "Skipped" in output
        assert "✓ Test (" in output
        assert "1 passed, 1 skipped" in output

    @pytest.mark.asyncio
    async def test_run_tasks_prints_summary(self):
        console = Console(file=io.StringIO(), width=80, color_system=None)

        result = await run_tasks([TaskSpec(title="Hello", task=Mock())], console=console)

        assert result.success
        assert "Summary: 1 passed (1 total)" in console.file.getvalue()
