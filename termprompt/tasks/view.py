"""Live task list display for the task runner."""

import logging
import time
from typing import Any, Iterable, Optional

from rich.console import Console, Group, RenderableType
from rich.live import Live
from rich.text import Text

from ..components import ProgressBar, Spinner
from ..theme import ThemeOverride, resolve_theme
from .models import RunResult, TaskSpec, TaskState, TaskStatus
from .runner import TaskLike, TaskRunner

logger = logging.getLogger(__name__)

SUMMARY_BAR_WIDTH = 30

STATUS_GLYPHS = {
    TaskStatus.PENDING: " ",
    TaskStatus.RUNNING: "↻",
    TaskStatus.SUCCESS: "✓",
    TaskStatus.ERROR: "✗",
    TaskStatus.SKIPPED: "↓",
}


def format_duration(ms: Optional[int]) -> str:
    """``123ms`` below one second, ``1.23s`` above; ``0s`` when nothing was measured."""
    if ms is None:
        return "0s"
    if ms < 1000:
        return f"{ms}ms"
    return f"{ms / 1000:.2f}s"


class TaskListView:
    """Renders a runner's task states, plus a summary line and progress bar."""

    def __init__(self, runner: TaskRunner, *, show_timer: bool = True, show_summary: bool = True,
                 spinner: Optional[Spinner] = None, theme: ThemeOverride = None):
        self.runner = runner
        self.show_timer = show_timer
        self.show_summary = show_summary
        self.theme = resolve_theme(theme)
        self.spinner = spinner or Spinner(theme=self.theme)

    def status_color(self, status: TaskStatus) -> str:
        colors = self.theme.colors
        return {
            TaskStatus.RUNNING: colors.primary,
            TaskStatus.SUCCESS: colors.success,
            TaskStatus.ERROR: colors.error,
            TaskStatus.SKIPPED: colors.warning,
        }.get(status, colors.muted)

    def render_task(self, spec: TaskSpec, state: TaskState) -> list[Text]:
        colors = self.theme.colors
        line = Text(f"{STATUS_GLYPHS[state.status]} {spec.title}", style=self.status_color(state.status))
        if state.retry_count > 0:
            line.append(f" (retry {state.retry_count}/{spec.retry})", style=f"{colors.warning} dim")
        if self.show_timer and state.start_time is not None:
            line.append(f" ({format_duration(state.duration_ms(self.runner_now()))})", style=f"{colors.muted} dim")
        if state.status is TaskStatus.RUNNING:
            line.append(" ")
            line.append_text(self.spinner.render())

        lines = [line]
        if state.status is TaskStatus.ERROR and state.error is not None:
            message = str(state.error) or type(state.error).__name__
            lines.append(Text(f"  {message}", style=colors.error))
        elif state.status is TaskStatus.SKIPPED:
            lines.append(Text("  Skipped", style=f"{colors.warning} dim"))
        return lines

    def runner_now(self) -> Optional[float]:
        return self.runner.finished_at if self.runner.finished else time.monotonic()

    def render_summary(self) -> list[RenderableType]:
        colors = self.theme.colors
        summary = self.runner.summary()
        line = Text("Summary:", style="bold")
        line.append(" ")
        line.append(f"{summary.success} passed", style=colors.success)
        for count, label, color in (
            (summary.failed, "failed", colors.error),
            (summary.skipped, "skipped", colors.warning),
            (summary.pending, "pending", colors.muted),
            (summary.running, "running", colors.primary),
        ):
            if count > 0:
                line.append(", ")
                line.append(f"{count} {label}", style=color)
        line.append(f" ({summary.total} total)", style=colors.muted)
        elapsed = format_duration(summary.duration_ms) if summary.duration_ms else "0s"
        line.append(f" in {elapsed}", style=colors.muted)
        bar = ProgressBar(summary.percent, width=SUMMARY_BAR_WIDTH, show_percentage=False, theme=self.theme)
        return [line, bar]

    def render(self) -> RenderableType:
        rows: list[RenderableType] = []
        for spec, state in zip(self.runner.tasks, self.runner.states):
            rows.extend(self.render_task(spec, state))
        summary = self.runner.summary()
        if self.show_summary and (self.runner.finished or summary.is_complete or summary.running > 0):
            rows.append(Text())
            rows.extend(self.render_summary())
        return Group(*rows)

    def __rich__(self) -> RenderableType:
        return self.render()


async def run_tasks(tasks: Iterable[TaskLike], *, console: Optional[Console] = None,
                    show_timer: bool = True, show_summary: bool = True,
                    spinner: str = "dots", spinner_speed: float = 0.15,
                    theme: ThemeOverride = None, **runner_options: Any) -> RunResult:
    """Run ``tasks`` while redrawing their states on the console.

    Keyword arguments not listed here go to ``TaskRunner``.
    """
    runner = TaskRunner(tasks, **runner_options)
    view = TaskListView(runner, show_timer=show_timer, show_summary=show_summary,
                        spinner=Spinner(type=spinner, speed=spinner_speed, theme=theme), theme=theme)
    console = console or Console()

    with Live(view, console=console, auto_refresh=False) as live:
        unsubscribe_states = runner.subscribe(lambda _: live.refresh())
        unsubscribe_frames = view.spinner.subscribe(lambda _: live.refresh())
        view.spinner.start()
        try:
            result = await runner.run()
        finally:
            await view.spinner.stop()
            unsubscribe_states()
            unsubscribe_frames()
        live.refresh()
    return result
