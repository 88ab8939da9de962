"""Base prompt engine.

Owns the lifecycle shared by every prompt variant:

- the ``message`` / ``required`` / ``validate`` contract
- submit and cancel handling with a re-entrancy guard
- inline error display, cleared whenever the user edits the value
- interception of Escape / Enter before keys reach the variant

State machine::

    idle -> editing -> validating -> submitted
                  ^         |
                  +---------+  (validation failed)
    any non-terminal state -> cancelled
"""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable, Coroutine
from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar, Union

from rich import box
from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.text import Text

from ..keys import KeyEvent
from ..state import CancellationToken, EventEmitter, State
from ..state.emitter import Unsubscribe
from ..theme import Theme, ThemeOverride, resolve_theme
from .models import PromptResult, PromptState, PromptStatus

logger = logging.getLogger(__name__)

T = TypeVar("T")

ValidationOutcome = Optional[str]
Validator = Callable[[Any], Union[ValidationOutcome, Awaitable[ValidationOutcome]]]

REQUIRED_MESSAGE = "This field is required"
FOOTER_HINT = "Press Enter to submit, Esc to cancel"


def is_empty(value: Any) -> bool:
    """None, blank strings and empty collections count as empty."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, frozenset, dict)):
        return len(value) == 0
    return False


@dataclass
class RenderContext:
    """What a variant needs to draw its content area."""

    value: Any
    set_value: Callable[[Any], None]
    error: Optional[str]
    focused: bool
    theme: Theme


class BasePrompt(Generic[T]):
    """Shared prompt lifecycle; variants override the hooks below.

    Hooks:
        handle_input: interpret a key that is not Enter/Escape
        check_value: variant-level validation run before ``validate``
        accept: called with a validated value; finishes the prompt by default
        render_content: draw the content area
        format_value: text shown in the one-line summary after submit
    """

    result_class: type[PromptResult] = PromptResult
    required_message = REQUIRED_MESSAGE

    def __init__(self,
                 message: str,
                 *,
                 initial_value: Optional[T] = None,
                 required: bool = False,
                 validate: Optional[Validator] = None,
                 theme: ThemeOverride = None,
                 on_submit: Optional[Callable[[T], Any]] = None,
                 on_cancel: Optional[Callable[[], Any]] = None):
        """Initialize the prompt.

        Args:
            message: Prompt text shown above the input
            initial_value: Starting value
            required: Refuse to submit an empty value
            validate: Callable returning an error message (or None), sync
                or async; raising an exception counts as a failure too
            theme: Partial theme override merged over the default theme
            on_submit: Called once with the submitted value
            on_cancel: Called once when the prompt is cancelled
        """
        self.message = message
        self.required = required
        self.validate = validate
        self.theme = resolve_theme(theme)
        self.on_submit = on_submit
        self.on_cancel = on_cancel

        self.state: State[PromptState] = State(PromptState(value=initial_value))
        self.result: Optional[PromptResult] = None

        self._renders = EventEmitter()
        self._token = CancellationToken(name=f"{type(self).__name__}:{message}")
        self._edit_generation = 0
        self._tasks: set[asyncio.Task] = set()
        self._done: Optional[asyncio.Future] = None
        self._mounted = False

        self.state.subscribe(lambda _: self.invalidate())

    # ------------------------------------------------------------------
    # State accessors

    @property
    def value(self) -> Optional[T]:
        return self.state.get().value

    @property
    def error(self) -> Optional[str]:
        return self.state.get().error

    @property
    def status(self) -> PromptStatus:
        return self.state.get().status

    @property
    def token(self) -> CancellationToken:
        return self._token

    def set_value(self, value: Any) -> None:
        """Record a user edit: store the value and clear any shown error."""
        if self.status.is_terminal:
            return
        self._edit_generation += 1
        self.state.update(value=value, error=None, status=PromptStatus.EDITING)

    def set_error(self, message: Optional[str]) -> None:
        self.state.update(error=message)

    def set_focus(self, focused: bool) -> None:
        self.state.update(focused=focused)

    # ------------------------------------------------------------------
    # Redraw notifications

    def subscribe(self, handler: Callable[[], Any]) -> Unsubscribe:
        """Call ``handler`` whenever the prompt needs to be redrawn."""
        return self._renders.on("render", handler)

    def invalidate(self) -> None:
        self._renders.emit("render")

    # ------------------------------------------------------------------
    # Lifecycle

    def mount(self) -> None:
        """Attach the prompt to the running event loop."""
        if self._mounted:
            return
        self._mounted = True
        loop = asyncio.get_running_loop()
        if self._done is None:
            self._done = loop.create_future()
            if self.result is not None:
                self._done.set_result(self.result)
        logger.debug(f"Mounted {type(self).__name__}: {self.message}")
        self.on_mount()

    def unmount(self) -> None:
        """Cancel everything the prompt started; safe to call twice."""
        if not self._mounted:
            return
        self._mounted = False
        self._token.cancel()
        current = asyncio.current_task()
        for task in list(self._tasks):
            if task is not current and not task.done():
                task.cancel()
        self.on_unmount()
        logger.debug(f"Unmounted {type(self).__name__}: {self.message}")

    def on_mount(self) -> None:
        pass

    def on_unmount(self) -> None:
        pass

    @property
    def mounted(self) -> bool:
        return self._mounted

    async def wait(self) -> PromptResult:
        """Wait for the prompt to be submitted or cancelled."""
        if self.result is not None:
            return self.result
        if self._done is None:
            self._done = asyncio.get_running_loop().create_future()
        return await self._done

    async def drain(self) -> None:
        """Wait for background work (submissions, fetches) to settle."""
        while True:
            pending = [task for task in self._tasks if not task.done()]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)

    def spawn(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task:
        """Run ``coro`` as a task owned by this prompt."""
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._task_done)
        return task

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"Background task of {type(self).__name__} failed: {exc!r}")

    # ------------------------------------------------------------------
    # Keyboard

    def handle_key(self, key: KeyEvent) -> None:
        """Process one key press."""
        if self.status.is_terminal:
            return
        if key.is_("escape") or (key.ctrl and key.char == "c"):
            self.cancel()
            return
        if key.is_("return"):
            self.spawn(self.submit())
            return
        self.handle_input(key)

    def handle_input(self, key: KeyEvent) -> None:
        pass

    # ------------------------------------------------------------------
    # Submission

    def submission_value(self) -> Optional[T]:
        return self.value

    async def check_value(self, value: Any) -> ValidationOutcome:
        return None

    async def submit(self) -> bool:
        """Validate the current value and submit it.

        Returns:
            True if the prompt was submitted.
        """
        current = self.state.get()
        if current.submitting or current.status.is_terminal:
            return False

        token = self._token
        generation = self._edit_generation
        value = self.submission_value()
        self.state.update(submitting=True, status=PromptStatus.VALIDATING)

        try:
            error = await self._run_checks(value)
        except Exception as e:
            logger.warning(f"Validation of {self.message!r} raised: {e!r}")
            error = str(e) or "An unknown error occurred"

        if token.cancelled:
            logger.debug(f"Discarding validation result for cancelled prompt {self.message!r}")
            return False
        if generation != self._edit_generation:
            # Value changed while validating; the verdict is stale
            self.state.update(submitting=False, status=PromptStatus.EDITING)
            return False
        if error:
            self.state.update(error=error, submitting=False, status=PromptStatus.EDITING)
            return False
        if value is None:
            self.state.update(submitting=False, status=PromptStatus.EDITING)
            return False

        self.state.update(submitting=False)
        return self.accept(value)

    async def _run_checks(self, value: Any) -> ValidationOutcome:
        if self.required and is_empty(value):
            return self.required_message
        error = await self.check_value(value)
        if error:
            return error
        if self.validate is not None and value is not None:
            outcome = self.validate(value)
            if inspect.isawaitable(outcome):
                outcome = await outcome
            if outcome:
                return str(outcome)
        return None

    def accept(self, value: T) -> bool:
        """Finish the prompt with a validated value."""
        self._finish(self.make_result(value), PromptStatus.SUBMITTED)
        if self.on_submit is not None:
            self.on_submit(value)
        return True

    def cancel(self) -> None:
        """Cancel immediately; in-flight validation results are discarded."""
        if self.status.is_terminal:
            return
        self._token.cancel()
        self._finish(self.make_result(None, cancelled=True), PromptStatus.CANCELLED)
        if self.on_cancel is not None:
            self.on_cancel()

    def make_result(self, value: Any, cancelled: bool = False) -> PromptResult:
        if cancelled:
            return self.result_class(cancelled=True)
        return self.result_class(value=value)

    def _finish(self, result: PromptResult, status: PromptStatus) -> None:
        self.result = result
        self.state.update(status=status, submitting=False)
        logger.debug(f"Prompt {self.message!r} finished: {status.value}")
        if self._done is not None and not self._done.done():
            self._done.set_result(result)

    async def ask(self, session=None) -> PromptResult:
        """Run the prompt on the terminal and return its result."""
        from ..terminal import TerminalSession

        session = session or TerminalSession()
        return await session.run(self)

    # ------------------------------------------------------------------
    # Rendering

    def display_message(self) -> str:
        return self.message

    def render_content(self, ctx: RenderContext) -> RenderableType:
        return Text("" if ctx.value is None else str(ctx.value))

    def format_value(self, value: Any) -> str:
        return "" if value is None else str(value)

    def render(self) -> RenderableType:
        state = self.state.get()
        colors = self.theme.colors

        header = Text(self.display_message(), style=self.theme.typography.message)
        if self.required:
            header.append("*", style=colors.error)
        if state.error:
            header.append(f" ({state.error})", style=colors.error)

        ctx = RenderContext(
            value=state.value,
            set_value=self.set_value,
            error=state.error,
            focused=state.focused,
            theme=self.theme,
        )
        if state.error:
            border = colors.border.error
        elif state.focused:
            border = colors.border.focus
        else:
            border = colors.border.default
        frame = Panel(
            self.render_content(ctx),
            box=getattr(box, self.theme.border_style.upper(), box.ROUNDED),
            border_style=border,
            padding=(0, 1),
            expand=False,
        )
        footer = Text(FOOTER_HINT, style=colors.text.secondary)
        return Group(header, frame, footer)

    def __rich__(self) -> RenderableType:
        return self.render()

    def render_summary(self) -> Text:
        """One line left behind after the prompt closes."""
        colors = self.theme.colors
        if self.status is PromptStatus.CANCELLED:
            line = Text("✖ ", style=colors.error)
            line.append(self.message, style=colors.muted)
            return line
        line = Text("✔ ", style=colors.success)
        line.append(self.message, style=self.theme.typography.message)
        if self.result is not None:
            shown = self.format_value(getattr(self.result, "value", None))
            if shown:
                line.append(" · ", style=colors.muted)
                line.append(shown, style=colors.primary)
        return line

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message={self.message!r}, status={self.status.value})"
