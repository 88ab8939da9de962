"""Search-as-you-type prompt backed by a sync or async option source."""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Any, Iterable, Optional, Union

from pydantic import BaseModel, ConfigDict
from rich.console import Group, RenderableType
from rich.text import Text

from ..keys import KeyEvent
from ..state import CancellationToken, Debouncer, State
from ..state.emitter import Unsubscribe
from .base import RenderContext
from .models import AutocompleteResult, OptionLike, SelectOption, to_options
from .navigation import clamp
from .select import option_line
from .text import TextPrompt

logger = logging.getLogger(__name__)

Source = Callable[[str], Union[Iterable[OptionLike], Awaitable[Iterable[OptionLike]]]]

SEARCH_HINT = "↑/↓ to navigate, Tab to complete, Enter to select, Esc to cancel"


class Completions(BaseModel):
    """Dropdown state derived from the debounced query."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    options: tuple[SelectOption, ...] = ()
    index: int = 0
    open: bool = False
    loading: bool = False
    errors: tuple[str, ...] = ()

    @property
    def highlighted(self) -> Optional[SelectOption]:
        if 0 <= self.index < len(self.options):
            return self.options[self.index]
        return None


class AutocompletePrompt(TextPrompt):
    """Type a query, pick one of the options ``source`` returns for it.

    The session value is the raw query. Lookups run on the debounced query;
    a lookup started earlier never overwrites the results of a later one.
    Enter submits the highlighted option's value, or the query itself when
    there is nothing to highlight.
    """

    result_class = AutocompleteResult

    def __init__(self, message: str, source: Source, *, limit: int = 10,
                 min_query_length: int = 0, debounce: float = 0.3,
                 empty_text: str = "No matches found", **kwargs):
        super().__init__(message, **kwargs)
        self.source = source
        self.limit = limit
        self.min_query_length = min_query_length
        self.debounce = debounce
        self.empty_text = empty_text
        self.completions: State[Completions] = State(Completions())
        self.completions.subscribe(lambda _: self.invalidate())
        self.debouncer: Optional[Debouncer[str]] = None
        self._fetch_token: Optional[CancellationToken] = None
        self._debounced_unsubscribe: Optional[Unsubscribe] = None
        self._from_query = False

    @property
    def query(self) -> str:
        return self.value or ""

    @property
    def options(self) -> tuple[SelectOption, ...]:
        return self.completions.get().options

    @property
    def loading(self) -> bool:
        return self.completions.get().loading

    @property
    def is_open(self) -> bool:
        return self.completions.get().open

    @property
    def errors(self) -> tuple[str, ...]:
        return self.completions.get().errors

    @property
    def selected_index(self) -> int:
        return self.completions.get().index

    # ------------------------------------------------------------------
    # Lifecycle

    def on_mount(self) -> None:
        self.debouncer = Debouncer(self.query, self.debounce)
        # Replay runs the lookup for the initial query
        self._debounced_unsubscribe = self.debouncer.subscribe(self._on_debounced)

    def on_unmount(self) -> None:
        if self.debouncer is not None:
            self.debouncer.cancel()
        if self._debounced_unsubscribe is not None:
            self._debounced_unsubscribe()
            self._debounced_unsubscribe = None
        if self._fetch_token is not None:
            self._fetch_token.cancel()

    # ------------------------------------------------------------------
    # Query and lookups

    def set_value(self, value: Any) -> None:
        if self.status.is_terminal:
            return
        query = value or ""
        super().set_value(query)
        changes: dict[str, Any] = {"errors": ()}
        if len(query) < self.min_query_length:
            changes["open"] = False
        self.completions.update(**changes)
        if self.debouncer is not None:
            self.debouncer.set(query)

    def _on_debounced(self, query: str) -> None:
        if len(query) < self.min_query_length:
            if self._fetch_token is not None:
                self._fetch_token.cancel()
            self.completions.update(options=(), index=0, open=False, loading=False)
            return
        self.request_options(query)

    def request_options(self, query: str) -> asyncio.Task:
        """Start a lookup for ``query``, superseding any lookup in flight."""
        if self._fetch_token is not None:
            self._fetch_token.cancel()
        token = self.token.child(f"lookup:{query}")
        self._fetch_token = token
        self.completions.update(loading=True)
        return self.spawn(self._fetch(query, token))

    async def _fetch(self, query: str, token: CancellationToken) -> None:
        try:
            found = self.source(query)
            if inspect.isawaitable(found):
                found = await found
            options = tuple(to_options(found or ()))[:self.limit]
        except Exception as e:
            if token.cancelled:
                return
            logger.warning(f"Option source failed for query {query!r}: {e!r}")
            self.completions.update(errors=(str(e) or type(e).__name__,), options=(), open=False, loading=False)
            return
        if token.cancelled:
            logger.debug(f"Discarding stale options for query {query!r}")
            return
        self.completions.update(options=options, index=0, open=True, errors=(), loading=False)

    # ------------------------------------------------------------------
    # Keys

    def handle_input(self, key: KeyEvent) -> None:
        state = self.completions.get()
        if key.is_("up"):
            self.completions.update(index=max(0, state.index - 1))
        elif key.is_("down"):
            if not state.open and len(self.query) >= self.min_query_length:
                self.completions.update(open=True)
            elif state.options:
                self.completions.update(index=clamp(state.index + 1, 0, len(state.options) - 1))
        elif key.is_("tab"):
            if state.open and state.highlighted is not None:
                label = state.highlighted.label
                self._edit(label, len(label))
                self.completions.update(open=False)
        else:
            super().handle_input(key)

    # ------------------------------------------------------------------
    # Submission

    def submission_value(self) -> Any:
        highlighted = self.completions.get().highlighted
        if highlighted is not None:
            self._from_query = False
            return highlighted.value
        self._from_query = True
        return self.query or None

    def make_result(self, value: Any, cancelled: bool = False) -> AutocompleteResult:
        if cancelled:
            return AutocompleteResult(cancelled=True)
        return AutocompleteResult(value=value, from_query=self._from_query)

    def format_value(self, value: Any) -> str:
        if value is None:
            return ""
        if not self._from_query:
            for option in self.options:
                if option.value == value:
                    return option.label
        return str(value)

    # ------------------------------------------------------------------
    # Rendering

    def render_content(self, ctx: RenderContext) -> RenderableType:
        colors = ctx.theme.colors
        state = self.completions.get()

        search = Text("🔍 ")
        if self.query or ctx.focused:
            search.append_text(super().render_content(ctx))
        if not self.query:
            search.append("Type to search...", style=colors.muted)
        rows: list[RenderableType] = [search]

        if state.loading:
            rows.append(Text("Loading...", style=colors.text.secondary))
        if state.errors:
            rows.append(Text(state.errors[0], style=colors.error))
        if state.open and not state.options and not state.loading:
            rows.append(Text(self.empty_text, style=colors.text.secondary))
        if state.open:
            for index, option in enumerate(state.options):
                highlighted = index == state.index
                rows.append(option_line(option, " ", highlighted, ctx.focused, ctx.theme))
        if ctx.focused:
            rows.append(Text(SEARCH_HINT, style=colors.text.secondary))
        return Group(*rows)
