"""Runs a prompt against the terminal: raw input, key decoding, live redraw."""

import asyncio
import logging
from typing import Optional

from prompt_toolkit.input import Input, create_input
from prompt_toolkit.key_binding import KeyPress
from rich.console import Console
from rich.live import Live

from .keys import decode_key_presses
from .prompts.base import BasePrompt
from .prompts.models import PromptResult

logger = logging.getLogger(__name__)

ESCAPE_TIMEOUT = 0.05


class TerminalSession:
    """Owns the terminal input while one prompt is active.

    Raw mode is entered when the prompt mounts and left when it unmounts.
    Input is read through prompt_toolkit, decoded into key events and fed to
    the prompt one at a time; every prompt redraw refreshes a rich ``Live``
    display. When the prompt closes, its one-line summary is printed.
    """

    def __init__(self,
                 console: Optional[Console] = None,
                 input: Optional[Input] = None,
                 escape_timeout: float = ESCAPE_TIMEOUT,
                 transient: bool = True,
                 show_summary: bool = True):
        self.console = console or Console()
        self.input = input
        self.escape_timeout = escape_timeout
        self.transient = transient
        self.show_summary = show_summary

    async def run(self, prompt: BasePrompt) -> PromptResult:
        """Mount ``prompt``, feed it keys until it finishes, return its result."""
        loop = asyncio.get_running_loop()
        inp = self.input or create_input()
        flush_handle: Optional[asyncio.TimerHandle] = None

        def dispatch(presses: list[KeyPress]) -> None:
            for event in decode_key_presses(presses):
                if prompt.status.is_terminal:
                    return
                prompt.handle_key(event)

        def flush_pending() -> None:
            # A lone Escape stays buffered until no further bytes arrive
            nonlocal flush_handle
            flush_handle = None
            dispatch(inp.flush_keys())

        def keys_ready() -> None:
            nonlocal flush_handle
            if flush_handle is not None:
                flush_handle.cancel()
                flush_handle = None
            dispatch(inp.read_keys())
            if inp.closed:
                logger.debug("Terminal input closed, cancelling prompt")
                dispatch(inp.flush_keys())
                prompt.cancel()
                return
            flush_handle = loop.call_later(self.escape_timeout, flush_pending)

        logger.debug(f"Running {prompt!r} on the terminal")
        with Live(prompt, console=self.console, auto_refresh=False, transient=self.transient) as live:
            unsubscribe = prompt.subscribe(live.refresh)
            prompt.mount()
            try:
                with inp.raw_mode(), inp.attach(keys_ready):
                    result = await prompt.wait()
            finally:
                if flush_handle is not None:
                    flush_handle.cancel()
                unsubscribe()
                prompt.unmount()

        if self.show_summary:
            self.console.print(prompt.render_summary())
        return result
