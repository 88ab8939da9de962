"""Cancellation tokens for asynchronous work started by prompts and runners."""

import logging
from typing import Optional

logger = logging.getLogger(__name__)


class CancellationToken:
    """One-way flag checked before an async operation applies its result.

    Tokens can be chained: a child created with ``child()`` is cancelled when
    its parent is.
    """

    def __init__(self, parent: Optional["CancellationToken"] = None, name: str = ""):
        self._parent = parent
        self._cancelled = False
        self.name = name

    @property
    def cancelled(self) -> bool:
        if self._cancelled:
            return True
        return self._parent is not None and self._parent.cancelled

    def cancel(self) -> None:
        if not self._cancelled:
            self._cancelled = True
            logger.debug(f"Cancelled token {self.name or id(self)}")

    def child(self, name: str = "") -> "CancellationToken":
        return CancellationToken(parent=self, name=name)

    def __repr__(self) -> str:
        return f"CancellationToken(name={self.name!r}, cancelled={self.cancelled})"
