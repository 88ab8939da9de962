"""Rendering primitives: spinner, progress bar, table."""

from .spinner import SPINNERS, Spinner, spinner_frames
from .progress import ProgressBar, round_half_up
from .table import Table, truncate

__all__ = [
    "SPINNERS",
    "Spinner",
    "spinner_frames",
    "ProgressBar",
    "round_half_up",
    "Table",
    "truncate",
]
