"""Console user interface."""

from .countdown_screen import CountdownScreen, render_snapshot

__all__ = [
    "CountdownScreen",
    "render_snapshot",
]
