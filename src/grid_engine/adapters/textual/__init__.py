"""Textual host integration."""

from .controller import (
    CLIPBOARD_ACTIONS,
    GridUIHooks,
    KeyOutcome,
    TextualGridAdapter,
    render_grid,
)

__all__ = [
    "TextualGridAdapter",
    "GridUIHooks",
    "KeyOutcome",
    "CLIPBOARD_ACTIONS",
    "render_grid",
]
