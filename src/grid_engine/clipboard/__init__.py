"""Clipboard text codec, paste application, and the stateful clipboard engine."""

from .backends import ClipboardBackend, ClipboardUnavailableError, InMemoryClipboard
from .codec import CopyContext, compute_copy_text, parse_clipboard_text, serialize_range
from .engine import ClipboardEngine
from .paste import PasteResult, apply_paste, paste_target

__all__ = [
    "ClipboardEngine",
    "ClipboardBackend",
    "ClipboardUnavailableError",
    "InMemoryClipboard",
    "CopyContext",
    "compute_copy_text",
    "parse_clipboard_text",
    "serialize_range",
    "PasteResult",
    "apply_paste",
    "paste_target",
]
