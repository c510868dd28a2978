"""System clipboard access, abstracted so hosts can plug in their own."""

from __future__ import annotations

from typing import Optional, Protocol


class ClipboardUnavailableError(RuntimeError):
    """Raised when the system clipboard cannot be read or written."""

    def __init__(self, message: str, *, operation: Optional[str] = None) -> None:
        super().__init__(message)
        self.operation = operation


class ClipboardBackend(Protocol):
    async def write_text(self, text: str) -> None: ...

    async def read_text(self) -> str: ...


class InMemoryClipboard:
    """Process-local clipboard; ``available=False`` simulates a denied clipboard."""

    def __init__(self, text: str = "", *, available: bool = True) -> None:
        self.text = text
        self.available = available

    async def write_text(self, text: str) -> None:
        if not self.available:
            raise ClipboardUnavailableError("Clipboard is not writable", operation="write")
        self.text = text

    async def read_text(self) -> str:
        if not self.available:
            raise ClipboardUnavailableError("Clipboard is not readable", operation="read")
        return self.text


__all__ = ["ClipboardBackend", "ClipboardUnavailableError", "InMemoryClipboard"]
