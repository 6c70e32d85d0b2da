"""Error types raised by the terminal and its pricing core."""

from __future__ import annotations


class PosTerminalError(Exception):
    """Base class for terminal errors."""


class InvalidArgumentError(PosTerminalError, ValueError):
    """Input was rejected at the point it was supplied."""


class NotFoundError(PosTerminalError, LookupError):
    """A product code is not part of the configured catalog."""

    def __init__(self, code: str) -> None:
        super().__init__(f"Product code '{code}' not found.")
        self.code = code


class InvalidStateError(PosTerminalError, RuntimeError):
    """The operation is not allowed in the terminal's current state."""
