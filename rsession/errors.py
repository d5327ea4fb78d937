"""Errors raised by RExecutor.

Callers catch RExecutionError; the subclass tells whether R ran the command
and reported a failure, or the session itself failed.
"""

from __future__ import annotations


class RExecutionError(Exception):
    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause
        # Set when a cleanup step failed after this error was already raised
        self.cleanup_error: RExecutionError | None = None


class BackendEvaluationError(RExecutionError):
    """R evaluated the command and returned a try-error (or nothing at all)."""


class BackendTransportError(RExecutionError):
    """The session failed to deliver a command, decode a reply, or move a file."""

    def __init__(self, cause: BaseException):
        super().__init__(str(cause) or type(cause).__name__, cause=cause)
