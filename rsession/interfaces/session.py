"""R session abstraction consumed by the executor.

Separates the wire mechanism (Rserve client, test fake, ...) from the
command recipes in rsession.executor.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, BinaryIO


class SessionError(Exception):
    """Session could not deliver a command or a file operation."""


class ReplyDecodeError(SessionError):
    """Reply arrived but could not be decoded into the requested shape."""


class RReply(ABC):
    """Reply to a single evaluation."""

    @abstractmethod
    def inherits(self, klass: str) -> bool:
        """True if the reply value carries R class ``klass``."""
        ...

    @abstractmethod
    def as_strings(self) -> list[str]:
        """Reply value as a character vector.

        Raises:
            ReplyDecodeError: If the value is not coercible to strings
        """
        ...


@dataclass
class EvalReply(RReply):
    """Plain reply value with its R class attribute."""

    value: Any = None
    classes: list[str] = field(default_factory=list)

    def inherits(self, klass: str) -> bool:
        return klass in self.classes

    def as_strings(self) -> list[str]:
        if isinstance(self.value, str):
            return [self.value]
        if isinstance(self.value, (list, tuple)) and all(isinstance(v, str) for v in self.value):
            return list(self.value)
        raise ReplyDecodeError(f"Cannot decode {type(self.value).__name__} as strings")


class RSession(ABC):
    """Open channel to one R backend.

    Owned by the caller. Implementations are not expected to be thread-safe;
    callers serialize use per session.
    """

    @abstractmethod
    def eval(self, expr: str) -> RReply | None:
        """Evaluate ``expr`` and return the reply (None if the backend sent none).

        Raises:
            SessionError: If the command could not be delivered or decoded
            OSError: On socket failure
        """
        ...

    @abstractmethod
    def open_file(self, name: str) -> BinaryIO:
        """Open file ``name`` in the session's working directory for reading."""
        ...

    @abstractmethod
    def create_file(self, name: str) -> BinaryIO:
        """Create (or truncate) file ``name`` in the session's working directory for writing."""
        ...
