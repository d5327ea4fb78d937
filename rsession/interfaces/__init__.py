"""Session interfaces - ABC + data classes for the R session contract."""

from rsession.interfaces.session import (
    EvalReply,
    ReplyDecodeError,
    RReply,
    RSession,
    SessionError,
)

__all__ = [
    "RSession",
    "RReply",
    "EvalReply",
    "SessionError",
    "ReplyDecodeError",
]
