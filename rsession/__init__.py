"""rsession - command and file orchestration over an R session.

Usage:
    from rsession import ExecutorConfig, create_executor

    executor = create_executor(ExecutorConfig.load())
    executor.load_table(session, "data/core.parquet", "core/nonrep.parquet", "D", ["age"])
    executor.evaluate("nrow(D)", session)

The session is any RSession implementation, opened and closed by the caller.
"""

from __future__ import annotations

from rsession.config import ExecutorConfig
from rsession.errors import BackendEvaluationError, BackendTransportError, RExecutionError
from rsession.executor import RExecutor
from rsession.interfaces import EvalReply, ReplyDecodeError, RReply, RSession, SessionError
from rsession.shuttle import FileShuttle


def create_executor(config: ExecutorConfig | None = None) -> RExecutor:
    """Factory: create an RExecutor from config (defaults if omitted)."""
    config = config or ExecutorConfig()
    return RExecutor(config=config, shuttle=FileShuttle(config.transfer_buffer_size))


__all__ = [
    "RExecutor",
    "FileShuttle",
    "ExecutorConfig",
    "create_executor",
    "RSession",
    "RReply",
    "EvalReply",
    "SessionError",
    "ReplyDecodeError",
    "RExecutionError",
    "BackendEvaluationError",
    "BackendTransportError",
]
