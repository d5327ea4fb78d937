"""RExecutor - command recipes over a caller-owned R session.

Every expression goes through a try() envelope so that R errors come back
as values instead of breaking the session. Files copied into the session's
working directory are unlinked before the operation returns, on success
and failure alike.

Architecture:
    caller → RExecutor (recipes, error classification)
           → FileShuttle (byte transfer)
           → RSession (wire, owned by caller)

Files in the working directory are not namespaced: two operations on one
session that use the same remote filename (notably the workspace image)
overwrite each other. Callers serialize use per session.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from typing import BinaryIO

from rsession.config import ExecutorConfig
from rsession.errors import BackendEvaluationError, BackendTransportError, RExecutionError
from rsession.formatter import flatten_filename, quote, string_vector
from rsession.interfaces.session import RReply, RSession, SessionError
from rsession.shuttle import ByteSource, FileShuttle

logger = logging.getLogger(__name__)

TRY_ERROR_CLASS = "try-error"


@contextmanager
def _transport_errors() -> Iterator[None]:
    try:
        yield
    except (SessionError, OSError) as exc:
        raise BackendTransportError(exc) from exc


class RExecutor:
    """Stateless between calls; safe to share across sessions."""

    def __init__(self, config: ExecutorConfig | None = None, shuttle: FileShuttle | None = None):
        self.config = config or ExecutorConfig()
        self.shuttle = shuttle or FileShuttle(self.config.transfer_buffer_size)

    def evaluate(self, cmd: str, session: RSession) -> RReply:
        """Evaluate ``cmd`` inside ``try({...})`` and return the reply.

        Raises:
            BackendEvaluationError: R returned a try-error, or no reply
            BackendTransportError: The session failed to deliver or decode
        """
        logger.debug("Evaluate %s", cmd)
        with _transport_errors():
            result = session.eval(f"try({{{cmd}}})")
            if result is None:
                raise BackendEvaluationError("Eval returned null")
            if result.inherits(TRY_ERROR_CLASS):
                raise BackendEvaluationError("; ".join(s.strip() for s in result.as_strings()))
        return result

    # ==================== Workspace ====================

    @contextmanager
    def open_snapshot(self, session: RSession) -> Iterator[BinaryIO]:
        """Save the workspace image and yield it as a readable stream.

        The stream is closed on exit and must not be used afterwards.
        """
        logger.debug("Save workspace")
        self.evaluate("base::save.image()", session)
        with _transport_errors():
            stream = session.open_file(self.config.workspace_file)
        try:
            yield stream
        except BaseException as exc:
            try:
                with _transport_errors():
                    stream.close()
            except RExecutionError as close_exc:
                logger.warning("Failed to close '%s' after error: %s", self.config.workspace_file, close_exc)
                if isinstance(exc, RExecutionError):
                    exc.cleanup_error = close_exc
            raise
        with _transport_errors():
            stream.close()

    def save_snapshot(self, session: RSession, sink: Callable[[BinaryIO], object]) -> None:
        """Hand the saved workspace image to ``sink`` as a stream."""
        with self.open_snapshot(session) as stream:
            sink(stream)

    def load_snapshot(self, session: RSession, source: ByteSource, environment: str) -> None:
        """Load a workspace image into ``environment``.

        ``environment`` is an R expression (e.g. ``globalenv()``) and is
        inserted into the command unquoted.
        """
        logger.debug("Load workspace into %s", environment)
        remote = self.config.workspace_file
        self._run_with_file(
            session,
            source,
            remote,
            f"base::load(file={quote(remote)}, envir={environment})",
        )

    # ==================== Data ====================

    def load_table(
        self,
        session: RSession,
        source: ByteSource,
        filename: str,
        symbol: str,
        variables: Sequence[str] = (),
    ) -> None:
        """Read a parquet file into ``symbol``, optionally keeping only ``variables``.

        ``variables`` is a list of column names, not a single string. Requested
        variables missing from the file are skipped.
        """
        if isinstance(variables, str):
            raise TypeError("variables must be a sequence of column names, not a str")
        logger.debug("Load table from file %s into %s", filename, symbol)
        remote = flatten_filename(filename)
        if variables:
            col_select = f"tidyselect::any_of({string_vector(variables)})"
            read = f"arrow::read_parquet({quote(remote)}, col_select = {col_select})"
        else:
            read = f"arrow::read_parquet({quote(remote)})"
        self._run_with_file(session, source, remote, _assign(symbol, read))

    def load_resource(self, session: RSession, source: ByteSource, filename: str, symbol: str) -> None:
        """Read a serialized resource into ``symbol`` as a resource client."""
        logger.debug("Load resource from file %s into %s", filename, symbol)
        remote = flatten_filename(filename)
        read = f"resourcer::newResourceClient(base::readRDS({quote(remote)}))"
        self._run_with_file(session, source, remote, _assign(symbol, read))

    def _run_with_file(self, session: RSession, source: ByteSource, remote: str, cmd: str) -> None:
        unlink = f"base::unlink({quote(remote)})"
        try:
            with _transport_errors():
                self.shuttle.copy(session, source, remote)
            self.evaluate(cmd, session)
        except BaseException as exc:
            try:
                self.evaluate(unlink, session)
            except RExecutionError as cleanup_exc:
                logger.warning("Failed to remove '%s' after error: %s", remote, cleanup_exc)
                if isinstance(exc, RExecutionError):
                    exc.cleanup_error = cleanup_exc
            raise
        self.evaluate(unlink, session)


def _assign(symbol: str, value: str) -> str:
    # is.null() keeps the value itself out of the reply
    return f"is.null(base::assign({quote(symbol)}, value={{{value}}}))"
