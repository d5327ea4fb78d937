"""In-memory fake R session for unit tests.

Records every call in ``trace`` as ``(op, arg)`` tuples. Supports:
eval with canned replies, save.image / unlink side effects, remote files,
and injected faults on create/open/write/close.
"""

from __future__ import annotations

import io
import re

from rsession.interfaces.session import EvalReply, RReply, RSession

_UNLINK_RE = re.compile(r"base::unlink\('(.*)'\)")


def try_error(*messages: str) -> EvalReply:
    return EvalReply(value=list(messages), classes=["try-error"])


class FakeRemoteWriter(io.BytesIO):
    def __init__(self, session: FakeRSession, name: str):
        super().__init__()
        self._session = session
        self._name = name

    def write(self, b) -> int:
        self._session.write_sizes.append(len(b))
        if self._session.fail_write is not None:
            raise self._session.fail_write
        return super().write(b)

    def close(self) -> None:
        if not self.closed:
            self._session.files[self._name] = self.getvalue()
            self._session.trace.append(("close", self._name))
        super().close()


class FakeRemoteReader(io.BytesIO):
    def __init__(self, session: FakeRSession, name: str, data: bytes):
        super().__init__(data)
        self._session = session
        self._name = name
        self.read_sizes: list[int] = []

    def read(self, size: int | None = -1) -> bytes:
        self.read_sizes.append(-1 if size is None else size)
        return super().read(size)

    def close(self) -> None:
        fault = self._session.fail_close
        if fault is not None and not self.closed:
            # fails once; a later close succeeds
            self._session.fail_close = None
            raise fault
        if not self.closed:
            self._session.trace.append(("close", self._name))
        super().close()


class FakeRSession(RSession):
    def __init__(self, replies: dict[str, object] | None = None, workspace: bytes = b""):
        # substring of the evaluated text -> RReply, None, or an exception to raise
        self.replies = dict(replies or {})
        self.workspace = workspace
        self.trace: list[tuple[str, str]] = []
        self.files: dict[str, bytes] = {}
        self.write_sizes: list[int] = []
        self.readers: list[FakeRemoteReader] = []
        self.fail_create: Exception | None = None
        self.fail_open: Exception | None = None
        self.fail_write: BaseException | None = None
        self.fail_close: Exception | None = None

    @property
    def evaluated(self) -> list[str]:
        return [arg for op, arg in self.trace if op == "eval"]

    def eval(self, expr: str) -> RReply | None:
        self.trace.append(("eval", expr))
        for key, reply in self.replies.items():
            if key in expr:
                if isinstance(reply, BaseException):
                    raise reply
                return reply
        if "base::save.image()" in expr:
            self.files[".RData"] = self.workspace
        match = _UNLINK_RE.search(expr)
        if match:
            self.files.pop(match.group(1), None)
        return EvalReply(value=[False], classes=["logical"])

    def open_file(self, name: str) -> FakeRemoteReader:
        self.trace.append(("open_file", name))
        if self.fail_open is not None:
            raise self.fail_open
        if name not in self.files:
            raise OSError(f"No such file: {name}")
        reader = FakeRemoteReader(self, name, self.files[name])
        self.readers.append(reader)
        return reader

    def create_file(self, name: str) -> FakeRemoteWriter:
        self.trace.append(("create_file", name))
        if self.fail_create is not None:
            raise self.fail_create
        return FakeRemoteWriter(self, name)
