"""Stream host bytes into a file in the R session's working directory."""

from __future__ import annotations

import io
import logging
import os
import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import BinaryIO, Union

from rsession.interfaces.session import RSession

logger = logging.getLogger(__name__)

RFILE_BUFFER_SIZE = 65536

ByteSource = Union[bytes, str, os.PathLike, BinaryIO]

_UNITS = (("EB", 1 << 60), ("PB", 1 << 50), ("TB", 1 << 40), ("GB", 1 << 30), ("MB", 1 << 20), ("KB", 1 << 10))


def display_size(size: int) -> str:
    """Human-readable size, truncated to whole units (``1 MB`` for 1.9 MiB)."""
    for unit, factor in _UNITS:
        if size >= factor:
            return f"{size // factor} {unit}"
    return f"{size} bytes"


@contextmanager
def open_source(source: ByteSource) -> Iterator[BinaryIO]:
    """Yield a readable binary stream for ``source``.

    Paths are opened and closed here. Caller-supplied streams are left open.
    """
    if isinstance(source, (bytes, bytearray, memoryview)):
        yield io.BytesIO(source)
    elif isinstance(source, (str, os.PathLike)):
        with open(source, "rb") as f:
            yield f
    else:
        yield source


class FileShuttle:
    """Copies a byte source into the session with fixed-size writes."""

    def __init__(self, buffer_size: int = RFILE_BUFFER_SIZE):
        if buffer_size <= 0:
            raise ValueError(f"buffer_size must be positive, got {buffer_size}")
        self.buffer_size = buffer_size

    def copy(self, session: RSession, source: ByteSource, remote_name: str) -> int:
        """Write every byte of ``source`` to ``remote_name``. Returns bytes copied.

        A failure part-way may leave a partial remote file behind.
        """
        logger.info("Copying '%s' to R...", remote_name)
        started = time.perf_counter()
        size = 0
        with open_source(source) as src, session.create_file(remote_name) as dst:
            while True:
                chunk = src.read(self.buffer_size)
                if not chunk:
                    break
                dst.write(chunk)
                size += len(chunk)

        if logger.isEnabledFor(logging.DEBUG):
            elapsed_us = max(int((time.perf_counter() - started) * 1_000_000), 1)
            logger.debug(
                "Copied %s in %dms [%s MB/s]",
                display_size(size),
                elapsed_us // 1000,
                f"{size / elapsed_us:.3f}",
            )
        return size
