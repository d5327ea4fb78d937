"""Render Python values as R source literals."""

from __future__ import annotations

from collections.abc import Iterable


def quote(value: str) -> str:
    """Single-quoted R string literal."""
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def string_vector(values: Iterable[str]) -> str:
    """R character vector: ``c('a','b')``."""
    return "c(" + ",".join(quote(v) for v in values) + ")"


def flatten_filename(filename: str) -> str:
    # R working directory is a flat scratch area
    return filename.replace("/", "_")
