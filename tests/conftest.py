"""Shared pytest fixtures for shader-wrangler tests.

Provides a recording fake compiler, helpers to lay out shader trees under
``tmp_path``, and structlog configuration for log capture.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

import pytest
import structlog
from fakes import VALID_SOURCE, RecordingFactory

from wrangler_core.config import RunConfiguration
from wrangler_core.kinds import ShaderKind


@pytest.fixture(autouse=True)
def configure_structlog_for_tests() -> None:
    """Configure structlog to output to stdout for test capture."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,  # Important for test isolation
    )


@pytest.fixture
def compiler_factory() -> RecordingFactory:
    """Return a fresh recording compiler factory."""
    return RecordingFactory()


@pytest.fixture
def search_root(tmp_path: Path) -> Path:
    """Return an empty shader source directory."""
    root = tmp_path / "shaders"
    root.mkdir()
    return root


@pytest.fixture
def write_shader(search_root: Path) -> Callable[..., Path]:
    """Factory fixture writing a shader file relative to the search root.

    Args:
        relative: Path under the search root, e.g. ``"post/blur.frag"``.
        content: Source text.
        mtime_ns: Optional modification time to pin.
    """

    def _write(relative: str, content: str = VALID_SOURCE, mtime_ns: int | None = None) -> Path:
        path = search_root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        if mtime_ns is not None:
            os.utime(path, ns=(mtime_ns, mtime_ns))
        return path

    return _write


@pytest.fixture
def make_config(tmp_path: Path, search_root: Path) -> Callable[..., RunConfiguration]:
    """Factory fixture building a RunConfiguration rooted in tmp_path."""

    def _make(
        kinds: Sequence[Any] = (ShaderKind.vertex, ShaderKind.fragment),
        terminates: bool = True,
        **overrides: Any,
    ) -> RunConfiguration:
        data: dict[str, Any] = {
            "to_compile": list(kinds),
            "search_root": search_root,
            "output_root": tmp_path / "out",
            "record_path": tmp_path / "build" / "record.json",
            "compilation_error_terminates": terminates,
        }
        data.update(overrides)
        return RunConfiguration(**data)

    return _make


def set_mtime(path: Path, mtime_ns: int) -> None:
    """Pin a file's modification time."""
    os.utime(path, ns=(mtime_ns, mtime_ns))


@pytest.fixture
def touch() -> Callable[[Path, int], None]:
    """Return a helper that pins a file's mtime in nanoseconds."""
    return set_mtime
