"""Shared test fixtures for wrangler-cli tests.

Provides CliRunner fixtures and a small shader project laid out in an
isolated filesystem. Paths are relative so console output stays short.
"""

from __future__ import annotations

import io
from collections.abc import Callable, Generator
from pathlib import Path

import pytest
import structlog
from click.testing import CliRunner
from fakes import VALID_SOURCE, RecordingFactory

from wrangler_cli import output

CONFIG_FILENAME = "wrangler.yaml"

PROJECT_CONFIG = """\
to_compile: [vertex, fragment]
search_root: shaders
output_root: build/spirv
record_path: build/record.json
"""


@pytest.fixture(autouse=True)
def configure_structlog_for_tests() -> None:
    """Send structlog output to a buffer so it stays out of CliRunner output."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=io.StringIO()),
        cache_logger_on_first_use=False,
    )


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click test runner."""
    return CliRunner()


@pytest.fixture
def isolated_runner(cli_runner: CliRunner) -> Generator[CliRunner, None, None]:
    """Create a Click test runner with an isolated filesystem.

    Yields:
        CliRunner instance with isolated filesystem.
    """
    with cli_runner.isolated_filesystem():
        yield cli_runner


@pytest.fixture(autouse=True)
def plain_console(monkeypatch: pytest.MonkeyPatch) -> None:
    """Use an uncolored console so output assertions see plain text."""
    monkeypatch.setattr(output, "console", output.create_console(no_color=True))


@pytest.fixture
def fake_backend(monkeypatch: pytest.MonkeyPatch) -> RecordingFactory:
    """Replace the glslc backend with a recording fake."""
    factory = RecordingFactory()
    monkeypatch.setattr("wrangler_core.batch.default_compiler_factory", factory)
    return factory


@pytest.fixture
def create_shader(isolated_runner: CliRunner) -> Callable[..., Path]:
    """Factory fixture writing shaders under ./shaders."""

    def _create(relative: str, content: str = VALID_SOURCE) -> Path:
        path = Path("shaders") / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path

    return _create


@pytest.fixture
def project(isolated_runner: CliRunner, create_shader: Callable[..., Path]) -> Path:
    """Lay out wrangler.yaml plus one vertex and one fragment shader."""
    Path(CONFIG_FILENAME).write_text(PROJECT_CONFIG)
    create_shader("a.vert")
    create_shader("post/b.frag")
    return Path.cwd()
