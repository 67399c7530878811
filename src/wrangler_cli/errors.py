"""CLI error handling for wrangler-cli.

Wraps wrangler-core exceptions into user-friendly messages with
appropriate exit codes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click
from pydantic import ValidationError as PydanticValidationError

from wrangler_cli.output import error
from wrangler_core.errors import (
    BatchError,
    CompilerInitError,
    ConfigurationError,
    DiscoveryError,
    FilesystemError,
    WranglerError,
)

if TYPE_CHECKING:
    from pydantic_core import ErrorDetails


# Exit codes following sysexits.h convention
EXIT_SUCCESS = 0
EXIT_USER_ERROR = 1  # Configuration problems, shaders that fail to compile
EXIT_SYSTEM_ERROR = 2  # Filesystem failures, unusable compiler


class CLIError(click.ClickException):
    """CLI-specific exception with exit code support.

    Attributes:
        message: User-facing error message.
        exit_code: Exit code for the CLI (default: 1).
    """

    def __init__(self, message: str, exit_code: int = EXIT_USER_ERROR) -> None:
        super().__init__(message)
        self.exit_code = exit_code

    def show(self, file: object = None) -> None:
        """Display the error message using Rich formatting."""
        error(self.format_message())


def format_pydantic_error(err: PydanticValidationError) -> str:
    """Format Pydantic validation error into user-friendly message.

    Example:
        >>> format_pydantic_error(err)
        "Validation failed:\\n  - to_compile: List should have at least 1 item..."
    """
    errors: list[ErrorDetails] = err.errors()
    lines = ["Validation failed:"]

    for e in errors:
        loc = ".".join(str(x) for x in e["loc"])
        msg = e["msg"]
        lines.append(f"  - {loc}: {msg}")

    return "\n".join(lines)


def exit_code_for(err: WranglerError) -> int:
    """Map a wrangler-core exception to a CLI exit code."""
    if isinstance(err, (FilesystemError, DiscoveryError, CompilerInitError)):
        return EXIT_SYSTEM_ERROR
    return EXIT_USER_ERROR


def to_cli_error(err: Exception) -> CLIError:
    """Convert an engine or validation exception into a CLIError.

    For BatchError only the summary line is kept; commands print the
    individual failures themselves.
    """
    if isinstance(err, PydanticValidationError):
        return CLIError(f"Invalid configuration:\n{format_pydantic_error(err)}")
    if isinstance(err, BatchError):
        return CLIError(err.user_message, exit_code=EXIT_USER_ERROR)
    if isinstance(err, ConfigurationError):
        return CLIError(err.user_message, exit_code=EXIT_USER_ERROR)
    if isinstance(err, WranglerError):
        return CLIError(err.user_message, exit_code=exit_code_for(err))
    raise TypeError(f"Unhandled error type: {type(err).__name__}")
