"""Custom exception hierarchy for wrangler-core.

This module defines the exception classes raised by the build engine:
- WranglerError: Base exception for all wrangler-related errors
- ConfigurationError: Unsupported kinds, malformed search patterns, bad config files
- DiscoveryError: Filesystem traversal failed while searching for shaders
- FilesystemError: A stat/read/write on a known path failed
- CompilerInitError: The compiler backend could not be started
- ShaderCompilationError: A single shader failed to compile
- BatchError: One or more shaders failed and the run is configured to fail

User-facing messages are safe to display. Technical details are logged
internally via structlog and never exposed through ``str(err)``.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import structlog

logger = structlog.get_logger(__name__)


class WranglerError(Exception):
    """Base exception for shader-wrangler.

    Args:
        user_message: Safe message to display to the user.
        internal_details: Optional technical details. Logged at ERROR level
            but never part of the exception message.

    Example:
        >>> raise WranglerError(
        ...     "Build failed",
        ...     internal_details="glslc exited with status 134",
        ... )
    """

    def __init__(
        self,
        user_message: str,
        *,
        internal_details: str | None = None,
    ) -> None:
        """Initialize WranglerError with user message and optional internal details.

        Args:
            user_message: Safe message to display to the user.
            internal_details: Technical details for internal logging only.
        """
        super().__init__(user_message)
        self.user_message = user_message

        if internal_details:
            logger.error(
                "wrangler_error",
                error_type=self.__class__.__name__,
                user_message=user_message,
                internal_details=internal_details,
            )


class ConfigurationError(WranglerError):
    """Raised when the run configuration cannot be used.

    Configuration errors are always fatal and are raised before any
    side effect (no record load is persisted, nothing is compiled).

    Attributes:
        file_path: Path to the configuration file (if known).
        field_path: Dot-separated path to the invalid field (if known).

    Example:
        >>> raise ConfigurationError(
        ...     "Search root must be a directory",
        ...     file_path="wrangler.yaml",
        ...     field_path="search_root",
        ... )
    """

    def __init__(
        self,
        user_message: str,
        *,
        file_path: str | None = None,
        field_path: str | None = None,
        internal_details: str | None = None,
    ) -> None:
        context_parts: list[str] = []
        if file_path:
            context_parts.append(f"in {file_path}")
        if field_path:
            context_parts.append(f"field '{field_path}'")

        if context_parts:
            full_message = f"{user_message} ({', '.join(context_parts)})"
        else:
            full_message = user_message

        super().__init__(full_message, internal_details=internal_details)

        self.file_path = file_path
        self.field_path = field_path


class UnsupportedKindError(ConfigurationError):
    """Raised when a requested shader kind has no extension convention.

    Attributes:
        kind: The rejected kind value.
    """

    def __init__(self, kind: object) -> None:
        kind_name = getattr(kind, "value", kind)
        super().__init__(f"Kind '{kind_name}' not supported by wrangler")
        self.kind = kind


class BadGlobPatternError(ConfigurationError):
    """Raised when a search pattern cannot be evaluated.

    Attributes:
        pattern: The search expression that was rejected.
    """

    def __init__(self, pattern: str, *, reason: str | None = None) -> None:
        message = f"Bad glob pattern: `{pattern}`"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.pattern = pattern


class DiscoveryError(WranglerError):
    """Raised when traversing the search root fails on an entry.

    Attributes:
        path: The filesystem entry that could not be read.
    """

    def __init__(self, path: str | Path, *, internal_details: str | None = None) -> None:
        super().__init__(
            f"Error while traversing search results at {path}",
            internal_details=internal_details,
        )
        self.path = Path(path)


class FilesystemError(WranglerError):
    """Raised when an I/O operation on a known path fails.

    Attributes:
        path: The path the operation targeted.
        operation: Short verb describing the operation (stat, read, write).
    """

    def __init__(
        self,
        path: str | Path,
        operation: str,
        *,
        internal_details: str | None = None,
    ) -> None:
        super().__init__(
            f"Cannot {operation} {path}",
            internal_details=internal_details,
        )
        self.path = Path(path)
        self.operation = operation


class OutputWriteError(FilesystemError):
    """Raised when a compiled shader cannot be written to the output tree."""

    def __init__(self, path: str | Path, *, internal_details: str | None = None) -> None:
        super().__init__(path, "write", internal_details=internal_details)


class CompilerInitError(WranglerError):
    """Raised when the compiler backend cannot be initialized.

    This indicates an unusable environment rather than a problem with any
    single shader, and aborts the run before any shader is attempted.
    """

    def __init__(
        self,
        user_message: str = "Error initializing the shader compiler",
        *,
        internal_details: str | None = None,
    ) -> None:
        super().__init__(user_message, internal_details=internal_details)


class ShaderCompilationError(WranglerError):
    """Raised by a compiler backend when a shader fails to compile.

    The batch compiler catches this per candidate; it only escapes a run
    wrapped in a BatchError.

    Attributes:
        identifier: Human-readable name of the shader (usually its path).
        diagnostics: Compiler output describing the failure.
    """

    def __init__(self, identifier: str, diagnostics: str = "") -> None:
        message = f"Error compiling {identifier} to SPIR-V"
        if diagnostics:
            message = f"{message}:\n{diagnostics.rstrip()}"
        super().__init__(message)
        self.identifier = identifier
        self.diagnostics = diagnostics


class BatchError(WranglerError):
    """Raised when shaders failed to compile and failures are fatal.

    Attributes:
        errors: One entry per failed shader, in discovery order.
        report: The RunReport of the failed run, when raised by the pipeline.
    """

    def __init__(self, errors: Sequence[object], *, report: object | None = None) -> None:
        self.errors = list(errors)
        self.report = report
        super().__init__(
            f"Encountered errors compiling {len(self.errors)} file(s)"
        )

    def __str__(self) -> str:
        lines = [self.user_message]
        lines.extend(f"  - {e}" for e in self.errors)
        return "\n".join(lines)
