"""Batch compiler.

Compiles the stale candidates one after another and returns one outcome per
candidate, in input order. A failure to read or compile one shader becomes
that shader's CompilationFailure; it never stops the rest of the batch.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from wrangler_core.backends import (
    DEFAULT_ENTRY_POINT,
    CompilerFactory,
    ShaderCompiler,
    default_compiler_factory,
)
from wrangler_core.errors import CompilerInitError, FilesystemError, WranglerError
from wrangler_core.models import (
    CompilationCandidate,
    CompilationFailure,
    CompilationOutcome,
    CompiledShader,
)

logger = structlog.get_logger(__name__)


def read_source(candidate: CompilationCandidate) -> str:
    """Read a shader source file as UTF-8 text.

    Raises:
        FilesystemError: If the file cannot be read or decoded.
    """
    try:
        return candidate.location.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FilesystemError(candidate.location, "read", internal_details=str(e)) from e


class BatchCompiler:
    """Compile a batch of candidates with a single compiler instance.

    The compiler is created by ``compiler_factory`` once per call to
    :meth:`compile`, before any candidate is attempted.

    Attributes:
        compiler_factory: Zero-argument callable returning a ShaderCompiler.
        entry_point: Entry point name passed to the compiler.

    Example:
        >>> outcomes = BatchCompiler().compile(stale_candidates)
        >>> [o.location for o in outcomes if not o.ok]
        [PosixPath('shaders/broken.frag')]
    """

    def __init__(
        self,
        compiler_factory: CompilerFactory | None = None,
        entry_point: str = DEFAULT_ENTRY_POINT,
    ) -> None:
        self.compiler_factory = compiler_factory or default_compiler_factory
        self.entry_point = entry_point
        self._log = logger.bind(component="batch_compiler")

    def initialize(self) -> ShaderCompiler:
        """Create the compiler for this batch.

        Raises:
            CompilerInitError: If the backend cannot be used.
        """
        try:
            return self.compiler_factory()
        except CompilerInitError:
            raise
        except Exception as e:
            raise CompilerInitError(internal_details=f"{type(e).__name__}: {e}") from e

    def compile(self, candidates: Sequence[CompilationCandidate]) -> list[CompilationOutcome]:
        """Compile every candidate, collecting one outcome each.

        Raises:
            CompilerInitError: If the compiler cannot be created. Nothing is
                compiled in that case.
        """
        compiler = self.initialize()
        self._log.info("batch_started", count=len(candidates))

        outcomes: list[CompilationOutcome] = []
        for candidate in candidates:
            outcomes.append(self._compile_one(compiler, candidate))

        failed = sum(1 for o in outcomes if not o.ok)
        self._log.info(
            "batch_completed",
            compiled=len(outcomes) - failed,
            failed=failed,
        )
        return outcomes

    def _compile_one(
        self,
        compiler: ShaderCompiler,
        candidate: CompilationCandidate,
    ) -> CompilationOutcome:
        identifier = str(candidate.location)
        try:
            source = read_source(candidate)
            artifact = compiler.compile_into_spirv(
                source,
                candidate.shader_kind,
                identifier,
                self.entry_point,
                None,
            )
        except WranglerError as e:
            self._log.warning(
                "shader_failed",
                path=identifier,
                kind=candidate.shader_kind.value,
                error_type=type(e).__name__,
                error=e.user_message,
            )
            return CompilationFailure(
                candidate=candidate,
                error_type=type(e).__name__,
                message=e.user_message,
            )

        self._log.debug("shader_compiled", path=identifier, size=len(artifact))
        return CompiledShader(candidate=candidate, artifact=artifact)
