"""Compiler backends.

The wrangler treats SPIR-V compilation as a black box behind the
``ShaderCompiler`` protocol. A ``CompilerFactory`` is the once-per-batch
initialization step: it either returns a usable compiler or raises
CompilerInitError.

GlslcCompiler drives the shaderc ``glslc`` executable: the source goes in on
stdin and the SPIR-V binary comes back on stdout.
"""

from __future__ import annotations

import os
import shutil
import subprocess
from collections.abc import Callable, Sequence
from typing import Protocol

import structlog

from wrangler_core.errors import CompilerInitError, ShaderCompilationError
from wrangler_core.kinds import ShaderKind

logger = structlog.get_logger(__name__)

DEFAULT_ENTRY_POINT = "main"

# Environment variable overriding the glslc executable
GLSLC_ENV_VAR = "GLSLC"

GLSLC_EXECUTABLE = "glslc"

# glslc -fshader-stage values
GLSLC_STAGES: dict[ShaderKind, str] = {
    ShaderKind.vertex: "vert",
    ShaderKind.fragment: "frag",
    ShaderKind.compute: "comp",
    ShaderKind.geometry: "geom",
    ShaderKind.tess_control: "tesc",
    ShaderKind.tess_evaluation: "tese",
    ShaderKind.ray_generation: "rgen",
    ShaderKind.any_hit: "rahit",
    ShaderKind.closest_hit: "rchit",
    ShaderKind.miss: "rmiss",
    ShaderKind.intersection: "rint",
    ShaderKind.callable: "rcall",
    ShaderKind.task: "task",
    ShaderKind.mesh: "mesh",
}


class ShaderCompiler(Protocol):
    """Anything that turns shader source text into SPIR-V."""

    def compile_into_spirv(
        self,
        source_text: str,
        kind: ShaderKind,
        identifier: str,
        entry_point: str = DEFAULT_ENTRY_POINT,
        options: Sequence[str] | None = None,
    ) -> bytes:
        """Compile ``source_text`` and return the SPIR-V binary.

        Raises:
            ShaderCompilationError: If the compiler rejects the source.
        """
        ...


CompilerFactory = Callable[[], ShaderCompiler]


class GlslcCompiler:
    """ShaderCompiler backed by the ``glslc`` command line tool.

    Attributes:
        executable: Resolved path to glslc.
        timeout_seconds: Per-invocation timeout, or None to wait forever.

    Example:
        >>> compiler = GlslcCompiler.initialize()
        >>> spirv = compiler.compile_into_spirv(src, ShaderKind.vertex, "a.vert")
    """

    def __init__(self, executable: str, timeout_seconds: float | None = None) -> None:
        self.executable = executable
        self.timeout_seconds = timeout_seconds
        self._log = logger.bind(component="glslc", executable=executable)

    @classmethod
    def initialize(
        cls,
        executable: str | None = None,
        timeout_seconds: float | None = None,
    ) -> GlslcCompiler:
        """Locate glslc and check that it runs.

        The executable is taken from ``executable``, then ``$GLSLC``, then
        ``PATH``.

        Raises:
            CompilerInitError: If glslc cannot be found or does not run.
        """
        requested = executable or os.environ.get(GLSLC_ENV_VAR) or GLSLC_EXECUTABLE
        resolved = shutil.which(requested)
        if resolved is None:
            raise CompilerInitError(
                "Error initializing the shader compiler: glslc not found",
                internal_details=f"shutil.which({requested!r}) returned None",
            )

        try:
            probe = subprocess.run(
                [resolved, "--version"],
                capture_output=True,
                timeout=30,
                check=False,
            )
        except (OSError, subprocess.SubprocessError) as e:
            raise CompilerInitError(internal_details=f"{resolved} --version: {e}") from e

        if probe.returncode != 0:
            raise CompilerInitError(
                internal_details=(
                    f"{resolved} --version exited with {probe.returncode}: "
                    f"{probe.stderr.decode(errors='replace').strip()}"
                ),
            )

        version = probe.stdout.decode(errors="replace").splitlines()
        logger.debug(
            "compiler_initialized",
            executable=resolved,
            version=version[0] if version else "",
        )
        return cls(resolved, timeout_seconds=timeout_seconds)

    def command(
        self,
        kind: ShaderKind,
        entry_point: str = DEFAULT_ENTRY_POINT,
        options: Sequence[str] | None = None,
    ) -> list[str]:
        """Build the glslc argument list for one compilation."""
        try:
            stage = GLSLC_STAGES[kind]
        except KeyError:
            raise ValueError(f"glslc has no shader stage for {kind!r}") from None
        return [
            self.executable,
            f"-fshader-stage={stage}",
            f"-fentry-point={entry_point}",
            *(options or ()),
            "-o",
            "-",
            "-",
        ]

    def compile_into_spirv(
        self,
        source_text: str,
        kind: ShaderKind,
        identifier: str,
        entry_point: str = DEFAULT_ENTRY_POINT,
        options: Sequence[str] | None = None,
    ) -> bytes:
        """Compile one shader with glslc.

        Raises:
            ShaderCompilationError: If glslc exits non-zero, times out, or
                cannot be started.
        """
        cmd = self.command(kind, entry_point, options)
        try:
            proc = subprocess.run(
                cmd,
                input=source_text.encode("utf-8"),
                capture_output=True,
                timeout=self.timeout_seconds,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise ShaderCompilationError(
                identifier, f"glslc timed out after {e.timeout}s"
            ) from e
        except OSError as e:
            raise ShaderCompilationError(identifier, str(e)) from e

        if proc.returncode != 0:
            diagnostics = proc.stderr.decode(errors="replace").replace("<stdin>", identifier)
            raise ShaderCompilationError(identifier, diagnostics)

        self._log.debug("glslc_completed", identifier=identifier, size=len(proc.stdout))
        return proc.stdout


def default_compiler_factory() -> ShaderCompiler:
    """Initialize the default backend (glslc)."""
    return GlslcCompiler.initialize()
