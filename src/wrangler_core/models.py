"""Value models passed between the build stages.

- CompilationCandidate: a discovered shader file and the kind it was found as
- CompiledShader / CompilationFailure: per-candidate outcome of the batch compiler
- RunReport: summary of one pipeline run
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from wrangler_core.kinds import ShaderKind


class CompilationCandidate(BaseModel):
    """A shader file matched during discovery.

    A file matched under two kinds produces two candidates.

    Attributes:
        location: Path of the file as discovered (joined onto the search root).
        shader_kind: Kind the file was discovered as.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    location: Path = Field(..., description="Path of the shader source file")
    shader_kind: ShaderKind = Field(..., description="Kind the file was discovered as")

    @property
    def record_key(self) -> str:
        """Key used for this file in the change record."""
        return self.location.as_posix()

    def __str__(self) -> str:
        return f"{self.location} ({self.shader_kind.value})"


class CompiledShader(BaseModel):
    """Successful compilation outcome carrying the SPIR-V binary."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    status: Literal["compiled"] = "compiled"
    candidate: CompilationCandidate
    artifact: bytes = Field(..., description="SPIR-V binary produced by the compiler")

    @property
    def ok(self) -> bool:
        return True

    @property
    def location(self) -> Path:
        return self.candidate.location

    @property
    def shader_kind(self) -> ShaderKind:
        return self.candidate.shader_kind


class CompilationFailure(BaseModel):
    """Failed compilation outcome.

    Attributes:
        candidate: The shader that failed.
        error_type: Name of the exception class that caused the failure.
        message: User-facing description of the failure.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    status: Literal["failed"] = "failed"
    candidate: CompilationCandidate
    error_type: str = Field(..., min_length=1)
    message: str = Field(default="")

    @property
    def ok(self) -> bool:
        return False

    @property
    def location(self) -> Path:
        return self.candidate.location

    @property
    def shader_kind(self) -> ShaderKind:
        return self.candidate.shader_kind

    def __str__(self) -> str:
        return f"{self.candidate}: {self.error_type}: {self.message}"


CompilationOutcome = Union[CompiledShader, CompilationFailure]


class RunReport(BaseModel):
    """Summary of a pipeline run.

    Attributes:
        discovered: Number of candidates found across all requested kinds.
        stale: Candidates that needed compilation.
        compiled: Output paths written during the run, in discovery order.
        failures: Candidates that failed to compile.

    Example:
        >>> report = pipeline.run()
        >>> report.skipped
        12
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    discovered: int = Field(default=0, ge=0)
    stale: list[CompilationCandidate] = Field(default_factory=list)
    compiled: list[Path] = Field(default_factory=list)
    failures: list[CompilationFailure] = Field(default_factory=list)

    @property
    def skipped(self) -> int:
        """Candidates left alone because their record entry matched."""
        return self.discovered - len(self.stale)

    @property
    def succeeded(self) -> bool:
        """True when every stale candidate compiled."""
        return not self.failures
