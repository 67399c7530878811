"""wrangler-core: Incremental SPIR-V build engine.

This package provides:
- RunConfiguration: What to build and where
- Pipeline / run: Discover, filter, compile, write and record one build
- RecordStore / ChangeRecord: Durable mtime ledger used to skip unchanged shaders
- GlslcCompiler: Default compiler backend (shaderc glslc)
"""

from __future__ import annotations

__version__ = "0.1.0"

from wrangler_core.backends import (
    DEFAULT_ENTRY_POINT,
    CompilerFactory,
    GlslcCompiler,
    ShaderCompiler,
)
from wrangler_core.batch import BatchCompiler
from wrangler_core.config import RunConfiguration, load_config, resolve_config_path
from wrangler_core.discovery import deduplicate_kinds, find_shaders, find_shaders_of_kind
from wrangler_core.errors import (
    BadGlobPatternError,
    BatchError,
    CompilerInitError,
    ConfigurationError,
    DiscoveryError,
    FilesystemError,
    OutputWriteError,
    ShaderCompilationError,
    UnsupportedKindError,
    WranglerError,
)
from wrangler_core.kinds import KIND_EXTENSIONS, ShaderKind, kind_ext, output_ext
from wrangler_core.models import (
    CompilationCandidate,
    CompilationFailure,
    CompilationOutcome,
    CompiledShader,
    RunReport,
)
from wrangler_core.output import destination_for, write_output
from wrangler_core.pipeline import Pipeline, plan, run
from wrangler_core.record import ChangeRecord, RecordStore
from wrangler_core.staleness import check_against_record

__all__ = [
    "__version__",
    # Configuration
    "RunConfiguration",
    "load_config",
    "resolve_config_path",
    # Kinds
    "ShaderKind",
    "KIND_EXTENSIONS",
    "kind_ext",
    "output_ext",
    # Models
    "CompilationCandidate",
    "CompiledShader",
    "CompilationFailure",
    "CompilationOutcome",
    "RunReport",
    # Stages
    "find_shaders",
    "find_shaders_of_kind",
    "deduplicate_kinds",
    "check_against_record",
    "BatchCompiler",
    "destination_for",
    "write_output",
    "ChangeRecord",
    "RecordStore",
    # Orchestration
    "Pipeline",
    "run",
    "plan",
    # Backends
    "ShaderCompiler",
    "CompilerFactory",
    "GlslcCompiler",
    "DEFAULT_ENTRY_POINT",
    # Errors
    "WranglerError",
    "ConfigurationError",
    "UnsupportedKindError",
    "BadGlobPatternError",
    "DiscoveryError",
    "FilesystemError",
    "OutputWriteError",
    "CompilerInitError",
    "ShaderCompilationError",
    "BatchError",
]
