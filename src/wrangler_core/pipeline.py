"""Pipeline orchestrator.

Sequences one incremental build:

1. Load the change record (empty if missing or corrupt)
2. Discover candidates for every requested kind
3. Filter to the stale subset, returning early if nothing changed
4. Compile the stale subset, one outcome per candidate
5. Write each successful output and log its source mtime in the record
6. Save the record, even if step 5 failed part way
7. Raise BatchError for compilation failures if the policy says so
"""

from __future__ import annotations

from pathlib import Path

import structlog

from wrangler_core.backends import CompilerFactory
from wrangler_core.batch import BatchCompiler
from wrangler_core.config import RunConfiguration
from wrangler_core.discovery import find_shaders
from wrangler_core.errors import BatchError
from wrangler_core.models import (
    CompilationCandidate,
    CompilationFailure,
    CompiledShader,
    RunReport,
)
from wrangler_core.output import destination_for, write_output
from wrangler_core.record import ChangeRecord, RecordStore
from wrangler_core.staleness import check_against_record

logger = structlog.get_logger(__name__)


class Pipeline:
    """Incremental shader build for one RunConfiguration.

    Attributes:
        config: The run configuration.
        record_store: Store for the change record at ``config.record_path``.
        batch_compiler: Compiles the stale subset.

    Example:
        >>> pipeline = Pipeline(config)
        >>> report = pipeline.run()
        >>> print(f"{len(report.compiled)} compiled, {report.skipped} up to date")
    """

    def __init__(
        self,
        config: RunConfiguration,
        compiler_factory: CompilerFactory | None = None,
    ) -> None:
        self.config = config
        self.record_store = RecordStore(config.record_path)
        self.batch_compiler = BatchCompiler(compiler_factory)
        self._log = logger.bind(component="pipeline", search_root=str(config.search_root))

    def plan(self) -> list[CompilationCandidate]:
        """Return the candidates the next run would compile.

        Loads the record, discovers and filters. Never starts the compiler
        and never writes anything.
        """
        record = self.record_store.load()
        _, stale = self._discover_stale(record)
        return stale

    def run(self) -> RunReport:
        """Run the build.

        Returns:
            RunReport for the run. In best-effort mode it may carry failures.

        Raises:
            ConfigurationError: Unsupported kind or unusable search root.
            DiscoveryError: Traversal of the search root failed.
            FilesystemError: A discovered shader could not be stat'ed, or the
                record could not be saved.
            CompilerInitError: The compiler backend could not be started.
            OutputWriteError: A compiled shader could not be written. The
                record is saved first.
            BatchError: Shaders failed to compile and
                ``compilation_error_terminates`` is set.
        """
        record = self.record_store.load()
        candidates, stale = self._discover_stale(record)

        if not stale:
            self._log.info("up_to_date", discovered=len(candidates))
            return RunReport(discovered=len(candidates))

        outcomes = self.batch_compiler.compile(stale)

        compiled: list[Path] = []
        try:
            for outcome in outcomes:
                if isinstance(outcome, CompiledShader):
                    compiled.append(self._write(outcome, record))
        finally:
            self.record_store.save(record)

        failures = [o for o in outcomes if isinstance(o, CompilationFailure)]
        report = RunReport(
            discovered=len(candidates),
            stale=stale,
            compiled=compiled,
            failures=failures,
        )
        self._finish(report)
        return report

    def _discover_stale(
        self,
        record: ChangeRecord,
    ) -> tuple[list[CompilationCandidate], list[CompilationCandidate]]:
        candidates = find_shaders(self.config.to_compile, self.config.search_root)
        stale = check_against_record(candidates, record)
        self._log.info(
            "discovery_completed",
            discovered=len(candidates),
            stale=len(stale),
        )
        return candidates, stale

    def _write(self, outcome: CompiledShader, record: ChangeRecord) -> Path:
        destination = destination_for(
            outcome.location,
            outcome.shader_kind,
            self.config.search_root,
            self.config.output_root,
        )
        write_output(destination, outcome.artifact)
        record.log(outcome.location)
        return destination

    def _finish(self, report: RunReport) -> None:
        if not report.failures:
            self._log.info("build_completed", compiled=len(report.compiled))
            return

        if self.config.compilation_error_terminates:
            self._log.error(
                "build_failed",
                compiled=len(report.compiled),
                failed=len(report.failures),
            )
            raise BatchError(report.failures, report=report)

        self._log.warning(
            "build_completed_with_failures",
            compiled=len(report.compiled),
            failed=len(report.failures),
            failed_paths=[str(f.location) for f in report.failures],
        )


def run(
    config: RunConfiguration,
    compiler_factory: CompilerFactory | None = None,
) -> RunReport:
    """Run an incremental build with the given configuration.

    Example:
        >>> report = run(config)
        >>> report.succeeded
        True
    """
    return Pipeline(config, compiler_factory).run()


def plan(config: RunConfiguration) -> list[CompilationCandidate]:
    """Return the candidates a build with ``config`` would compile."""
    return Pipeline(config).plan()
