"""Staleness filter: decide which candidates need compiling."""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from wrangler_core.models import CompilationCandidate
from wrangler_core.record import ChangeRecord, modified_time_ns

logger = structlog.get_logger(__name__)


def is_stale(candidate: CompilationCandidate, record: ChangeRecord) -> bool:
    """Return True if the candidate must be (re)compiled.

    A candidate is stale when it has no record entry, or when its current
    mtime differs from the recorded one in either direction.

    Raises:
        FilesystemError: If the candidate cannot be stat'ed.
    """
    last_modified = record.get(candidate.location)
    if last_modified is None:
        return True
    return modified_time_ns(candidate.location) != last_modified


def check_against_record(
    candidates: Sequence[CompilationCandidate],
    record: ChangeRecord,
) -> list[CompilationCandidate]:
    """Return the stale subset of ``candidates``, preserving order.

    A stat failure aborts the whole step: the file was just discovered, so
    losing it now is treated as fatal for the run.
    """
    needs_compile = [c for c in candidates if is_stale(c, record)]
    logger.debug(
        "staleness_checked",
        candidates=len(candidates),
        stale=len(needs_compile),
    )
    return needs_compile
