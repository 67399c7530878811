"""Shader discovery.

Finds ``<search_root>/**/*.<ext>`` for every requested kind. Directories and
files are visited in sorted name order so candidate order does not depend
on the filesystem. Unlike ``glob.glob``, traversal errors are not skipped:
any entry that cannot be read aborts discovery. Symlinked directories are
followed, except where a link leads back to one of its own ancestors.
"""

from __future__ import annotations

import os
from collections.abc import Iterable
from fnmatch import fnmatchcase
from pathlib import Path
from typing import NoReturn

import structlog

from wrangler_core.errors import BadGlobPatternError, DiscoveryError
from wrangler_core.kinds import ShaderKind, kind_ext
from wrangler_core.models import CompilationCandidate

logger = structlog.get_logger(__name__)


def deduplicate_kinds(kinds: Iterable[ShaderKind]) -> list[ShaderKind]:
    """Drop repeated kinds, keeping the first occurrence of each."""
    out: list[ShaderKind] = []
    for kind in kinds:
        if kind not in out:
            out.append(kind)
    return out


def search_pattern(kind: ShaderKind, search_root: str | Path) -> str:
    """Return the search expression for a kind, e.g. ``shaders/**/*.vert``.

    Raises:
        UnsupportedKindError: If the kind has no extension convention.
    """
    return f"{Path(search_root).as_posix()}/**/*.{kind_ext(kind)}"


def _raise_traversal_error(err: OSError) -> NoReturn:
    raise DiscoveryError(err.filename or "<unknown>", internal_details=str(err)) from err


def find_shaders_of_kind(
    kind: ShaderKind,
    search_root: str | Path,
) -> list[CompilationCandidate]:
    """Find every file under ``search_root`` matching the kind's extension.

    Args:
        kind: Kind to search for.
        search_root: Directory searched recursively.

    Returns:
        Candidates in sorted traversal order.

    Raises:
        UnsupportedKindError: If the kind has no extension convention.
        BadGlobPatternError: If ``search_root`` is not an existing directory.
        DiscoveryError: If an entry cannot be read during traversal.
    """
    pattern = search_pattern(kind, search_root)
    root = Path(search_root)
    if not root.is_dir():
        raise BadGlobPatternError(pattern, reason="search root is not a directory")

    name_pattern = f"*.{kind_ext(kind)}"
    candidates: list[CompilationCandidate] = []
    # Directory path -> (st_dev, st_ino) of itself and every ancestor
    lineage: dict[str, frozenset[tuple[int, int]]] = {}

    for dirpath, dirnames, filenames in os.walk(
        root, onerror=_raise_traversal_error, followlinks=True
    ):
        try:
            st = os.stat(dirpath)
        except OSError as e:
            _raise_traversal_error(e)
        identity = (st.st_dev, st.st_ino)
        ancestors = lineage.get(os.path.dirname(dirpath), frozenset())
        if identity in ancestors:
            # A symlink back to an enclosing directory
            logger.debug("symlink_cycle_pruned", path=dirpath)
            dirnames.clear()
            continue
        lineage[dirpath] = ancestors | {identity}

        dirnames.sort()
        base = Path(dirpath)
        for filename in sorted(filenames):
            if fnmatchcase(filename, name_pattern):
                candidates.append(
                    CompilationCandidate(location=base / filename, shader_kind=kind)
                )

    logger.debug("kind_searched", pattern=pattern, matches=len(candidates))
    return candidates


def find_shaders(
    kinds: Iterable[ShaderKind],
    search_root: str | Path,
) -> list[CompilationCandidate]:
    """Find candidates for every requested kind, one kind after another.

    Kinds are deduplicated first, so a kind requested twice is scanned once.
    A file matched by two kinds appears once per kind.
    """
    shaders: list[CompilationCandidate] = []
    for kind in deduplicate_kinds(kinds):
        shaders.extend(find_shaders_of_kind(kind, search_root))
    return shaders
