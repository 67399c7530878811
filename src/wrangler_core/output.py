"""Output writer: mirror compiled shaders into the output tree."""

from __future__ import annotations

from pathlib import Path

import structlog

from wrangler_core.errors import OutputWriteError
from wrangler_core.kinds import ShaderKind, output_ext

logger = structlog.get_logger(__name__)


def destination_for(
    location: Path,
    shader_kind: ShaderKind,
    search_root: str | Path,
    output_root: str | Path,
) -> Path:
    """Compute where a compiled shader is written.

    ``<search_root>/dir/a.vert`` becomes ``<output_root>/dir/a.spv_vert``.

    Raises:
        ValueError: If ``location`` is not under ``search_root``.
        UnsupportedKindError: If the kind has no output extension.
    """
    tail = location.relative_to(search_root)
    return (Path(output_root) / tail).with_suffix(f".{output_ext(shader_kind)}")


def write_output(destination: Path, artifact: bytes) -> Path:
    """Write a SPIR-V binary, creating parent directories and overwriting.

    Raises:
        OutputWriteError: If a directory or the file cannot be written.
    """
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(artifact)
    except OSError as e:
        raise OutputWriteError(destination, internal_details=str(e)) from e

    logger.debug("output_written", path=str(destination), size=len(artifact))
    return destination
