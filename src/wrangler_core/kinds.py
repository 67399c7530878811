"""Shader kinds and their file extension conventions.

A kind decides both which files are discovered (``*.vert``) and where the
compiled SPIR-V lands (``*.spv_vert``). The compiler backend knows more
stages than the wrangler builds; asking for one of those is a configuration
error rather than a silent no-op.
"""

from __future__ import annotations

from enum import Enum

from wrangler_core.errors import UnsupportedKindError


class ShaderKind(str, Enum):
    """Shader stages understood by the compiler backend."""

    vertex = "vertex"
    fragment = "fragment"
    compute = "compute"
    geometry = "geometry"
    tess_control = "tess_control"
    tess_evaluation = "tess_evaluation"
    ray_generation = "ray_generation"
    any_hit = "any_hit"
    closest_hit = "closest_hit"
    miss = "miss"
    intersection = "intersection"
    callable = "callable"
    task = "task"
    mesh = "mesh"

    @classmethod
    def _missing_(cls, value: object) -> ShaderKind | None:
        # Accept "Vertex" / "VERTEX" as well as the canonical value.
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value == lowered:
                    return member
        return None


# Kinds the wrangler can search for and write, keyed to their source extension.
KIND_EXTENSIONS: dict[ShaderKind, str] = {
    ShaderKind.vertex: "vert",
    ShaderKind.fragment: "frag",
    ShaderKind.compute: "comp",
}

# Output extensions are tied to the kind, not to the source extension.
KIND_OUTPUT_EXTENSIONS: dict[ShaderKind, str] = {
    ShaderKind.vertex: "spv_vert",
    ShaderKind.fragment: "spv_frag",
    ShaderKind.compute: "spv_comp",
}


def kind_ext(kind: ShaderKind) -> str:
    """Return the source file extension (without dot) for a kind.

    Raises:
        UnsupportedKindError: If the kind has no extension convention.
    """
    try:
        return KIND_EXTENSIONS[kind]
    except KeyError:
        raise UnsupportedKindError(kind) from None


def output_ext(kind: ShaderKind) -> str:
    """Return the output extension for a kind, e.g. ``spv_frag``.

    Every kind has its own suffix, so a ``.vert`` and a ``.frag`` sharing a
    stem never write to the same output file.

    Raises:
        UnsupportedKindError: If the kind cannot be built.
    """
    kind_ext(kind)
    return KIND_OUTPUT_EXTENSIONS[kind]


def supported_kinds() -> list[ShaderKind]:
    """List the kinds the wrangler can build, in declaration order."""
    return list(KIND_EXTENSIONS)
