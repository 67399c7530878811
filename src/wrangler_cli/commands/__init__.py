"""CLI command modules.

Shared option handling for the build commands lives here.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

import click

from wrangler_core.kinds import supported_kinds

F = TypeVar("F", bound=Callable[..., Any])

# Record file name used when only --output-root is given on the command line
DEFAULT_RECORD_NAME = ".wrangler-record.json"


def config_options(func: F) -> F:
    """Attach the configuration options shared by build/status/clean."""
    options = [
        click.option(
            "-c",
            "--config",
            "config_path",
            type=click.Path(dir_okay=False),
            default=None,
            help="Path to wrangler.yaml [default: search ./wrangler.yaml, $WRANGLER_CONFIG]",
        ),
        click.option(
            "-s",
            "--search-root",
            type=click.Path(file_okay=False),
            default=None,
            help="Directory searched for shader sources.",
        ),
        click.option(
            "-o",
            "--output-root",
            type=click.Path(file_okay=False),
            default=None,
            help="Directory compiled shaders are written to.",
        ),
        click.option(
            "-r",
            "--record",
            "record_path",
            type=click.Path(dir_okay=False),
            default=None,
            help=f"Change record file [default: <output-root>/{DEFAULT_RECORD_NAME}]",
        ),
        click.option(
            "-k",
            "--kind",
            "kinds",
            type=click.Choice([k.value for k in supported_kinds()]),
            multiple=True,
            help="Shader kind to compile (repeatable).",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def build_config(
    config_path: str | None,
    search_root: str | None,
    output_root: str | None,
    record_path: str | None,
    kinds: tuple[str, ...],
    compilation_error_terminates: bool | None = None,
) -> Any:
    """Build a RunConfiguration from wrangler.yaml and command line overrides.

    When ``--search-root``, ``--output-root`` and at least one ``--kind`` are
    given without ``--config``, no configuration file is needed.

    Raises:
        ConfigurationError: If no configuration file is found and the
            command line does not describe a complete run.
        pydantic.ValidationError: If the resulting configuration is invalid.
    """
    from wrangler_core.config import RunConfiguration, load_config

    overrides: dict[str, Any] = {
        "search_root": search_root,
        "output_root": output_root,
        "record_path": record_path,
        "to_compile": list(kinds) or None,
        "compilation_error_terminates": compilation_error_terminates,
    }

    if config_path is None and search_root and output_root and kinds:
        if record_path is None:
            overrides["record_path"] = str(Path(output_root) / DEFAULT_RECORD_NAME)
        if compilation_error_terminates is None:
            overrides.pop("compilation_error_terminates")
        return RunConfiguration.model_validate(overrides)

    return load_config(config_path).with_overrides(**overrides)


__all__: list[str] = ["config_options", "build_config", "DEFAULT_RECORD_NAME"]
