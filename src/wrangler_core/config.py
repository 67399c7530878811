"""Run configuration for shader-wrangler.

This module defines the RunConfiguration model handed to the pipeline and
the helpers the CLI uses to load it from ``wrangler.yaml``:
- RunConfiguration: What to build, where from, where to, and the failure policy
- resolve_config_path: Locate wrangler.yaml (explicit path, env var, standard locations)
- load_config: resolve_config_path + RunConfiguration.from_yaml

The engine never reads configuration files itself; a RunConfiguration is
supplied wholesale per run.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from wrangler_core.errors import ConfigurationError
from wrangler_core.kinds import ShaderKind

logger = logging.getLogger(__name__)

# Environment variable pointing at an explicit wrangler.yaml
CONFIG_ENV_VAR = "WRANGLER_CONFIG"

# Standard configuration file name
CONFIG_FILE_NAME = "wrangler.yaml"

# Standard locations to search for wrangler.yaml, relative to the working directory
CONFIG_SEARCH_PATHS = (
    Path("."),
    Path(".wrangler"),
)

# Fields holding paths that are resolved against the config file's directory
_PATH_FIELDS = ("search_root", "output_root", "record_path")


class RunConfiguration(BaseModel):
    """Instructions for one pipeline run.

    Attributes:
        to_compile: Shader kinds to search for and compile. Duplicates are
            allowed and scanned once.
        search_root: Directory searched recursively for shader sources.
        output_root: Directory the SPIR-V tree is mirrored into.
        record_path: Location of the change record file.
        compilation_error_terminates: If True, the run raises BatchError when
            one or more shaders fail to compile. Otherwise failures are logged
            as warnings and the run reports success.

    Example:
        >>> config = RunConfiguration(
        ...     to_compile=["vertex", "fragment"],
        ...     search_root="shaders",
        ...     output_root="build/shaders",
        ...     record_path="build/shaders/.record.json",
        ... )
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    to_compile: list[ShaderKind] = Field(
        ...,
        min_length=1,
        description="Shader kinds to search for and compile",
    )
    search_root: Path = Field(..., description="Directory searched for shader sources")
    output_root: Path = Field(..., description="Directory compiled shaders are written to")
    record_path: Path = Field(..., description="Change record file location")
    compilation_error_terminates: bool = Field(
        default=True,
        description="Fail the run when any shader fails to compile",
    )

    @field_validator("to_compile", mode="before")
    @classmethod
    def _coerce_kinds(cls, value: Any) -> Any:
        if isinstance(value, (str, ShaderKind)):
            value = [value]
        if isinstance(value, (list, tuple)):
            coerced: list[Any] = []
            for item in value:
                if isinstance(item, str) and not isinstance(item, ShaderKind):
                    try:
                        item = ShaderKind(item)
                    except ValueError:
                        pass  # left for pydantic to report
                coerced.append(item)
            return coerced
        return value

    @classmethod
    def from_yaml(cls, path: str | Path) -> RunConfiguration:
        """Load and validate a RunConfiguration from a YAML file.

        Relative ``search_root``, ``output_root`` and ``record_path`` values
        are resolved against the directory containing the file.

        Args:
            path: Path to wrangler.yaml.

        Returns:
            Validated RunConfiguration instance.

        Raises:
            ConfigurationError: If the file is missing or unreadable, is not
                valid YAML, or does not contain a mapping.
            pydantic.ValidationError: If schema validation fails.
        """
        path = Path(path)
        if not path.exists():
            raise ConfigurationError("Configuration file not found", file_path=str(path))

        try:
            with path.open("r") as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigurationError(
                "Cannot read configuration file",
                file_path=str(path),
                internal_details=str(e),
            ) from e
        except yaml.YAMLError as e:
            raise ConfigurationError(
                "Invalid YAML",
                file_path=str(path),
                internal_details=str(e),
            ) from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                "Configuration must be a mapping",
                file_path=str(path),
            )

        base_dir = path.parent
        for key in _PATH_FIELDS:
            raw = data.get(key)
            if isinstance(raw, str) and raw and not Path(raw).is_absolute():
                data[key] = str(base_dir / raw)

        return cls.model_validate(data)

    def with_overrides(self, **overrides: Any) -> RunConfiguration:
        """Return a validated copy with the non-None overrides applied."""
        updates = {k: v for k, v in overrides.items() if v is not None}
        if not updates:
            return self
        return type(self).model_validate({**self.model_dump(), **updates})


def resolve_config_path(
    path: str | Path | None = None,
    search_paths: tuple[Path, ...] | None = None,
) -> Path:
    """Find the wrangler.yaml to use.

    Searches in order:
    1. The explicit ``path`` argument
    2. The ``WRANGLER_CONFIG`` environment variable
    3. ``./wrangler.yaml``
    4. ``./.wrangler/wrangler.yaml``

    Raises:
        ConfigurationError: If no configuration file is found.
    """
    if path is not None:
        explicit = Path(path)
        if not explicit.exists():
            raise ConfigurationError("Configuration file not found", file_path=str(explicit))
        return explicit

    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        candidate = Path(env_path)
        if candidate.exists():
            logger.debug("Using %s from %s", candidate, CONFIG_ENV_VAR)
            return candidate
        raise ConfigurationError(
            f"{CONFIG_ENV_VAR} points to a missing file",
            file_path=env_path,
        )

    searched: list[str] = []
    for base in search_paths or CONFIG_SEARCH_PATHS:
        candidate = base / CONFIG_FILE_NAME
        if candidate.exists():
            logger.debug("Found %s at %s", CONFIG_FILE_NAME, candidate)
            return candidate
        searched.append(str(candidate))

    raise ConfigurationError(
        f"Configuration not found. Searched: {', '.join(searched)}"
    )


def load_config(path: str | Path | None = None) -> RunConfiguration:
    """Resolve and load the run configuration.

    Example:
        >>> config = load_config()  # ./wrangler.yaml
    """
    resolved = resolve_config_path(path)
    logger.info("Loading configuration from %s", resolved)
    return RunConfiguration.from_yaml(resolved)
