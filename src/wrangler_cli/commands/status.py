"""wrangler status command - List shaders a build would compile."""

from __future__ import annotations

import click
from pydantic import ValidationError as PydanticValidationError

from wrangler_cli.commands import build_config, config_options
from wrangler_cli.errors import to_cli_error
from wrangler_cli.output import info, success


@click.command("status")
@config_options
def status(
    config_path: str | None,
    search_root: str | None,
    output_root: str | None,
    record_path: str | None,
    kinds: tuple[str, ...],
) -> None:
    """Show which shaders are stale, without compiling anything."""
    from wrangler_core.errors import WranglerError
    from wrangler_core.pipeline import plan

    try:
        config = build_config(config_path, search_root, output_root, record_path, kinds)
        stale = plan(config)
    except (WranglerError, PydanticValidationError) as e:
        raise to_cli_error(e) from None

    if not stale:
        success("All shaders up to date")
        return

    for candidate in stale:
        info(f"stale  {candidate.location}  ({candidate.shader_kind.value})")
    info(f"{len(stale)} shader(s) need compiling")
