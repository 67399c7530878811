"""wrangler clean command - Delete the change record."""

from __future__ import annotations

import click
from pydantic import ValidationError as PydanticValidationError

from wrangler_cli.commands import build_config, config_options
from wrangler_cli.errors import to_cli_error
from wrangler_cli.output import info, success


@click.command("clean")
@config_options
def clean(
    config_path: str | None,
    search_root: str | None,
    output_root: str | None,
    record_path: str | None,
    kinds: tuple[str, ...],
) -> None:
    """Forget every recorded build so the next build compiles everything.

    Compiled outputs are left in place.
    """
    from wrangler_core.errors import WranglerError
    from wrangler_core.record import RecordStore

    try:
        config = build_config(config_path, search_root, output_root, record_path, kinds)
        removed = RecordStore(config.record_path).clear()
    except (WranglerError, PydanticValidationError) as e:
        raise to_cli_error(e) from None

    if removed:
        success(f"Removed {config.record_path}")
    else:
        info(f"No change record at {config.record_path}")
