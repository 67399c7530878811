"""CLI entry point for shader-wrangler.

The root group resolves its subcommands on first use, so ``wrangler --help``
and ``wrangler --version`` never import the build engine.
"""

from __future__ import annotations

import importlib
from typing import Any

import click
import rich_click as rclick

from wrangler_cli import __version__
from wrangler_cli.output import set_no_color

rclick.rich_click.TEXT_MARKUP = "markdown"
rclick.rich_click.SHOW_ARGUMENTS = True
rclick.rich_click.GROUP_ARGUMENTS_OPTIONS = True

# Subcommand name -> "module:attribute"
LAZY_COMMANDS = {
    "build": "wrangler_cli.commands.build:build",
    "status": "wrangler_cli.commands.status:status",
    "clean": "wrangler_cli.commands.clean:clean",
}


class LazyGroup(rclick.RichGroup):
    """Rich-click group whose subcommands are imported on demand.

    Attributes:
        lazy_subcommands: Mapping of command name to ``"module:attribute"``.
    """

    def __init__(
        self,
        *args: Any,
        lazy_subcommands: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(*args, **kwargs)
        self.lazy_subcommands: dict[str, str] = dict(lazy_subcommands or {})

    def list_commands(self, ctx: click.Context) -> list[str]:
        return sorted({*super().list_commands(ctx), *self.lazy_subcommands})

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        if cmd_name in self.lazy_subcommands:
            return self._load(cmd_name)
        return super().get_command(ctx, cmd_name)  # type: ignore[arg-type]

    def _load(self, cmd_name: str) -> click.Command:
        module_name, _, attr_name = self.lazy_subcommands[cmd_name].partition(":")
        command = getattr(importlib.import_module(module_name), attr_name)
        if not isinstance(command, click.Command):
            raise TypeError(f"{module_name}:{attr_name} is not a click command")
        return command


@click.command(cls=LazyGroup, lazy_subcommands=LAZY_COMMANDS)
@click.version_option(version=__version__, prog_name="wrangler")
@click.option(
    "--no-color",
    is_flag=True,
    default=False,
    help="Disable colored output.",
    is_eager=True,
    expose_value=False,
    callback=lambda ctx, param, value: set_no_color(value) if value else None,
)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log debug events.")
@click.option("--json-logs", is_flag=True, default=False, help="Emit log events as JSON lines.")
def cli(verbose: bool, json_logs: bool) -> None:
    """Shader Wrangler - incremental SPIR-V builds.

    Compiles only the shaders that changed since the last successful build.

    **Getting Started:**

    - `wrangler build` - Compile changed shaders listed by wrangler.yaml
    - `wrangler status` - Show which shaders would be rebuilt
    - `wrangler clean` - Forget the change record and force a full rebuild
    """
    from wrangler_core.logging import configure_logging

    configure_logging("DEBUG" if verbose else "WARNING", json_output=json_logs)


if __name__ == "__main__":
    cli()
