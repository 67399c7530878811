"""wrangler build command - Compile changed shaders."""

from __future__ import annotations

import click
from pydantic import ValidationError as PydanticValidationError

from wrangler_cli.commands import build_config, config_options
from wrangler_cli.errors import to_cli_error
from wrangler_cli.output import error, info, success, warning
from wrangler_core.errors import BatchError, WranglerError


@click.command("build")
@config_options
@click.option(
    "--strict/--best-effort",
    "compilation_error_terminates",
    default=None,
    help="Fail the build when any shader fails to compile [default: from config, strict]",
)
def build(
    config_path: str | None,
    search_root: str | None,
    output_root: str | None,
    record_path: str | None,
    kinds: tuple[str, ...],
    compilation_error_terminates: bool | None,
) -> None:
    """Compile shaders that changed since the last build.

    Examples:

        wrangler build

        wrangler build --config shaders/wrangler.yaml --best-effort

        wrangler build -s shaders -o build/spirv -k vertex -k fragment
    """
    from wrangler_core.pipeline import Pipeline

    try:
        config = build_config(
            config_path,
            search_root,
            output_root,
            record_path,
            kinds,
            compilation_error_terminates,
        )
        report = Pipeline(config).run()
    except BatchError as e:
        if e.report is not None:
            for path in e.report.compiled:
                success(f"Compiled {path}")
        for failure in e.errors:
            error(str(failure))
        raise to_cli_error(e) from None
    except (WranglerError, PydanticValidationError) as e:
        raise to_cli_error(e) from None

    for path in report.compiled:
        success(f"Compiled {path}")
    for failure in report.failures:
        warning(str(failure))

    if not report.stale:
        info(f"Up to date ({report.discovered} shader(s))")
    else:
        info(
            f"{len(report.compiled)} compiled, {len(report.failures)} failed, "
            f"{report.skipped} up to date"
        )
