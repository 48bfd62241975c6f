"""Root CLI group for vouchers with global flags and command registration."""

from __future__ import annotations

import click

from vouchers import __version__
from vouchers.commands import register_commands
from vouchers.commands._context import AppContext
from vouchers.config.settings import VouchersSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="vouchers")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug logging.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("--seed", type=int, default=None, help="Seed generation and selection.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    seed: int | None,
    config_path: str | None,
) -> None:
    """vouchers — generate, pick, and validate voucher codes."""
    flags: dict[str, object] = {
        "json_output": json_output,
        "quiet": quiet,
        "verbose": verbose,
        "log_json": log_json,
    }
    if seed is not None:
        flags["seed"] = seed
    settings = VouchersSettings.from_cli(config_path=config_path, **flags)
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
