"""Subcommand modules for vouchers.

Provides register_commands() which uses deferred imports to keep
``vouchers --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from vouchers.commands.check import check
    from vouchers.commands.generate import generate
    from vouchers.commands.pick import pick
    from vouchers.commands.plugins import plugins
    from vouchers.commands.validate import validate

    cli.add_command(generate)
    cli.add_command(check)
    cli.add_command(pick)
    cli.add_command(validate)
    cli.add_command(plugins)
