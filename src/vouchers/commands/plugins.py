"""Command: list plugins and the code generators they provide."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from vouchers.commands._base import VouchersCommand

if TYPE_CHECKING:
    from vouchers.commands._context import AppContext


@click.command(
    cls=VouchersCommand,
    examples="""\
  vouchers plugins
  vouchers -v plugins""",
)
@click.pass_obj
def plugins(app: AppContext) -> None:
    """List registered code generators."""
    app.emit(app.service.list_generators())
