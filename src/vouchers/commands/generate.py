"""Command: generate a batch of new vouchers."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from vouchers.commands._base import VouchersCommand
from vouchers.commands._options import parse_assignments, schema_options

if TYPE_CHECKING:
    from vouchers.commands._context import AppContext


@click.command(
    cls=VouchersCommand,
    examples="""\
  vouchers generate 10
  vouchers --seed 42 generate 3 --field owner=Alan --required owner --immutable owner
  vouchers -q generate 1000 --output vouchers.json""",
)
@click.argument("count", type=click.IntRange(min=0), default=1)
@click.option(
    "--field",
    "fields",
    multiple=True,
    metavar="KEY=VALUE",
    callback=parse_assignments,
    help="Attribute set on every voucher (repeatable).",
)
@schema_options
@click.option(
    "--output",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    default=None,
    help="Write the generated records to this JSON file.",
)
@click.pass_obj
def generate(
    app: AppContext,
    count: int,
    fields: dict[str, str],
    required: tuple[str, ...],
    immutable: tuple[str, ...],
    output: Path | None,
) -> None:
    """Generate COUNT vouchers with unique codes."""
    app.emit(
        app.service.generate(
            count,
            fields=fields,
            required=required,
            immutable=immutable,
            output=output,
        )
    )
