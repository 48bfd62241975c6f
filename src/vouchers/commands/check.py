"""Command: format-check codes against the configured generator."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from vouchers.commands._base import VouchersCommand

if TYPE_CHECKING:
    from vouchers.commands._context import AppContext


@click.command(
    cls=VouchersCommand,
    examples="""\
  vouchers check FHUW-JSUJ-KSIQ
  vouchers check FHUW-JSUJ-KSIQ not-a-code
  cat codes.txt | vouchers -q check""",
)
@click.argument("codes", nargs=-1)
@click.pass_obj
def check(app: AppContext, codes: tuple[str, ...]) -> None:
    """Check that CODES are well-formed. Reads one code per line from stdin if none given."""
    if not codes:
        stdin = click.get_text_stream("stdin")
        codes = tuple(line.strip() for line in stdin if line.strip())
    app.emit(app.service.check(codes))
