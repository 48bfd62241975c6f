"""Command: validate one code against a chain of rules."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from vouchers.commands._base import VouchersCommand
from vouchers.commands._options import parse_rules, records_argument, rule_options, schema_options

if TYPE_CHECKING:
    from vouchers.commands._context import AppContext


@click.command(
    cls=VouchersCommand,
    examples="""\
  vouchers validate vouchers.json FHUW-JSUJ-KSIQ
  vouchers validate vouchers.json FHUW-JSUJ-KSIQ --unset claimed_by
  vouchers --json validate vouchers.json FHUW-JSUJ-KSIQ --where owner=Alan""",
)
@records_argument
@click.argument("code")
@rule_options
@schema_options
@click.pass_obj
def validate(
    app: AppContext,
    records: Path,
    code: str,
    where: tuple[str, ...],
    unset: tuple[str, ...],
    required: tuple[str, ...],
    immutable: tuple[str, ...],
) -> None:
    """Validate CODE from RECORDS. Rules run in order; the first failure is reported."""
    rules = parse_rules(where, unset)
    app.emit(
        app.service.validate(records, code, rules=rules, required=required, immutable=immutable)
    )
