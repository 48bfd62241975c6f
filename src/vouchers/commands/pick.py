"""Command: pick a random voucher from a records file."""

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
  vouchers pick vouchers.json
  vouchers pick vouchers.json --unset claimed_by
  vouchers --seed 7 pick vouchers.json --where owner=Alan --unset claimed_by""",
)
@records_argument
@rule_options
@schema_options
@click.pass_obj
def pick(
    app: AppContext,
    records: Path,
    where: tuple[str, ...],
    unset: tuple[str, ...],
    required: tuple[str, ...],
    immutable: tuple[str, ...],
) -> None:
    """Pick a random voucher from RECORDS that passes every rule."""
    rules = parse_rules(where, unset)
    app.emit(app.service.pick(records, rules=rules, required=required, immutable=immutable))
