"""Option groups shared by several commands."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import click

from vouchers.services.vouchers import FieldRule


def parse_rules(where: tuple[str, ...], unset: tuple[str, ...]) -> list[FieldRule]:
    """``--where`` equality rules first, then ``--unset`` emptiness rules."""
    try:
        rules = [FieldRule.parse(text) for text in where]
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--where") from exc
    return [*rules, *(FieldRule(field=name) for name in unset)]


def parse_assignments(
    _ctx: click.Context, _param: click.Parameter, values: tuple[str, ...]
) -> dict[str, str]:
    """Click callback turning repeated ``KEY=VALUE`` options into a dict."""
    fields: dict[str, str] = {}
    for text in values:
        key, sep, value = text.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"Expected KEY=VALUE, got {text!r}")
        fields[key] = value
    return fields


def schema_options[**P, R](func: Callable[P, R]) -> Callable[P, R]:
    """``--required`` / ``--immutable`` field flags for the voucher model."""
    func = click.option(
        "--immutable",
        multiple=True,
        metavar="FIELD",
        help="Field that cannot change once set (repeatable).",
    )(func)
    func = click.option(
        "--required",
        multiple=True,
        metavar="FIELD",
        help="Field every voucher must carry (repeatable).",
    )(func)
    return func


def rule_options[**P, R](func: Callable[P, R]) -> Callable[P, R]:
    """``--where`` / ``--unset`` validator flags, evaluated in that order."""
    func = click.option(
        "--unset",
        multiple=True,
        metavar="FIELD",
        help="Rule: FIELD must be empty (repeatable).",
    )(func)
    func = click.option(
        "--where",
        multiple=True,
        metavar="FIELD=VALUE",
        help="Rule: FIELD must equal VALUE (repeatable).",
    )(func)
    return func


def records_argument[**P, R](func: Callable[P, R]) -> Callable[P, R]:
    """Positional JSON file holding an array of voucher records."""
    return click.argument(
        "records",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
    )(func)
