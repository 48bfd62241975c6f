"""Operation-specific Rich renderers for ServiceResult.

Renderers write to a StringIO-backed Console and are dispatched by
``result.op`` in :func:`render_result`. Unknown ops fall through to a
generic key-value renderer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from vouchers.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from vouchers.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()
    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)
    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Minimal output for ``--quiet``: bare codes on success."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"
    if result.op == "generate":
        return "\n".join(result.data.get("codes", []))
    code = result.data.get("code")
    if code:
        return str(code)
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text.assemble(("OK", "vch.ok"), (f"  {result.op}", "vch.op")))


def _field(console: Console, key: str, value: Any) -> None:
    style = "vch.code" if key == "code" else ""
    console.print(Text.assemble((f"  {key}: ", "vch.key"), (str(value), style)))


def _render_meta(console: Console, result: ServiceResult) -> None:
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for key, value in result.meta.items():
        console.print(Text(f"    {key}: {value}"))


# ── Op renderers ──────────────────────────────────────────────────────


def _render_generate(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    items: list[dict[str, Any]] = result.data.get("items", [])
    columns = list(dict.fromkeys(key for item in items for key in item))
    if items:
        table = Table(show_header=True, pad_edge=False)
        for column in columns:
            table.add_column(column, style="vch.code" if column == "code" else None, no_wrap=True)
        for item in items:
            table.add_row(*(_cell(item.get(column)) for column in columns))
        console.print(table)
    _field(console, "count", result.data.get("count", len(items)))
    if result.data.get("output"):
        _field(console, "output", result.data["output"])
    if verbose:
        _render_meta(console, result)


def _render_check(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    table = Table(show_header=True, pad_edge=False)
    table.add_column("code", style="vch.code", no_wrap=True)
    table.add_column("valid")
    for item in result.data.get("items", []):
        valid = bool(item.get("valid"))
        table.add_row(
            str(item.get("code", "")),
            Text("yes" if valid else "no", style="vch.valid" if valid else "vch.invalid"),
        )
    console.print(table)
    if verbose:
        _render_meta(console, result)


def _render_voucher(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Shared by ``pick`` and ``validate``: one voucher's fields."""
    _status_line(console, result)
    for key, value in result.data.get("voucher", {}).items():
        _field(console, key, _cell(value))
    if verbose:
        _render_meta(console, result)


def _render_plugins(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    active = result.data.get("active")
    for name in result.data.get("generators", []):
        marker = " (active)" if name == active else ""
        console.print(f"  {name}{marker}")
    if verbose:
        _field(console, "plugins", ", ".join(result.data.get("plugins", [])))


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="vch.error")
    console.print(label, Text(f"  {result.op}", style="vch.op"), "—", Text(msg))
    if err is not None and verbose:
        _field(console, "kind", err.code)
        for key, value in err.detail.items():
            _field(console, key, value)


def _cell(value: Any) -> str:
    return "" if value is None else str(value)


_OP_RENDERERS = {
    "generate": _render_generate,
    "check": _render_check,
    "pick": _render_voucher,
    "validate": _render_voucher,
    "plugins": _render_plugins,
}
