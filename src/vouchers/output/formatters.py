"""Select the output mode for a ServiceResult: JSON, quiet, or Rich."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel

from vouchers.output.renderers import render_quiet, render_result

if TYPE_CHECKING:
    from vouchers.services.result import ServiceResult


class OutputSettings(BaseModel):
    """Output flags taken from the global CLI options."""

    model_config = {"frozen": True}

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format *result* for display. JSON wins over quiet, quiet over Rich."""
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)
    if settings.quiet:
        return render_quiet(result)
    return render_result(result, verbose=settings.verbose)
