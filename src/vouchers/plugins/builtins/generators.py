"""Built-in code generators: ``segmented`` (default) and ``numeric``."""

from __future__ import annotations

import random
import string
from typing import TYPE_CHECKING

from vouchers.domain.codes import CodeGenerator, SegmentedCodeGenerator
from vouchers.plugins import hookimpl

if TYPE_CHECKING:
    from vouchers.config.models import CodesConfig
    from vouchers.plugins.hookspecs import GeneratorFactory


def segmented(config: CodesConfig, rng: random.Random | None) -> CodeGenerator:
    """Generator shaped entirely by the ``[codes]`` section."""
    return SegmentedCodeGenerator(
        segments=config.segments,
        length=config.length,
        charset=config.charset,
        separator=config.separator,
        prefix=config.prefix,
        suffix=config.suffix,
        rng=rng,
    )


def numeric(config: CodesConfig, rng: random.Random | None) -> CodeGenerator:
    """Digits only; ``charset`` from config is ignored."""
    return SegmentedCodeGenerator(
        segments=config.segments,
        length=config.length,
        charset=string.digits,
        separator=config.separator,
        prefix=config.prefix,
        suffix=config.suffix,
        rng=rng,
    )


class BuiltinGeneratorsPlugin:
    """Registers the generators available without any third-party plugin."""

    @hookimpl
    def register_code_generators(self) -> dict[str, GeneratorFactory]:
        return {"segmented": segmented, "numeric": numeric}
