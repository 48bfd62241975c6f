"""Pluggy hook specifications for vouchers.

One setup-time hook lets plugins contribute named code generators, which
``[codes] generator = "<name>"`` (or ``VOUCHERS_CODES__GENERATOR``) then selects.
"""

from __future__ import annotations

import random
from collections.abc import Callable
from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from vouchers.config.models import CodesConfig
    from vouchers.domain.codes import CodeGenerator

hookspec = pluggy.HookspecMarker("vouchers")

type GeneratorFactory = Callable[[CodesConfig, random.Random | None], CodeGenerator]


class VouchersHookSpec:
    """Hook specifications for the vouchers plugin system."""

    @hookspec
    def register_code_generators(self) -> dict[str, GeneratorFactory] | None:
        """Return name -> factory mappings for the generator registry.

        Each factory receives the ``[codes]`` config section and the random
        source to draw from, and returns a ready CodeGenerator.
        """
