"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, vouchers.toml only contains
overrides. An empty (or missing) file yields the default code shape
``XXXX-XXXX-XXXX`` and a retry budget of 100 per generated voucher.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

from vouchers.domain.bag import DEFAULT_MAX_RETRIES
from vouchers.domain.codes import (
    DEFAULT_CHARSET,
    DEFAULT_LENGTH,
    DEFAULT_SEGMENTS,
    DEFAULT_SEPARATOR,
)


class CodesConfig(BaseModel):
    """[codes] section."""

    model_config = {"frozen": True}

    generator: str = "segmented"
    segments: int = Field(default=DEFAULT_SEGMENTS, ge=1)
    length: int = Field(default=DEFAULT_LENGTH, ge=1)
    charset: str = Field(default=DEFAULT_CHARSET, min_length=1)
    separator: str = DEFAULT_SEPARATOR
    prefix: str = ""
    suffix: str = ""

    @model_validator(mode="after")
    def _separator_outside_charset(self) -> CodesConfig:
        if self.separator and set(self.separator) & set(self.charset):
            msg = f"separator {self.separator!r} overlaps charset"
            raise ValueError(msg)
        return self


class BagConfig(BaseModel):
    """[bag] section."""

    model_config = {"frozen": True}

    max_retries: int = Field(default=DEFAULT_MAX_RETRIES, ge=1)
    seed: int | None = None


class VouchersConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    codes: CodesConfig = Field(default_factory=CodesConfig)
    bag: BagConfig = Field(default_factory=BagConfig)
