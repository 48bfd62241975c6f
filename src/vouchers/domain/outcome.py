"""Outcome values and the voucher error taxonomy.

Domain operations never raise for business-rule failures. They return an
:class:`Outcome` whose ``error`` names one of the :class:`ErrorKind` values,
and callers branch on ``outcome.ok`` / ``outcome.error.kind``.

Constructors cannot return a value, so ``Voucher(...)`` raises
:class:`VoucherFailure` carrying the same structured :class:`VoucherError`.
``Outcome.unwrap()`` does the same for callers that prefer exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class ErrorKind(StrEnum):
    """Every failure the voucher core can report."""

    REQUIRED_VIOLATION = "required_violation"
    IMMUTABLE_VIOLATION = "immutable_violation"
    FORMAT_VIOLATION = "format_violation"
    DUPLICATE_CODE = "duplicate_code"
    MODEL_MISMATCH = "model_mismatch"
    GENERATION_EXHAUSTED = "generation_exhausted"
    NO_VALID_VOUCHERS = "no_valid_vouchers"
    CODE_NOT_FOUND = "code_not_found"
    VOUCHER_NOT_VALID = "voucher_not_valid"


class VoucherError(BaseModel):
    """Structured error payload within an Outcome."""

    model_config = {"frozen": True}

    kind: ErrorKind
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class VoucherFailure(Exception):
    """Raised by constructors and ``Outcome.unwrap()``."""

    def __init__(self, error: VoucherError) -> None:
        super().__init__(error.message)
        self.error = error

    @property
    def kind(self) -> ErrorKind:
        return self.error.kind


@dataclass(frozen=True)
class Outcome[T]:
    """Result of a domain operation: a value on success, an error otherwise."""

    ok: bool
    value: T | None = None
    error: VoucherError | None = None

    @classmethod
    def success(cls, value: T | None = None) -> Outcome[T]:
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str, **detail: Any) -> Outcome[T]:
        return cls(ok=False, error=VoucherError(kind=kind, message=message, detail=detail))

    @classmethod
    def from_error(cls, error: VoucherError) -> Outcome[T]:
        return cls(ok=False, error=error)

    @property
    def kind(self) -> ErrorKind | None:
        """Error kind, or None on success."""
        return self.error.kind if self.error is not None else None

    def raise_on_failure(self) -> None:
        """Raise :class:`VoucherFailure` if this outcome carries an error."""
        if self.error is not None:
            raise VoucherFailure(self.error)

    def unwrap(self) -> T:
        """Return the value, raising :class:`VoucherFailure` on failure."""
        self.raise_on_failure()
        return self.value  # type: ignore[return-value]

    def __bool__(self) -> bool:
        return self.ok
