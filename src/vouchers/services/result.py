"""ServiceResult and ServiceError — the contract between services and the CLI.

Domain outcomes carry an :class:`~vouchers.domain.outcome.ErrorKind`; at
this boundary the kind becomes ``ServiceError.code`` so JSON consumers can
branch on it without importing the domain layer.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from vouchers.domain.outcome import VoucherError


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Return type for every service operation.

    Attributes:
        ok: Whether the operation succeeded.
        op: Operation name (``"generate"``, ``"pick"``, ...).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (seed, generator, counts).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def success(
        cls,
        op: str,
        data: dict[str, Any] | None = None,
        *,
        warnings: list[str] | None = None,
        meta: dict[str, Any] | None = None,
    ) -> ServiceResult:
        return cls(ok=True, op=op, data=data or {}, warnings=warnings or [], meta=meta)

    @classmethod
    def failure(cls, op: str, code: str, message: str, **detail: Any) -> ServiceResult:
        return cls(ok=False, op=op, error=ServiceError(code=code, message=message, detail=detail))

    @classmethod
    def from_voucher_error(cls, op: str, error: VoucherError) -> ServiceResult:
        """Translate a domain error, keeping its kind as the error code."""
        return cls.failure(op, str(error.kind), error.message, **error.detail)
