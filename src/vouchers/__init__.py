"""vouchers — generate, store, and validate voucher codes bound to metadata."""

from vouchers.domain import (
    CODE_FIELD,
    Bag,
    CodeGenerator,
    ErrorKind,
    FieldSpec,
    Model,
    Outcome,
    SegmentedCodeGenerator,
    Voucher,
    VoucherError,
    VoucherFailure,
)

__version__ = "0.1.0"

__all__ = [
    "CODE_FIELD",
    "Bag",
    "CodeGenerator",
    "ErrorKind",
    "FieldSpec",
    "Model",
    "Outcome",
    "SegmentedCodeGenerator",
    "Voucher",
    "VoucherError",
    "VoucherFailure",
    "__version__",
]
