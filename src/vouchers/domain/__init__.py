"""Domain layer — code generators, schema, vouchers, bags.

This layer depends only on stdlib and pydantic.
It must never import from services, config, plugins, output, or commands.
"""

from vouchers.domain.bag import DEFAULT_MAX_RETRIES, Bag, Validator
from vouchers.domain.codes import (
    CodeGenerator,
    SegmentedCodeGenerator,
    get_default_generator,
    set_default_generator,
)
from vouchers.domain.outcome import ErrorKind, Outcome, VoucherError, VoucherFailure
from vouchers.domain.schema import CODE_FIELD, FieldSpec, Model, is_empty
from vouchers.domain.voucher import Voucher

__all__ = [
    "CODE_FIELD",
    "DEFAULT_MAX_RETRIES",
    "Bag",
    "CodeGenerator",
    "ErrorKind",
    "FieldSpec",
    "Model",
    "Outcome",
    "SegmentedCodeGenerator",
    "Validator",
    "Voucher",
    "VoucherError",
    "VoucherFailure",
    "get_default_generator",
    "is_empty",
    "set_default_generator",
]
