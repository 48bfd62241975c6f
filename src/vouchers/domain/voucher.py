"""Voucher entity: a code plus arbitrary scalar attributes.

When bound to a :class:`Model`, every construction and ``set`` is checked
against it. Construction is all-or-nothing; ``set`` is atomic per field.

INVARIANT: A voucher's ``code`` is always non-empty and well-formed for the
active generator. Uniqueness is the owning Bag's concern.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import TYPE_CHECKING, Any

from vouchers.domain.codes import CodeGenerator, get_default_generator
from vouchers.domain.outcome import ErrorKind, Outcome, VoucherFailure
from vouchers.domain.schema import CODE_FIELD, FieldValue, Model, is_empty

if TYPE_CHECKING:
    from vouchers.domain.bag import Bag


class Voucher:
    """A mapping of field name to scalar value, optionally bound to a Model.

    Args:
        fields: Mapping or ``(name, value)`` pairs, applied in order.
        model: Shared schema to enforce. None for an unbound voucher.
        generator: Overrides the code generator that produces and checks ``code``.

    Raises:
        VoucherFailure: on the first field violation.
    """

    __slots__ = ("_fields", "_generator", "_owners", "model")

    def __init__(
        self,
        fields: Mapping[str, FieldValue] | Iterable[tuple[str, FieldValue]] | None = None,
        model: Model | None = None,
        *,
        generator: CodeGenerator | None = None,
    ) -> None:
        self.model = model
        self._generator = generator
        self._owners: list[Bag] = []
        self._fields = self._build(fields)

    @classmethod
    def create(
        cls,
        fields: Mapping[str, FieldValue] | Iterable[tuple[str, FieldValue]] | None = None,
        model: Model | None = None,
        *,
        generator: CodeGenerator | None = None,
    ) -> Outcome[Voucher]:
        """Non-raising construction."""
        try:
            return Outcome.success(cls(fields, model, generator=generator))
        except VoucherFailure as exc:
            return Outcome.from_error(exc.error)

    def _build(
        self,
        fields: Mapping[str, FieldValue] | Iterable[tuple[str, FieldValue]] | None,
    ) -> dict[str, FieldValue]:
        pairs = list(fields.items() if isinstance(fields, Mapping) else fields or ())

        built: dict[str, FieldValue] = {}
        if not any(name == CODE_FIELD for name, _ in pairs):
            built[CODE_FIELD] = self.generator.generate()

        for name, value in pairs:
            self._check(name, value, prior=built.get(name), is_creation=True).raise_on_failure()
            built[name] = value

        # Generated codes get the same format check as supplied ones.
        self._check(CODE_FIELD, built[CODE_FIELD], is_creation=True).raise_on_failure()

        if self.model is not None:
            for name in self.model.required_fields():
                if name not in built:
                    self.model.validate_field(name, None, is_creation=True).raise_on_failure()
        return built

    def _check(
        self, name: str, value: Any, *, prior: Any = None, is_creation: bool = False
    ) -> Outcome[None]:
        if self.model is not None:
            # An explicit generator decides the code format, not the model's.
            generator = self._generator if name == CODE_FIELD else None
            return self.model.validate_field(
                name, value, is_creation=is_creation, prior=prior, generator=generator
            )
        # Unbound vouchers still keep a non-empty, well-formed code.
        if name != CODE_FIELD:
            return Outcome.success()
        if is_empty(value):
            return Outcome.failure(
                ErrorKind.REQUIRED_VIOLATION, "Field 'code' is required", field=CODE_FIELD
            )
        if not self.generator.validate(value):
            return Outcome.failure(
                ErrorKind.FORMAT_VIOLATION,
                f"Field 'code' has an invalid format: {value!r}",
                field=CODE_FIELD,
                value=value,
            )
        return Outcome.success()

    @property
    def generator(self) -> CodeGenerator:
        """The code generator in effect for this voucher."""
        if self._generator is not None:
            return self._generator
        if self.model is not None:
            return self.model.generator_for(CODE_FIELD)
        return get_default_generator()

    # ------------------------------------------------------------------
    # Field access
    # ------------------------------------------------------------------

    @property
    def code(self) -> str:
        return str(self._fields[CODE_FIELD])

    def get(self, name: str, default: FieldValue = None) -> FieldValue:
        return self._fields.get(name, default)

    def set(self, name: str, value: FieldValue) -> Outcome[Voucher]:
        """Write one field. On failure the voucher is left unchanged.

        Setting an immutable field to its current value is a no-op success.
        """
        prior = self._fields.get(name)
        outcome = self._check(name, value, prior=prior)
        if outcome.error is not None:
            return Outcome.from_error(outcome.error)
        if name in self._fields and prior == value:
            return Outcome.success(self)

        if name == CODE_FIELD and self._owners:
            for bag in self._owners:
                if not bag._code_available(str(value), self):
                    return Outcome.failure(
                        ErrorKind.DUPLICATE_CODE,
                        f"Code {value!r} already exists in an owning bag",
                        code=value,
                    )
            for bag in self._owners:
                bag._rekey(self, self.code, str(value))

        self._fields[name] = value
        return Outcome.success(self)

    def as_string(self) -> str:
        """Canonical external representation: the code."""
        return self.code

    def items(self) -> Iterator[tuple[str, FieldValue]]:
        """Fresh iterator over ``(name, value)`` in insertion order."""
        return iter(list(self._fields.items()))

    def to_dict(self) -> dict[str, FieldValue]:
        return dict(self._fields)

    def __getitem__(self, name: str) -> FieldValue:
        return self._fields[name]

    def __contains__(self, name: object) -> bool:
        return name in self._fields

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._fields))

    def __len__(self) -> int:
        return len(self._fields)

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"Voucher({self._fields!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Voucher):
            return NotImplemented
        return self._fields == other._fields

    __hash__ = None  # type: ignore[assignment]
