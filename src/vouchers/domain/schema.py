"""Voucher schema: per-field constraints and code generator overrides.

A :class:`Model` is an ordered mapping of field name to :class:`FieldSpec`.
The ``code`` field always exists, always comes first, and defaults to
``required=True, immutable=True`` unless the caller overrides it.

Models are read-only after construction and may be shared by any number
of vouchers and bags.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict

from vouchers.domain.codes import CodeGenerator, get_default_generator
from vouchers.domain.outcome import ErrorKind, Outcome

CODE_FIELD = "code"

type FieldValue = str | int | float | bool | None


def is_empty(value: Any) -> bool:
    """Empty means absent (None) or the empty string. 0 and False are values."""
    return value is None or value == ""


class FieldSpec(BaseModel):
    """Constraints for a single field."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    required: bool = False
    immutable: bool = False
    generator: CodeGenerator | None = None


type FieldOptions = FieldSpec | Mapping[str, Any]


class Model:
    """Ordered field schema shared by vouchers and bags.

    Accepts ``(name, options)`` tuples or a ``name -> options`` mapping, where
    options is a mapping of ``required`` / ``immutable`` / ``generator`` or a
    ready :class:`FieldSpec`::

        Model([("owner", {"required": True, "immutable": True}),
               ("claimed_by", {"required": True})])
    """

    def __init__(
        self,
        fields: Iterable[tuple[str, FieldOptions]] | Mapping[str, FieldOptions] = (),
    ) -> None:
        pairs = fields.items() if isinstance(fields, Mapping) else fields
        specs: dict[str, FieldSpec] = {}
        for name, options in pairs:
            if name in specs:
                raise ValueError(f"Duplicate field in model: {name!r}")
            specs[name] = self._build_spec(name, options)

        code_spec = specs.pop(CODE_FIELD, None) or FieldSpec(
            name=CODE_FIELD, required=True, immutable=True
        )
        self._specs: dict[str, FieldSpec] = {CODE_FIELD: code_spec, **specs}

    @staticmethod
    def _build_spec(name: str, options: FieldOptions) -> FieldSpec:
        if isinstance(options, FieldSpec):
            if options.name != name:
                raise ValueError(f"FieldSpec name {options.name!r} does not match {name!r}")
            return options
        defaults: dict[str, Any] = (
            {"required": True, "immutable": True} if name == CODE_FIELD else {}
        )
        return FieldSpec(name=name, **{**defaults, **dict(options)})

    # ------------------------------------------------------------------
    # Schema access
    # ------------------------------------------------------------------

    @property
    def fields(self) -> tuple[str, ...]:
        """Field names in declaration order, ``code`` first."""
        return tuple(self._specs)

    def field_spec(self, name: str) -> FieldSpec | None:
        return self._specs.get(name)

    def required_fields(self) -> tuple[str, ...]:
        return tuple(name for name, spec in self._specs.items() if spec.required)

    def generator_for(self, name: str) -> CodeGenerator:
        """The field's generator, or the process default."""
        spec = self._specs.get(name)
        if spec is not None and spec.generator is not None:
            return spec.generator
        return get_default_generator()

    def __iter__(self) -> Iterator[FieldSpec]:
        return iter(self._specs.values())

    def __contains__(self, name: object) -> bool:
        return name in self._specs

    def __len__(self) -> int:
        return len(self._specs)

    def __repr__(self) -> str:
        return f"Model({list(self._specs)!r})"

    # ------------------------------------------------------------------
    # Validation (pure)
    # ------------------------------------------------------------------

    def validate_field(
        self,
        name: str,
        value: Any,
        *,
        is_creation: bool = False,
        prior: Any = None,
        generator: CodeGenerator | None = None,
    ) -> Outcome[None]:
        """Check one field write. Order: immutable, required, format.

        Rewriting an immutable field with its current value passes.
        *generator*, when given, replaces the field's own format check.
        """
        spec = self._specs.get(name)
        if spec is None:
            return Outcome.success()

        if spec.immutable and not is_empty(prior) and value != prior:
            return Outcome.failure(
                ErrorKind.IMMUTABLE_VIOLATION,
                f"Field '{name}' is immutable",
                field=name,
                current=prior,
                attempted=value,
            )

        if is_empty(value):
            if spec.required:
                stage = "creation" if is_creation else "update"
                return Outcome.failure(
                    ErrorKind.REQUIRED_VIOLATION,
                    f"Field '{name}' is required",
                    field=name,
                    stage=stage,
                )
            return Outcome.success()

        if generator is None:
            generator = spec.generator
        if generator is None and name == CODE_FIELD:
            generator = get_default_generator()
        if generator is not None and not generator.validate(value):
            return Outcome.failure(
                ErrorKind.FORMAT_VIOLATION,
                f"Field '{name}' has an invalid format: {value!r}",
                field=name,
                value=value,
            )
        return Outcome.success()

    def validate_fields(self, fields: Mapping[str, Any]) -> Outcome[None]:
        """Check a whole field map as if creating it: present fields, then missing required."""
        for name, value in fields.items():
            outcome = self.validate_field(name, value, is_creation=True)
            if not outcome.ok:
                return outcome
        for name in self.required_fields():
            if name not in fields:
                return self.validate_field(name, None, is_creation=True)
        return Outcome.success()
