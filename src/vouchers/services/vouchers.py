"""VoucherService — generate, check, pick, and validate vouchers for the CLI.

The core keeps everything in memory. This service is the glue that turns
settings into a Model and a Bag, imports voucher records from a JSON file
(an array of objects) through ``Bag.map``, and optionally writes generated
records back out. Every method returns a :class:`ServiceResult`.
"""

from __future__ import annotations

import json
import random
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from vouchers.config.logging import get_logger
from vouchers.domain.bag import Bag
from vouchers.domain.outcome import ErrorKind
from vouchers.domain.schema import CODE_FIELD, FieldValue, Model, is_empty
from vouchers.plugins.manager import PluginManager, UnknownGeneratorError
from vouchers.services.result import ServiceResult

if TYPE_CHECKING:
    from vouchers.config.settings import VouchersSettings
    from vouchers.domain.voucher import Voucher

INVALID_INPUT = "invalid_input"
UNKNOWN_GENERATOR = "unknown_generator"
WRITE_FAILED = "write_failed"


@dataclass(frozen=True)
class FieldRule:
    """A validator built from the command line.

    ``expected=None`` means the field must be empty (e.g. not yet claimed);
    otherwise the field's string form must equal ``expected``.
    """

    field: str
    expected: str | None = None

    @classmethod
    def parse(cls, text: str) -> FieldRule:
        """Parse ``field=value`` into an equality rule."""
        name, sep, value = text.partition("=")
        if not sep or not name:
            msg = f"Expected FIELD=VALUE, got {text!r}"
            raise ValueError(msg)
        return cls(field=name, expected=value)

    def __call__(self, voucher: Voucher) -> bool:
        value = voucher.get(self.field)
        if self.expected is None:
            return is_empty(value)
        return not is_empty(value) and str(value) == self.expected

    @property
    def message(self) -> str:
        if self.expected is None:
            return f"Voucher field '{self.field}' is already set"
        return f"Voucher field '{self.field}' must be {self.expected!r}"


class VoucherService:
    """Operations behind the ``vouchers`` CLI.

    One random source, seeded from settings, backs both code generation and
    selection so a fixed ``--seed`` reproduces a whole run.
    """

    def __init__(
        self,
        settings: VouchersSettings,
        plugins: PluginManager | None = None,
    ) -> None:
        self._settings = settings
        self._plugins = plugins or PluginManager()
        self._rng = random.Random(settings.effective_seed)
        self._log = get_logger(__name__, seed=settings.effective_seed)

    # ------------------------------------------------------------------
    # Model / bag construction
    # ------------------------------------------------------------------

    def build_model(
        self,
        *,
        required: Sequence[str] = (),
        immutable: Sequence[str] = (),
    ) -> Model:
        """Model with the configured code generator plus per-field flags.

        Raises:
            UnknownGeneratorError: if ``[codes] generator`` names no plugin.
        """
        generator = self._plugins.build_generator(self._settings.codes, self._rng)
        names = [name for name in dict.fromkeys([*required, *immutable]) if name != CODE_FIELD]
        return Model(
            [
                (CODE_FIELD, {"required": True, "immutable": True, "generator": generator}),
                *(
                    (name, {"required": name in required, "immutable": name in immutable})
                    for name in names
                ),
            ]
        )

    def new_bag(self, model: Model) -> Bag:
        return Bag(model, rng=self._rng, max_retries=self._settings.bag.max_retries)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def generate(
        self,
        count: int,
        *,
        fields: Mapping[str, FieldValue] | None = None,
        required: Sequence[str] = (),
        immutable: Sequence[str] = (),
        output: Path | None = None,
    ) -> ServiceResult:
        """Fill a fresh bag with *count* vouchers; optionally write them as JSON."""
        op = "generate"
        if count < 0:
            return ServiceResult.failure(op, INVALID_INPUT, "Count must be zero or more")
        if fields and CODE_FIELD in fields:
            return ServiceResult.failure(
                op, INVALID_INPUT, "Codes are generated; 'code' cannot be set as a field"
            )

        model = self._model_or_failure(op, required=required, immutable=immutable)
        if isinstance(model, ServiceResult):
            return model

        bag = self.new_bag(model)
        outcome = bag.fill(count, dict(fields or {}))
        if outcome.error is not None:
            self._log.warning("generate_failed", kind=str(outcome.error.kind), added=len(bag))
            return ServiceResult.from_voucher_error(op, outcome.error)

        records = [voucher.to_dict() for voucher in bag]
        if output is not None:
            try:
                output.write_text(json.dumps(records, indent=2) + "\n", encoding="utf-8")
            except OSError as exc:
                return ServiceResult.failure(
                    op, WRITE_FAILED, f"Cannot write {output}: {exc}", path=str(output)
                )

        self._log.debug("generated", count=len(records), output=str(output) if output else None)
        return ServiceResult.success(
            op,
            {
                "count": len(records),
                "codes": bag.codes(),
                "items": records,
                "output": str(output) if output is not None else None,
            },
            meta=self._meta(),
        )

    def check(self, codes: Iterable[str]) -> ServiceResult:
        """Format-check *codes* against the configured generator."""
        op = "check"
        try:
            generator = self._plugins.build_generator(self._settings.codes, self._rng)
        except UnknownGeneratorError as exc:
            return ServiceResult.failure(
                op, UNKNOWN_GENERATOR, str(exc), available=exc.available
            )

        items = [{"code": code, "valid": generator.validate(code)} for code in codes]
        invalid = [item["code"] for item in items if not item["valid"]]
        if invalid:
            return ServiceResult.failure(
                op,
                str(ErrorKind.FORMAT_VIOLATION),
                f"{len(invalid)} of {len(items)} codes are malformed",
                invalid=invalid,
            )
        return ServiceResult.success(op, {"count": len(items), "items": items}, meta=self._meta())

    def pick(
        self,
        records: Path,
        *,
        rules: Sequence[FieldRule] = (),
        required: Sequence[str] = (),
        immutable: Sequence[str] = (),
    ) -> ServiceResult:
        """Random voucher from *records*, restricted to those passing *rules*."""
        op = "pick"
        bag = self._load_bag(op, records, rules=rules, required=required, immutable=immutable)
        if isinstance(bag, ServiceResult):
            return bag

        outcome = bag.pick_valid() if rules else bag.pick()
        if outcome.error is not None:
            return ServiceResult.from_voucher_error(op, outcome.error)
        voucher = outcome.unwrap()
        return ServiceResult.success(
            op,
            {"code": voucher.code, "voucher": voucher.to_dict()},
            meta={**self._meta(), "candidates": len(bag)},
        )

    def validate(
        self,
        records: Path,
        code: str,
        *,
        rules: Sequence[FieldRule] = (),
        required: Sequence[str] = (),
        immutable: Sequence[str] = (),
    ) -> ServiceResult:
        """Look up *code* in *records* and run *rules* in order."""
        op = "validate"
        bag = self._load_bag(op, records, rules=rules, required=required, immutable=immutable)
        if isinstance(bag, ServiceResult):
            return bag

        outcome = bag.validate(code)
        if outcome.error is not None:
            return ServiceResult.from_voucher_error(op, outcome.error)
        voucher = outcome.unwrap()
        return ServiceResult.success(
            op,
            {"code": voucher.code, "voucher": voucher.to_dict(), "rules": len(rules)},
            meta=self._meta(),
        )

    def list_generators(self) -> ServiceResult:
        """Registered plugins and the generator names they provide."""
        if not self._plugins.is_loaded:
            self._plugins.discover_and_load()
        return ServiceResult.success(
            "plugins",
            {
                "plugins": self._plugins.list_plugin_names(),
                "generators": self._plugins.generator_names(),
                "active": self._settings.codes.generator,
            },
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _meta(self) -> dict[str, Any]:
        return {
            "generator": self._settings.codes.generator,
            "seed": self._settings.effective_seed,
        }

    def _model_or_failure(
        self,
        op: str,
        *,
        required: Sequence[str],
        immutable: Sequence[str],
    ) -> Model | ServiceResult:
        try:
            return self.build_model(required=required, immutable=immutable)
        except UnknownGeneratorError as exc:
            return ServiceResult.failure(
                op, UNKNOWN_GENERATOR, str(exc), available=exc.available
            )

    def _load_bag(
        self,
        op: str,
        path: Path,
        *,
        rules: Sequence[FieldRule],
        required: Sequence[str],
        immutable: Sequence[str],
    ) -> Bag | ServiceResult:
        """Import records into a new bag and register *rules* as validators."""
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except OSError as exc:
            return ServiceResult.failure(op, INVALID_INPUT, f"Cannot read {path}: {exc}")
        except json.JSONDecodeError as exc:
            return ServiceResult.failure(op, INVALID_INPUT, f"Invalid JSON in {path}: {exc}")

        if not isinstance(raw, list) or not all(isinstance(item, dict) for item in raw):
            return ServiceResult.failure(
                op, INVALID_INPUT, f"{path} must contain a JSON array of objects"
            )

        model = self._model_or_failure(op, required=required, immutable=immutable)
        if isinstance(model, ServiceResult):
            return model

        bag = self.new_bag(model)
        outcome = bag.map(raw)
        if outcome.error is not None:
            return ServiceResult.from_voucher_error(op, outcome.error)

        for rule in rules:
            bag.validator(rule, rule.message)
        self._log.debug("records_loaded", path=str(path), count=len(bag), rules=len(rules))
        return bag
