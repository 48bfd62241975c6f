"""Bag: a uniquely-keyed, insertion-ordered collection of vouchers.

A bag adds collection-wide rules on top of per-voucher validation:

- Code uniqueness across every contained voucher.
- Model conformance for vouchers added from elsewhere (``ModelMismatch``).
- Randomized selection without replacement (``pick`` / ``pick_valid``).
- An ordered validator chain that short-circuits in ``validate``.

INVARIANT: Iteration order is insertion order, independent of the code
index used by ``find``.

Bags provide no internal locking. Callers sharing a bag across threads
must serialize ``add``/``fill``/``map``/``pick``/``validator`` themselves.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass

from vouchers.domain.codes import CodeGenerator, get_default_generator
from vouchers.domain.outcome import ErrorKind, Outcome, VoucherFailure
from vouchers.domain.schema import CODE_FIELD, FieldValue, Model
from vouchers.domain.voucher import Voucher

logger = logging.getLogger(__name__)

DEFAULT_MAX_RETRIES = 100  # generation attempts per voucher in fill()

type Predicate = Callable[[Voucher], bool]
type FieldTemplate = Mapping[str, FieldValue] | Callable[[int], Mapping[str, FieldValue]]


@dataclass(frozen=True)
class Validator:
    """A business rule evaluated by ``Bag.validate``."""

    predicate: Predicate
    message: str


class Bag:
    """Collection of vouchers keyed by code.

    Args:
        model: Schema shared with every contained voucher.
        rng: Random source for ``pick``. A fresh unseeded one if omitted.
        max_retries: Code generation attempts per voucher in ``fill``.
    """

    def __init__(
        self,
        model: Model | None = None,
        *,
        rng: random.Random | None = None,
        max_retries: int = DEFAULT_MAX_RETRIES,
    ) -> None:
        if max_retries < 1:
            raise ValueError(f"max_retries must be >= 1, got {max_retries}")
        self.model = model
        self.max_retries = max_retries
        self._rng = rng or random.Random()
        self._items: list[Voucher] = []
        self._index: dict[str, Voucher] = {}
        self._validators: list[Validator] = []

    @property
    def generator(self) -> CodeGenerator:
        """Generator used by ``fill`` for new codes.

        The model's code generator if it configures one. Otherwise the
        process default, redrawn from this bag's random source so a seeded
        bag generates reproducibly.
        """
        spec = self.model.field_spec(CODE_FIELD) if self.model is not None else None
        if spec is not None and spec.generator is not None:
            return spec.generator
        return get_default_generator().with_rng(self._rng)

    # ------------------------------------------------------------------
    # Population
    # ------------------------------------------------------------------

    def add(self, voucher: Voucher) -> Outcome[Voucher]:
        """Insert *voucher*. Fails on a duplicate code or a model conflict."""
        code = voucher.code
        if code in self._index:
            return Outcome.failure(
                ErrorKind.DUPLICATE_CODE,
                f"Code {code!r} already exists in this bag",
                code=code,
            )

        if self.model is not None and voucher.model is not self.model:
            if any(owner.model is not None for owner in voucher._owners):
                return Outcome.failure(
                    ErrorKind.MODEL_MISMATCH,
                    f"Voucher {code!r} is already held by a bag with a different model",
                    code=code,
                )
            check = self.model.validate_fields(voucher.to_dict())
            if check.error is not None:
                return Outcome.failure(
                    ErrorKind.MODEL_MISMATCH,
                    f"Voucher {code!r} does not satisfy the bag's model: {check.error.message}",
                    code=code,
                    violation=check.error.model_dump(mode="json"),
                )
            voucher.model = self.model

        self._items.append(voucher)
        self._index[code] = voucher
        voucher._owners.append(self)
        return Outcome.success(voucher)

    def fill(self, n: int, fields: FieldTemplate | None = None) -> Outcome[list[Voucher]]:
        """Generate and add *n* new vouchers.

        *fields* is merged into each new voucher: a mapping, or a callable
        receiving the item index. Colliding codes are regenerated up to
        ``max_retries`` times per voucher. Vouchers added before a failure
        stay in the bag.
        """
        if n < 0:
            raise ValueError(f"fill() count must be >= 0, got {n}")

        generator = self.generator
        added: list[Voucher] = []
        for index in range(n):
            extra = dict(fields(index) if callable(fields) else fields or {})
            if CODE_FIELD in extra:
                raise ValueError("fill() generates codes; field templates must not set 'code'")

            code = self._unique_code(generator)
            if code is None:
                logger.warning(
                    "Code generation exhausted after %d attempts (%d of %d added)",
                    self.max_retries,
                    len(added),
                    n,
                )
                return Outcome.failure(
                    ErrorKind.GENERATION_EXHAUSTED,
                    f"No unused code found after {self.max_retries} attempts",
                    attempts=self.max_retries,
                    index=index,
                    added=len(added),
                )

            created = Voucher.create({CODE_FIELD: code, **extra}, self.model)
            if created.error is not None:
                return Outcome.failure(
                    created.error.kind,
                    created.error.message,
                    **created.error.detail,
                    index=index,
                    added=len(added),
                )
            voucher = created.unwrap()
            self.add(voucher).unwrap()
            added.append(voucher)

        logger.debug("Filled bag with %d vouchers (size=%d)", len(added), len(self))
        return Outcome.success(added)

    def _unique_code(self, generator: CodeGenerator) -> str | None:
        for _ in range(self.max_retries):
            code = generator.generate()
            if code not in self._index:
                return code
        return None

    def map[T](
        self,
        items: Iterable[T],
        transform: Callable[[T], Voucher] | None = None,
    ) -> Outcome[list[Voucher]]:
        """Turn each item into a voucher and add it, stopping at the first failure.

        Without *transform*, each item is treated as a field mapping for a
        voucher bound to the bag's model.
        """
        build = transform or (lambda item: Voucher(item, self.model))  # type: ignore[arg-type]
        added: list[Voucher] = []
        for index, item in enumerate(items):
            try:
                outcome = self.add(build(item))
            except VoucherFailure as exc:
                outcome = Outcome.from_error(exc.error)
            if outcome.error is not None:
                logger.debug("map() stopped at item %d: %s", index, outcome.error.message)
                return Outcome.failure(
                    outcome.error.kind,
                    f"Item {index}: {outcome.error.message}",
                    **outcome.error.detail,
                    index=index,
                    item=repr(item),
                    added=len(added),
                )
            added.append(outcome.unwrap())
        return Outcome.success(added)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def find(self, code: str) -> Voucher | None:
        return self._index.get(code)

    def codes(self) -> list[str]:
        return [voucher.code for voucher in self._items]

    def vouchers(self) -> Iterator[Voucher]:
        """Fresh iterator in insertion order."""
        return iter(list(self._items))

    def __iter__(self) -> Iterator[Voucher]:
        return self.vouchers()

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, code: object) -> bool:
        return code in self._index

    def __getitem__(self, code: str) -> Voucher:
        return self._index[code]

    def __repr__(self) -> str:
        return f"Bag(size={len(self)}, validators={len(self._validators)})"

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def pick(self, predicate: Predicate | None = None) -> Outcome[Voucher]:
        """Random voucher, optionally the first accepted by *predicate*.

        With a predicate, candidates come from a random permutation of the
        bag, so each voucher is examined at most once.
        """
        if not self._items:
            return Outcome.failure(ErrorKind.NO_VALID_VOUCHERS, "Bag is empty", examined=0)
        if predicate is None:
            return Outcome.success(self._rng.choice(self._items))

        examined = 0
        for candidate in self._permutation():
            examined += 1
            if predicate(candidate):
                logger.debug("pick() accepted %s after %d candidates", candidate.code, examined)
                return Outcome.success(candidate)
        return Outcome.failure(
            ErrorKind.NO_VALID_VOUCHERS,
            "No voucher satisfies the selection rule",
            examined=examined,
        )

    def pick_valid(self) -> Outcome[Voucher]:
        """Random voucher passing every registered validator."""
        return self.pick(self.is_valid)

    def _permutation(self) -> Iterator[Voucher]:
        """Lazy Fisher-Yates shuffle over a snapshot of the bag."""
        pool = list(self._items)
        size = len(pool)
        for i in range(size):
            j = self._rng.randrange(i, size)
            pool[i], pool[j] = pool[j], pool[i]
            yield pool[i]

    # ------------------------------------------------------------------
    # Validator chain
    # ------------------------------------------------------------------

    def validator(self, predicate: Predicate, message: str) -> Bag:
        """Append a rule to the chain. Returns the bag for chaining."""
        self._validators.append(Validator(predicate=predicate, message=message))
        return self

    @property
    def validators(self) -> tuple[Validator, ...]:
        return tuple(self._validators)

    def is_valid(self, voucher: Voucher) -> bool:
        """Whether *voucher* passes every registered validator."""
        return all(rule.predicate(voucher) for rule in self._validators)

    def validate(self, code: str) -> Outcome[Voucher]:
        """Look up *code* and run the chain in order, stopping at the first failure."""
        voucher = self._index.get(code)
        if voucher is None:
            return Outcome.failure(
                ErrorKind.CODE_NOT_FOUND, f"Code {code!r} not found", code=code
            )
        for position, rule in enumerate(self._validators):
            if not rule.predicate(voucher):
                return Outcome.failure(
                    ErrorKind.VOUCHER_NOT_VALID, rule.message, code=code, validator=position
                )
        return Outcome.success(voucher)

    # ------------------------------------------------------------------
    # Re-keying (called by Voucher.set on code changes)
    # ------------------------------------------------------------------

    def _code_available(self, code: str, voucher: Voucher) -> bool:
        holder = self._index.get(code)
        return holder is None or holder is voucher

    def _rekey(self, voucher: Voucher, old: str, new: str) -> None:
        if self._index.get(old) is voucher:
            del self._index[old]
        self._index[new] = voucher
