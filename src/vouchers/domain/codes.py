"""Code generators: produce and format-check voucher code strings.

The default shape is three groups of four uppercase alphanumerics joined
by hyphens, e.g. ``FHUW-JSUJ-KSIQ``. Codes are display codes, not secrets,
so generators draw from an injectable :class:`random.Random` rather than
``secrets``; pass a seeded instance for reproducible output.

INVARIANT: ``validate()`` is a pure format check. It never requires that
a code was produced by the same generator instance.
"""

from __future__ import annotations

import random
import re
import string
from abc import ABC, abstractmethod

DEFAULT_CHARSET = string.ascii_uppercase + string.digits  # A-Z, 0-9
DEFAULT_SEGMENTS = 3
DEFAULT_LENGTH = 4
DEFAULT_SEPARATOR = "-"


class CodeGenerator(ABC):
    """Pluggable policy for producing and format-validating codes."""

    @abstractmethod
    def part(self) -> str:
        """Produce one short random segment."""
        ...

    @abstractmethod
    def generate(self) -> str:
        """Compose a full code from segments."""
        ...

    @abstractmethod
    def validate(self, code: str) -> bool:
        """Whether *code* is well-formed for this generator."""
        ...

    def with_rng(self, rng: random.Random) -> CodeGenerator:
        """Same policy drawing from *rng*. Generators without a random source return self."""
        return self


class SegmentedCodeGenerator(CodeGenerator):
    """Fixed-width segments drawn from a charset, joined by a separator.

    Args:
        segments: Number of parts per code.
        length: Characters per part.
        charset: Alphabet parts are drawn from.
        separator: String placed between parts.
        prefix: Literal text before the first part.
        suffix: Literal text after the last part.
        rng: Random source. A fresh unseeded ``random.Random`` if omitted.
    """

    def __init__(
        self,
        *,
        segments: int = DEFAULT_SEGMENTS,
        length: int = DEFAULT_LENGTH,
        charset: str = DEFAULT_CHARSET,
        separator: str = DEFAULT_SEPARATOR,
        prefix: str = "",
        suffix: str = "",
        rng: random.Random | None = None,
    ) -> None:
        if segments < 1:
            raise ValueError(f"segments must be >= 1, got {segments}")
        if length < 1:
            raise ValueError(f"length must be >= 1, got {length}")
        if not charset:
            raise ValueError("charset must not be empty")
        if separator and set(separator) & set(charset):
            raise ValueError(f"separator {separator!r} overlaps charset")

        self.segments = segments
        self.length = length
        self.charset = "".join(dict.fromkeys(charset))
        self.separator = separator
        self.prefix = prefix
        self.suffix = suffix
        self._rng = rng or random.Random()
        self._pattern = self._compile_pattern()

    def _compile_pattern(self) -> re.Pattern[str]:
        part = f"[{re.escape(self.charset)}]{{{self.length}}}"
        body = re.escape(self.separator).join([part] * self.segments)
        return re.compile(f"{re.escape(self.prefix)}{body}{re.escape(self.suffix)}")

    @property
    def pattern(self) -> re.Pattern[str]:
        """Compiled full-match pattern used by :meth:`validate`."""
        return self._pattern

    @property
    def space(self) -> int:
        """Number of distinct codes this generator can produce."""
        return len(self.charset) ** (self.length * self.segments)

    def part(self) -> str:
        return "".join(self._rng.choice(self.charset) for _ in range(self.length))

    def generate(self) -> str:
        body = self.separator.join(self.part() for _ in range(self.segments))
        return f"{self.prefix}{body}{self.suffix}"

    def validate(self, code: str) -> bool:
        if not isinstance(code, str):
            return False
        return self._pattern.fullmatch(code) is not None

    def with_rng(self, rng: random.Random) -> SegmentedCodeGenerator:
        return SegmentedCodeGenerator(
            segments=self.segments,
            length=self.length,
            charset=self.charset,
            separator=self.separator,
            prefix=self.prefix,
            suffix=self.suffix,
            rng=rng,
        )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(segments={self.segments}, length={self.length}, "
            f"charset={self.charset!r}, separator={self.separator!r})"
        )


_default_generator: CodeGenerator = SegmentedCodeGenerator()


def get_default_generator() -> CodeGenerator:
    """The process-wide generator used when a Model configures none."""
    return _default_generator


def set_default_generator(generator: CodeGenerator) -> CodeGenerator:
    """Replace the process-wide default generator. Returns the previous one."""
    global _default_generator
    previous = _default_generator
    _default_generator = generator
    return previous
