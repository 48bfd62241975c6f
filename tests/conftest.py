"""Shared pytest fixtures and test helpers for vouchers tests."""

from __future__ import annotations

import json
import logging
import random
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from vouchers.domain.codes import get_default_generator, set_default_generator
from vouchers.domain.schema import Model


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source so generation and selection are reproducible."""
    return random.Random(1234)


@pytest.fixture
def claim_model() -> Model:
    """``owner`` required + immutable, ``claimed_by`` required."""
    return Model(
        [
            ("owner", {"required": True, "immutable": True}),
            ("claimed_by", {"required": True}),
        ]
    )


@pytest.fixture(autouse=True)
def _restore_default_generator() -> Generator[None]:
    """Tests may swap the process-wide generator; put the original back."""
    original = get_default_generator()
    yield
    set_default_generator(original)


@pytest.fixture(autouse=True)
def _restore_root_logging() -> Generator[None]:
    """CLI invocations reconfigure logging; undo it after each test."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    package_level = logging.getLogger("vouchers").level
    yield
    root.handlers = handlers
    root.setLevel(level)
    logging.getLogger("vouchers").setLevel(package_level)


@pytest.fixture
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run in an empty directory with no vouchers.toml in reach."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("VOUCHERS_CONFIG", str(tmp_path / "missing.toml"))


SAMPLE_RECORDS: list[dict[str, Any]] = [
    {"code": "AAAA-BBBB-CCCC", "owner": "Alan", "claimed_by": "Bob"},
    {"code": "DDDD-EEEE-FFFF", "owner": "Alan", "claimed_by": None},
    {"code": "GGGG-HHHH-1234", "owner": "Carl", "claimed_by": "Dana"},
]


@pytest.fixture
def records_file(tmp_path: Path) -> Path:
    """Three vouchers; only DDDD-EEEE-FFFF is unclaimed."""
    path = tmp_path / "vouchers.json"
    path.write_text(json.dumps(SAMPLE_RECORDS), encoding="utf-8")
    return path
