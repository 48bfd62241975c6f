"""Tests for structlog configuration."""

from __future__ import annotations

import json
import logging

import pytest

from vouchers.config.logging import configure_logging, get_logger


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True)
        assert logging.getLogger("vouchers").level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_non_verbose_sets_warning(self) -> None:
        configure_logging(verbose=False)
        assert logging.getLogger("vouchers").level == logging.WARNING

    def test_json_mode_output(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        get_logger("vouchers.test", seed=7).warning("json test", answer=42)
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "json test"
        assert parsed["answer"] == 42
        assert parsed["seed"] == 7
        assert parsed["level"] == "warning"
        assert parsed["logger"] == "vouchers.test"
        assert "timestamp" in parsed

    def test_stdlib_domain_logger_gets_structured_fields(
        self, capfd: pytest.CaptureFixture[str]
    ) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("vouchers.domain.bag").debug("Filled bag with %d vouchers", 3)
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "Filled bag with 3 vouchers"
        assert parsed["level"] == "debug"
        assert parsed["logger"] == "vouchers.domain.bag"

    def test_debug_hidden_without_verbose(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=False, log_json=True)
        logging.getLogger("vouchers.domain.bag").debug("quiet please")
        logging.getLogger("somelib").info("third-party noise")
        assert capfd.readouterr().err == ""

    def test_idempotent_calls(self) -> None:
        configure_logging(verbose=True, log_json=False)
        configure_logging(verbose=True, log_json=True)
        assert len(logging.getLogger().handlers) == 1
