"""Tests for the check CLI command."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from vouchers.cli import cli


@pytest.mark.usefixtures("_isolated_cwd")
class TestCheckCommand:
    def test_valid_codes(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "check", "FHUW-JSUJ-KSIQ", "AAAA-1111-ZZZZ"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["data"]["count"] == 2

    def test_malformed_code_exits_1(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["check", "FHUW-JSUJ-KSIQ", "fhuw-jsuj-ksiq"])
        assert result.exit_code == 1
        assert "1 of 2 codes are malformed" in result.output

    def test_reads_stdin(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli, ["--json", "check"], input="FHUW-JSUJ-KSIQ\n\nAAAA-BBBB-CCCC\n"
        )
        assert result.exit_code == 0
        items = json.loads(result.stdout)["data"]["items"]
        assert [item["code"] for item in items] == ["FHUW-JSUJ-KSIQ", "AAAA-BBBB-CCCC"]

    def test_generated_codes_pass(self, cli_runner: CliRunner) -> None:
        codes = cli_runner.invoke(cli, ["-q", "generate", "20"]).stdout.split()
        result = cli_runner.invoke(cli, ["-q", "check", *codes])
        assert result.exit_code == 0
