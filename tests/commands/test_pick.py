"""Tests for the pick CLI command."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from vouchers.cli import cli


@pytest.mark.usefixtures("_isolated_cwd")
class TestPickCommand:
    def test_pick_any(self, cli_runner: CliRunner, records_file: Path) -> None:
        result = cli_runner.invoke(cli, ["--json", "pick", str(records_file)])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["data"]["code"] in {"AAAA-BBBB-CCCC", "DDDD-EEEE-FFFF", "GGGG-HHHH-1234"}

    @pytest.mark.parametrize("seed", ["1", "2", "3", "4", "5"])
    def test_unset_rule(self, cli_runner: CliRunner, records_file: Path, seed: str) -> None:
        result = cli_runner.invoke(
            cli, ["-q", "--seed", seed, "pick", str(records_file), "--unset", "claimed_by"]
        )
        assert result.exit_code == 0
        assert result.stdout.strip() == "DDDD-EEEE-FFFF"

    def test_where_rule(self, cli_runner: CliRunner, records_file: Path) -> None:
        result = cli_runner.invoke(
            cli, ["-q", "pick", str(records_file), "--where", "owner=Carl"]
        )
        assert result.exit_code == 0
        assert result.stdout.strip() == "GGGG-HHHH-1234"

    def test_nothing_acceptable(self, cli_runner: CliRunner, records_file: Path) -> None:
        result = cli_runner.invoke(
            cli,
            ["pick", str(records_file), "--where", "owner=Carl", "--unset", "claimed_by"],
        )
        assert result.exit_code == 1
        assert "No voucher satisfies" in result.output

    def test_bad_where_syntax(self, cli_runner: CliRunner, records_file: Path) -> None:
        result = cli_runner.invoke(cli, ["pick", str(records_file), "--where", "owner"])
        assert result.exit_code == 2
        assert "FIELD=VALUE" in result.output

    def test_missing_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = cli_runner.invoke(cli, ["pick", str(tmp_path / "nope.json")])
        assert result.exit_code == 2

    def test_records_violating_model(self, cli_runner: CliRunner, records_file: Path) -> None:
        result = cli_runner.invoke(
            cli, ["--json", "pick", str(records_file), "--required", "claimed_by"]
        )
        assert result.exit_code == 1
        assert "required_violation" in result.output
