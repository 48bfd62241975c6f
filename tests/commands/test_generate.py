"""Tests for the generate CLI command."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from vouchers.cli import cli
from vouchers.domain.codes import SegmentedCodeGenerator


@pytest.mark.usefixtures("_isolated_cwd")
class TestGenerateCommand:
    def test_default_one_voucher(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "generate"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["ok"] is True
        assert data["data"]["count"] == 1
        assert SegmentedCodeGenerator().validate(data["data"]["codes"][0])

    def test_fields_and_flags(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli,
            ["--json", "generate", "3", "--field", "owner=Alan", "--required", "owner"],
        )
        assert result.exit_code == 0
        items = json.loads(result.stdout)["data"]["items"]
        assert [item["owner"] for item in items] == ["Alan"] * 3

    def test_seed_reproducible(self, cli_runner: CliRunner) -> None:
        first = cli_runner.invoke(cli, ["-q", "--seed", "42", "generate", "4"])
        second = cli_runner.invoke(cli, ["-q", "--seed", "42", "generate", "4"])
        assert first.exit_code == 0
        assert first.stdout == second.stdout
        assert len(first.stdout.split()) == 4

    def test_quiet_prints_codes(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-q", "generate", "2"])
        assert result.exit_code == 0
        assert len(result.stdout.strip().splitlines()) == 2

    def test_rich_output(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["generate", "2", "--field", "tier=gold"])
        assert result.exit_code == 0
        assert "OK" in result.output
        assert "tier" in result.output
        assert "count: 2" in result.output

    def test_output_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        out = tmp_path / "batch.json"
        result = cli_runner.invoke(cli, ["-q", "generate", "5", "--output", str(out)])
        assert result.exit_code == 0
        records = json.loads(out.read_text(encoding="utf-8"))
        assert [r["code"] for r in records] == result.stdout.split()

    def test_config_shapes_codes(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        config = tmp_path / "custom.toml"
        config.write_text('[codes]\nsegments = 2\nlength = 5\nprefix = "GIFT-"\n')
        result = cli_runner.invoke(cli, ["-q", "-c", str(config), "generate"])
        assert result.exit_code == 0
        code = result.stdout.strip()
        assert code.startswith("GIFT-")
        assert len(code) == len("GIFT-") + 11

    def test_numeric_generator_via_env(
        self, cli_runner: CliRunner, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("VOUCHERS_CODES__GENERATOR", "numeric")
        result = cli_runner.invoke(cli, ["-q", "generate"])
        assert result.exit_code == 0
        assert result.stdout.strip().replace("-", "").isdigit()

    def test_code_field_rejected(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["generate", "--field", "code=AAAA-BBBB-CCCC"])
        assert result.exit_code == 1
        assert "cannot be set" in result.output

    def test_bad_field_syntax(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["generate", "--field", "owner"])
        assert result.exit_code == 2
        assert "KEY=VALUE" in result.output

    def test_negative_count_rejected_by_click(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["generate", "--", "-1"])
        assert result.exit_code == 2

    def test_required_missing_json_error(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "generate", "--required", "owner"])
        assert result.exit_code == 1
        assert "required_violation" in result.output
