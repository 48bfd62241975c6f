"""End-to-end claim workflow through the CLI: generate, pick, validate."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from vouchers.cli import cli


@pytest.mark.usefixtures("_isolated_cwd")
class TestClaimWorkflow:
    def test_generate_then_claim(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        batch = tmp_path / "batch.json"
        generated = cli_runner.invoke(
            cli,
            [
                "-q",
                "--seed",
                "11",
                "generate",
                "10",
                "--field",
                "owner=Alan",
                "--field",
                "claimed_by=",
                "--output",
                str(batch),
            ],
        )
        assert generated.exit_code == 0
        codes = generated.stdout.split()

        # Claim one voucher by editing the records file.
        records = json.loads(batch.read_text(encoding="utf-8"))
        records[0]["claimed_by"] = "Bob"
        batch.write_text(json.dumps(records), encoding="utf-8")

        claimed = cli_runner.invoke(
            cli, ["validate", str(batch), codes[0], "--unset", "claimed_by"]
        )
        assert claimed.exit_code == 1
        assert "already set" in claimed.output

        for seed in range(5):
            picked = cli_runner.invoke(
                cli,
                ["-q", "--seed", str(seed), "pick", str(batch), "--unset", "claimed_by"],
            )
            assert picked.exit_code == 0
            assert picked.stdout.strip() in codes[1:]

    def test_duplicate_codes_rejected_on_import(
        self, cli_runner: CliRunner, tmp_path: Path
    ) -> None:
        batch = tmp_path / "dupes.json"
        batch.write_text(
            json.dumps(
                [
                    {"code": "AAAA-BBBB-CCCC", "owner": "Alan"},
                    {"code": "AAAA-BBBB-CCCC", "owner": "Carl"},
                ]
            ),
            encoding="utf-8",
        )
        result = cli_runner.invoke(cli, ["--json", "pick", str(batch)])
        assert result.exit_code == 1
        assert "duplicate_code" in result.output
