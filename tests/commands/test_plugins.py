"""Tests for the plugins CLI command."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from vouchers.cli import cli


@pytest.mark.usefixtures("_isolated_cwd")
class TestPluginsCommand:
    def test_lists_generators(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["plugins"])
        assert result.exit_code == 0
        assert "segmented (active)" in result.output
        assert "numeric" in result.output

    def test_json(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "plugins"])
        data = json.loads(result.stdout)
        assert data["op"] == "plugins"
        assert "builtin-generators" in data["data"]["plugins"]
