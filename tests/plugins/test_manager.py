"""Tests for PluginManager: discovery, registration, and the generator registry."""

from __future__ import annotations

import logging
import random

import pytest

from vouchers.config.models import CodesConfig
from vouchers.domain.codes import CodeGenerator, SegmentedCodeGenerator
from vouchers.plugins import hookimpl
from vouchers.plugins.manager import BUILTIN_PLUGIN_NAME, PluginManager, UnknownGeneratorError


def _hex(config: CodesConfig, rng: random.Random | None) -> CodeGenerator:
    return SegmentedCodeGenerator(
        segments=config.segments, length=config.length, charset="0123456789ABCDEF", rng=rng
    )


class _HexPlugin:
    @hookimpl
    def register_code_generators(self) -> dict[str, object]:
        return {"hex": _hex}


class _ShadowingPlugin:
    @hookimpl
    def register_code_generators(self) -> dict[str, object]:
        return {"segmented": _hex, "shadow": _hex}


class _BrokenPlugin:
    @hookimpl
    def register_code_generators(self) -> dict[str, object]:
        raise RuntimeError("boom")


class _NotADictPlugin:
    @hookimpl
    def register_code_generators(self) -> list[str]:
        return ["hex"]


class _NotCallablePlugin:
    @hookimpl
    def register_code_generators(self) -> dict[str, object]:
        return {"weird": "not callable"}


class _SilentPlugin:
    """Registers no hooks at all."""


@pytest.fixture
def pm() -> PluginManager:
    manager = PluginManager()
    manager.discover_and_load(entry_points=False)
    return manager


class TestRegistration:
    def test_builtins_registered_first(self) -> None:
        assert PluginManager().list_plugin_names() == [BUILTIN_PLUGIN_NAME]

    def test_builtin_generators(self, pm: PluginManager) -> None:
        assert pm.generator_names() == ["numeric", "segmented"]

    def test_register_plugin(self, pm: PluginManager) -> None:
        pm.register_plugin(_HexPlugin(), name="hex")
        assert "hex" in pm.list_plugin_names()
        assert "hex" in pm.generator_names()

    def test_register_plugin_default_name(self, pm: PluginManager) -> None:
        pm.register_plugin(_SilentPlugin())
        assert "_SilentPlugin" in pm.list_plugin_names()

    def test_register_before_load(self) -> None:
        manager = PluginManager()
        manager.register_plugin(_HexPlugin(), name="hex")
        assert not manager.is_loaded
        manager.discover_and_load(entry_points=False)
        assert "hex" in manager.generator_names()

    def test_unregister_drops_generators(self, pm: PluginManager) -> None:
        plugin = _HexPlugin()
        pm.register_plugin(plugin, name="hex")
        pm.unregister(plugin)
        assert "hex" not in pm.list_plugin_names()
        assert "hex" not in pm.generator_names()

    def test_hook_relay(self, pm: PluginManager) -> None:
        results = pm.hook.register_code_generators()
        assert any("segmented" in result for result in results)


class TestRegistryConflicts:
    def test_first_claim_wins(self, pm: PluginManager, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="vouchers.plugins.manager"):
            pm.register_plugin(_ShadowingPlugin(), name="shadowing")
        generator = pm.build_generator(CodesConfig(), random.Random(1))
        assert generator.validate("ABCD-EFGH-WXYZ")
        assert "shadow" in pm.generator_names()
        assert "already registered" in caplog.text

    def test_shadowing_stays_lost_after_reload(self, pm: PluginManager) -> None:
        pm.register_plugin(_ShadowingPlugin(), name="shadowing")
        pm.discover_and_load(entry_points=False)
        assert pm.build_generator(CodesConfig()).validate("WXYZ-WXYZ-WXYZ")

    @pytest.mark.parametrize(
        ("plugin", "expected_log"),
        [
            (_BrokenPlugin(), "Failed to collect"),
            (_NotADictPlugin(), "non-dict"),
            (_NotCallablePlugin(), "not callable"),
        ],
    )
    def test_bad_plugins_skipped(
        self,
        pm: PluginManager,
        caplog: pytest.LogCaptureFixture,
        plugin: object,
        expected_log: str,
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="vouchers.plugins.manager"):
            pm.register_plugin(plugin, name="bad")
        assert pm.generator_names() == ["numeric", "segmented"]
        assert expected_log in caplog.text


class TestBuildGenerator:
    def test_default_segmented(self) -> None:
        generator = PluginManager().build_generator(CodesConfig(), random.Random(3))
        assert generator.validate(generator.generate())

    def test_config_shapes_generator(self, pm: PluginManager) -> None:
        config = CodesConfig(segments=2, length=3, separator="_", prefix="GIFT-")
        code = pm.build_generator(config, random.Random(3)).generate()
        assert code.startswith("GIFT-")
        assert len(code) == len("GIFT-") + 7
        assert code[8] == "_"

    def test_numeric(self, pm: PluginManager) -> None:
        code = pm.build_generator(CodesConfig(generator="numeric"), random.Random(3)).generate()
        assert code.replace("-", "").isdigit()

    def test_seeded_rng_reproducible(self, pm: PluginManager) -> None:
        first = pm.build_generator(CodesConfig(), random.Random(9)).generate()
        second = pm.build_generator(CodesConfig(), random.Random(9)).generate()
        assert first == second

    def test_unknown_generator(self, pm: PluginManager) -> None:
        with pytest.raises(UnknownGeneratorError) as exc_info:
            pm.build_generator(CodesConfig(generator="missing"))
        assert exc_info.value.name == "missing"
        assert exc_info.value.available == ["numeric", "segmented"]
        assert "available: numeric, segmented" in str(exc_info.value)
