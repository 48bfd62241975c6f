"""Config file discovery and loading.

Walk-up finder locates vouchers.toml, similar to how git finds .git/.
Supports VOUCHERS_CONFIG env var and --config CLI flag overrides.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from vouchers.config.models import VouchersConfig

CONFIG_FILENAME = "vouchers.toml"
CONFIG_ENV_VAR = "VOUCHERS_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for vouchers.toml.

    Returns the path to the config file, or None if not found.
    Checks VOUCHERS_CONFIG env var first.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        return p if p.is_file() else None

    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        if current.parent == current:
            return None
        current = current.parent


def load_config(path: Path | None = None, cwd: Path | None = None) -> VouchersConfig:
    """Load and validate config from a TOML file, or defaults if none is found."""
    if path is None:
        path = find_config(cwd)
    if path is None:
        return VouchersConfig()

    data: dict[str, Any] = tomllib.loads(path.read_text(encoding="utf-8"))
    return VouchersConfig.model_validate(data)
