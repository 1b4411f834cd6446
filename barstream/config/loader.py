"""YAML loaders for the config subsystem.

Each helper here consumes one YAML file, validates it via models.py and
returns typed objects to the caller.
"""
from __future__ import annotations

from pathlib import Path
from typing import Mapping

import yaml
from pydantic import ValidationError

from barstream.core.errors import ConfigurationError

from .models import EngineConfig

_DEFAULT_CONFIG_DIR = Path("config")


def _read_yaml(path: Path) -> Mapping:
    """Read a YAML file and return a mapping (empty dict if file is blank)."""

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with path.open("r", encoding="utf-8") as fp:
        data = yaml.safe_load(fp) or {}
    if not isinstance(data, Mapping):
        raise ValueError(f"YAML root must be a mapping in {path}")
    return data


def load_engine_config(path: Path | str = _DEFAULT_CONFIG_DIR / "engine.yml") -> EngineConfig:
    """Load engine.yml (numeric, telemetry, contexts, valuation).

    A blank file yields the defaults: double precision, INFO logging to
    stderr, no predeclared contexts and arithmetic returns. Schema problems
    are reported as :class:`ConfigurationError` naming the file.
    """

    config_path = Path(path)
    data = _read_yaml(config_path)
    try:
        return EngineConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid engine config {config_path}: {exc}") from exc
