"""Configuration loading and validation package."""

from .loader import load_engine_config
from .models import (
    ContextConfig,
    EngineConfig,
    IndicatorDefinition,
    NumericConfig,
    TelemetryConfig,
    ValuationConfig,
)

__all__ = [
    "ContextConfig",
    "EngineConfig",
    "IndicatorDefinition",
    "NumericConfig",
    "TelemetryConfig",
    "ValuationConfig",
    "load_engine_config",
]
