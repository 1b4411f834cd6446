"""Typed configuration models for the engine.

The config subsystem relies on pydantic to validate YAML files and to
provide strongly-typed objects to the rest of the package: which numeric
representation a run uses, how logging is set up, which indicators each
time frame context carries and how returns are expressed.
"""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, model_validator

from barstream.core.enums import IndicatorKind, NumKind, ReturnType, TimeFrame

_KINDS_WITHOUT_BAR_COUNT = {IndicatorKind.CLOSE, IndicatorKind.MACD}


class NumericConfig(BaseModel):
    """Numeric representation for a run.

    ``precision`` only applies to the decimal representation and is capped by
    the precision of the active decimal context (28 by default).
    """

    kind: NumKind = NumKind.DOUBLE
    precision: PositiveInt = Field(28, description="Significant digits for decimal values")

    model_config = ConfigDict(frozen=True)


class TelemetryConfig(BaseModel):
    """Logging switches for the engine."""

    log_level: str = Field("INFO")
    log_dir: Optional[str] = Field(None, description="Directory for rotating JSON logs; stream only when unset")
    logger_name: str = Field("barstream", min_length=1)


class IndicatorDefinition(BaseModel):
    """Declarative description of one indicator over close prices.

    ``bar_count`` is the window of the indicator. MACD uses
    ``short_bar_count``/``long_bar_count`` instead; ADX additionally reads
    ``di_bar_count`` for the directional indicators it smooths.
    """

    name: str = Field(..., min_length=1)
    kind: IndicatorKind
    bar_count: Optional[PositiveInt] = None
    short_bar_count: PositiveInt = 12
    long_bar_count: PositiveInt = 26
    di_bar_count: Optional[PositiveInt] = None

    @model_validator(mode="after")
    def _require_bar_count(self) -> "IndicatorDefinition":
        """Windowed kinds cannot fall back to an implicit window."""

        if self.kind not in _KINDS_WITHOUT_BAR_COUNT and self.bar_count is None:
            raise ValueError(f"indicator {self.name!r} of kind {self.kind.value} requires bar_count")
        if self.kind is IndicatorKind.MACD and self.short_bar_count >= self.long_bar_count:
            raise ValueError(f"indicator {self.name!r}: short_bar_count must be below long_bar_count")
        return self


class ContextConfig(BaseModel):
    """Indicators computed for a single time frame."""

    time_frame: TimeFrame = TimeFrame.UNDEFINED
    history_window: Optional[PositiveInt] = None
    indicators: List[IndicatorDefinition] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_names(self) -> "ContextConfig":
        """Indicator names key the context, so duplicates would shadow each other."""

        names = [definition.name for definition in self.indicators]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"duplicate indicator names in {self.time_frame.value}: {duplicates}")
        return self


class ValuationConfig(BaseModel):
    """Defaults for the valuation engine."""

    return_type: ReturnType = ReturnType.ARITHMETIC


class EngineConfig(BaseModel):
    """Top-level engine config composed of numeric, telemetry, contexts and valuation."""

    numeric: NumericConfig = Field(default_factory=NumericConfig)
    telemetry: TelemetryConfig = Field(default_factory=TelemetryConfig)
    contexts: List[ContextConfig] = Field(default_factory=list)
    valuation: ValuationConfig = Field(default_factory=ValuationConfig)

    @model_validator(mode="after")
    def _unique_time_frames(self) -> "EngineConfig":
        """Each time frame owns exactly one context."""

        frames = [context.time_frame for context in self.contexts]
        if len(frames) != len(set(frames)):
            raise ValueError("each time frame may appear in at most one context")
        return self
