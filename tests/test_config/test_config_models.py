from __future__ import annotations

import pytest
from pydantic import ValidationError

from barstream.config.models import (
    ContextConfig,
    EngineConfig,
    IndicatorDefinition,
    NumericConfig,
)
from barstream.core.enums import IndicatorKind, NumKind
from barstream.num import DecimalNumFactory, DoubleNumFactory, build_num_factory


def test_indicator_definition_should_require_window_for_windowed_kinds() -> None:
    with pytest.raises(ValidationError):
        IndicatorDefinition(name="ema", kind=IndicatorKind.EMA)
    assert IndicatorDefinition(name="close", kind=IndicatorKind.CLOSE).bar_count is None


def test_indicator_definition_should_reject_inverted_macd() -> None:
    with pytest.raises(ValidationError):
        IndicatorDefinition(name="macd", kind=IndicatorKind.MACD, short_bar_count=26, long_bar_count=12)


def test_indicator_definition_should_reject_non_positive_window() -> None:
    with pytest.raises(ValidationError):
        IndicatorDefinition(name="sma", kind=IndicatorKind.SMA, bar_count=0)


def test_context_config_should_reject_duplicate_names() -> None:
    with pytest.raises(ValidationError):
        ContextConfig.model_validate(
            {
                "time_frame": "1h",
                "indicators": [
                    {"name": "fast", "kind": "sma", "bar_count": 5},
                    {"name": "fast", "kind": "ema", "bar_count": 5},
                ],
            }
        )


def test_engine_config_should_reject_repeated_time_frames() -> None:
    with pytest.raises(ValidationError):
        EngineConfig.model_validate({"contexts": [{"time_frame": "1d"}, {"time_frame": "1d"}]})


def test_numeric_config_should_select_factory() -> None:
    assert isinstance(build_num_factory(), DoubleNumFactory)
    factory = build_num_factory(NumericConfig(kind=NumKind.DECIMAL, precision=12))
    assert isinstance(factory, DecimalNumFactory)
    assert factory.precision == 12


def test_numeric_config_should_be_frozen() -> None:
    config = NumericConfig()
    with pytest.raises(ValidationError):
        config.kind = NumKind.DECIMAL
