from __future__ import annotations

import math
from datetime import timedelta
from pathlib import Path

import pytest

from barstream.analysis import Position, Returns, TradingRecord, period_return
from barstream.config.loader import load_engine_config
from barstream.core.enums import ReturnType, TradeType


def _long_position(num_factory, base_time, bars, starting_type=TradeType.BUY) -> Position:
    position = Position(num_factory, starting_type)
    position.operate(base_time, 100)
    for bar in bars:
        position.on_bar(bar)
    position.operate(bars[-1].end_time, bars[-1].close)
    return position


def test_arithmetic_returns_should_compare_consecutive_closes(num_factory, base_time, series_factory) -> None:
    bars = series_factory([110, 121])
    returns = Returns.from_position(_long_position(num_factory, base_time, bars))
    assert [float(value) for value in returns.values] == pytest.approx([0.0, 0.1, 0.1])
    assert float(returns.value_at(bars[1].end_time)) == pytest.approx(0.1)


def test_log_returns_should_use_natural_logarithm(num_factory, base_time, series_factory) -> None:
    bars = series_factory([110, 121])
    returns = Returns.from_position(_long_position(num_factory, base_time, bars), ReturnType.LOG)
    assert [float(value) for value in returns.values[1:]] == pytest.approx([math.log(1.1)] * 2)


def test_short_returns_should_flip_sign(num_factory, base_time, series_factory) -> None:
    bars = series_factory([110])
    returns = Returns.from_position(_long_position(num_factory, base_time, bars, TradeType.SELL))
    assert float(returns.value_at(bars[0].end_time)) == pytest.approx(-0.1)


def test_returns_should_be_zero_outside_holding_intervals(num_factory, base_time, series_factory) -> None:
    bars = series_factory([110])
    returns = Returns.from_position(_long_position(num_factory, base_time, bars))
    assert float(returns.value_at(base_time - timedelta(days=1))) == 0.0
    assert float(returns.value_at(base_time + timedelta(days=10))) == 0.0


def test_returns_should_cover_closed_and_open_positions(num_factory, base_time, series_factory) -> None:
    record = TradingRecord(num_factory)
    bars = series_factory([100, 110, 99])
    record.enter(base_time, 100)
    record.on_bar(bars[0])
    record.exit(bars[0].end_time, 100)
    record.enter(bars[0].end_time, 100)
    record.on_bar(bars[1])
    record.on_bar(bars[2])
    returns = Returns.from_trading_record(record)
    assert returns.size == 2
    assert [float(value) for value in returns.values] == pytest.approx([0.0, 0.0, 0.1, -0.1])


def test_returns_of_empty_record_should_only_hold_leading_zero(num_factory) -> None:
    returns = Returns.from_trading_record(TradingRecord(num_factory))
    assert returns.size == 0
    assert [float(value) for value in returns.values] == [0.0]


def test_period_return_should_handle_zero_and_nan(num_factory) -> None:
    zero = num_factory.zero()
    assert period_return(ReturnType.ARITHMETIC, num_factory.value_of(5), zero, num_factory) == zero
    assert num_factory.is_nan(period_return(ReturnType.LOG, num_factory.nan(), num_factory.one(), num_factory))


def test_returns_should_follow_configured_return_type(num_factory, base_time, series_factory, tmp_path: Path) -> None:
    config_path = tmp_path / "engine.yml"
    config_path.write_text("valuation:\n  return_type: log\n", encoding="utf-8")
    config = load_engine_config(config_path)
    record = TradingRecord(num_factory)
    record.enter(base_time, 100)
    for bar in series_factory([110, 121]):
        record.on_bar(bar)
    returns = Returns.from_config(record, config.valuation)
    assert returns.return_type is ReturnType.LOG
    assert [float(value) for value in returns.values] == pytest.approx([0.0, math.log(1.1), math.log(1.1)])
    assert Returns.from_config(record).return_type is ReturnType.ARITHMETIC
