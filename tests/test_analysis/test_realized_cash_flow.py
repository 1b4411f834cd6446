from __future__ import annotations

from datetime import timedelta

import pytest

from barstream.analysis import (
    LinearBorrowingCostModel,
    LinearTransactionCostModel,
    Position,
    RealizedCashFlow,
    TradingRecord,
)
from barstream.core.enums import TradeType

DAY = timedelta(days=1)


def test_realized_flow_should_ignore_intermediate_dip(num_factory, base_time, series_factory) -> None:
    position = Position(num_factory)
    position.operate(base_time, 100)
    for bar in series_factory([50]):
        position.on_bar(bar)
    position.operate(base_time + 2 * DAY, 150)
    flow = RealizedCashFlow.from_position(position)
    assert [float(value) for value in flow.values.values()] == pytest.approx([1.0, 1.5])
    assert float(flow.value_at(base_time + DAY)) == pytest.approx(1.25)


def test_realized_flow_should_hold_boundary_values(num_factory, base_time) -> None:
    position = Position(num_factory)
    position.operate(base_time, 100)
    position.operate(base_time + DAY, 120)
    flow = RealizedCashFlow.from_position(position)
    assert float(flow.value_at(base_time - DAY)) == 1.0
    assert float(flow.value_at(base_time + timedelta(hours=6))) == pytest.approx(1.05)
    assert float(flow.value_at(base_time + 5 * DAY)) == pytest.approx(1.2)
    assert len(flow) == 2


def test_realized_flow_should_chain_consecutive_positions(num_factory, base_time) -> None:
    record = TradingRecord(num_factory)
    record.operate(base_time, 100)
    record.operate(base_time + DAY, 110)
    record.operate(base_time + 2 * DAY, 100)
    record.operate(base_time + 3 * DAY, 120)
    flow = RealizedCashFlow.from_trading_record(record)
    assert float(flow.value_at(base_time + DAY)) == pytest.approx(1.1)
    assert float(flow.value_at(base_time + 3 * DAY)) == pytest.approx(1.32)
    assert float(flow.value_at(base_time + 2 * DAY)) == pytest.approx(1.1)


def test_realized_flow_should_hold_exit_value_while_flat(num_factory, base_time) -> None:
    record = TradingRecord(num_factory)
    record.operate(base_time, 100)
    record.operate(base_time + DAY, 110)
    record.operate(base_time + 3 * DAY, 100)
    record.operate(base_time + 4 * DAY, 120)
    flow = RealizedCashFlow.from_trading_record(record)
    assert list(flow.values) == [base_time + offset * DAY for offset in (0, 1, 3, 4)]
    assert float(flow.value_at(base_time + 2 * DAY)) == pytest.approx(1.1)
    assert float(flow.value_at(base_time + 3 * DAY)) == pytest.approx(1.1)
    assert float(flow.value_at(base_time + 4 * DAY)) == pytest.approx(1.32)


def test_realized_flow_should_value_short_position(num_factory, base_time) -> None:
    position = Position(num_factory, TradeType.SELL)
    position.operate(base_time, 100)
    position.operate(base_time + DAY, 90)
    assert float(RealizedCashFlow.from_position(position).value_at(base_time + DAY)) == pytest.approx(1.1)


def test_realized_flow_should_use_net_prices(num_factory, base_time) -> None:
    position = Position(num_factory, transaction_cost_model=LinearTransactionCostModel(0.01))
    position.operate(base_time, 100)
    position.operate(base_time + DAY, 110)
    flow = RealizedCashFlow.from_position(position)
    assert float(flow.value_at(base_time + DAY)) == pytest.approx(108.9 / 101)


def test_open_position_should_be_valued_at_last_bar_with_holding_cost(num_factory, base_time, series_factory) -> None:
    record = TradingRecord(num_factory, holding_cost_model=LinearBorrowingCostModel(0.01))
    record.enter(base_time, 100)
    for bar in series_factory([105, 95]):
        record.on_bar(bar)
    flow = RealizedCashFlow.from_trading_record(record)
    assert float(flow.value_at(base_time + 2 * DAY)) == pytest.approx(0.98)
    assert float(flow.value_at(base_time + DAY)) == pytest.approx(0.99)


def test_open_position_should_honour_explicit_evaluation_time(num_factory, base_time) -> None:
    position = Position(num_factory, holding_cost_model=LinearBorrowingCostModel(0.01))
    position.operate(base_time, 100)
    flow = RealizedCashFlow.from_position(position, evaluation_time=base_time + 3 * DAY)
    assert list(flow.values) == [base_time, base_time + 3 * DAY]
    assert float(flow.value_at(base_time + 3 * DAY)) == pytest.approx(0.97)


def test_empty_record_should_have_no_points(num_factory, base_time) -> None:
    flow = RealizedCashFlow.from_trading_record(TradingRecord(num_factory))
    assert len(flow) == 0
    assert float(flow.value_at(base_time)) == 1.0
