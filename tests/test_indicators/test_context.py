from __future__ import annotations

import logging
import uuid

import pytest

from barstream.core.enums import TimeFrame
from barstream.core.errors import HistoryNotEnabledError, InvalidParameterError
from barstream.indicators import (
    BooleanIndicator,
    ClosePriceIndicator,
    IndicatorContext,
    IndicatorContexts,
    IndicatorIdentification,
    NumericIndicator,
)


class SwitchableIndicator(NumericIndicator):
    """Indicator whose stability is set by the test."""

    def __init__(self, num_factory) -> None:
        super().__init__(num_factory)
        self.stable = False

    def _update(self, bar) -> None:
        self._value = bar.close

    @property
    def is_stable(self) -> bool:
        return self.stable


def test_add_should_key_by_name_and_lag(num_factory) -> None:
    context = IndicatorContext(TimeFrame.DAY)
    identification = context.add(ClosePriceIndicator(num_factory).sma(5), "sma")
    assert identification == IndicatorIdentification("sma", 5)
    assert "sma" in context
    assert context.get("sma") is context.get(identification)


def test_add_without_name_should_generate_placeholder(num_factory) -> None:
    context = IndicatorContext(TimeFrame.DAY, ClosePriceIndicator(num_factory))
    context.add_all(ClosePriceIndicator(num_factory), ClosePriceIndicator(num_factory).sma(2))
    names = [identification.name for identification, _ in context]
    assert len(context) == 3
    assert len(set(names)) == 3
    for name in names:
        uuid.UUID(name)


def test_lookups_should_return_none_for_unknown_or_mismatched_type(num_factory) -> None:
    close = ClosePriceIndicator(num_factory)
    context = IndicatorContext(TimeFrame.DAY)
    context.add(close, "close")
    context.add(close.crossed_over(10), "breakout")
    assert context.get("missing") is None
    assert context.get_numeric("close") is close
    assert context.get_numeric("breakout") is None
    assert isinstance(context.get_boolean("breakout"), BooleanIndicator)
    assert context.get_boolean("close") is None
    assert context.first is close
    assert 42 not in context


def test_advance_should_notify_change_listeners_then_update_listeners(num_factory, bar_factory) -> None:
    context = IndicatorContext(TimeFrame.DAY)
    first = context.add(ClosePriceIndicator(num_factory), "first")
    second = context.add(ClosePriceIndicator(num_factory).sma(1), "second")
    events = []
    context.register_change_listener(lambda begin, identification, indicator: events.append(("change", identification)))
    context.register_update_listener(lambda end: events.append(("update", end)))
    bar = bar_factory(0, close=5)
    context.advance(bar)
    assert events == [("change", first), ("change", second), ("update", bar.end_time)]


def test_stale_bar_should_be_ignored_and_logged(num_factory, bar_factory, caplog: pytest.LogCaptureFixture) -> None:
    context = IndicatorContext(TimeFrame.DAY)
    close = ClosePriceIndicator(num_factory)
    context.add(close, "close")
    updates = []
    context.register_update_listener(updates.append)
    context.advance(bar_factory(1, close=20))
    with caplog.at_level(logging.DEBUG, logger="barstream.indicators"):
        context.advance(bar_factory(0, close=10))
        context.advance(bar_factory(1, close=30))
    assert float(close.value) == 20.0
    assert len(updates) == 1
    assert [record.getMessage() for record in caplog.records] == ["Ignoring stale bar", "Ignoring stale bar"]


def test_stability_should_latch_once_reached(num_factory, bar_factory) -> None:
    indicator = SwitchableIndicator(num_factory)
    context = IndicatorContext(TimeFrame.DAY, indicator)
    assert not context.is_stable
    indicator.stable = True
    assert context.is_stable
    indicator.stable = False
    context.add(SwitchableIndicator(num_factory), "late")
    assert context.is_stable


def test_empty_context_should_be_stable() -> None:
    assert IndicatorContext.empty(TimeFrame.HOUR_1).is_stable


def test_history_should_return_previous_values(num_factory, series_factory) -> None:
    context = IndicatorContext.empty(TimeFrame.DAY, history_window=2)
    context.add(ClosePriceIndicator(num_factory), "close")
    bars = series_factory([1, 2, 3, 4])
    context.advance(bars[0])
    assert float(context.previous_value("close", 0)) == 1
    assert context.previous_value("close", 1) is None
    for bar in bars[1:]:
        context.advance(bar)
    assert [float(context.previous_value("close", bars_ago)) for bars_ago in (0, 1, 2)] == [4, 3, 2]
    assert context.previous_value("unknown") is None
    with pytest.raises(InvalidParameterError):
        context.previous_value("close", 3)


def test_previous_value_should_require_history(num_factory) -> None:
    context = IndicatorContext(TimeFrame.DAY)
    context.add(ClosePriceIndicator(num_factory), "close")
    with pytest.raises(HistoryNotEnabledError):
        context.previous_value("close")


def test_contexts_should_create_lazily_and_route_by_time_frame(num_factory, bar_factory) -> None:
    contexts = IndicatorContexts(history_window=3)
    daily = ClosePriceIndicator(num_factory)
    hourly = ClosePriceIndicator(num_factory)
    contexts[TimeFrame.DAY].add(daily, "close")
    contexts[TimeFrame.HOUR_1].add(hourly, "close")
    assert contexts.time_frames == [TimeFrame.DAY, TimeFrame.HOUR_1]
    contexts.advance(bar_factory(0, close=7, time_frame=TimeFrame.DAY))
    assert float(daily.value) == 7
    assert num_factory.is_nan(hourly.value)
    assert float(contexts[TimeFrame.DAY].previous_value("close", 0)) == 7
    assert TimeFrame.WEEK not in contexts
    contexts.advance(bar_factory(0, close=8, time_frame=TimeFrame.WEEK))
    assert TimeFrame.WEEK in contexts
    assert len(contexts) == 3


def test_contexts_should_be_stable_only_when_all_are(num_factory, bar_factory) -> None:
    contexts = IndicatorContexts()
    contexts[TimeFrame.DAY].add(ClosePriceIndicator(num_factory), "close")
    contexts[TimeFrame.HOUR_1].add(ClosePriceIndicator(num_factory).sma(2), "sma")
    contexts.advance(bar_factory(0, close=1, time_frame=TimeFrame.DAY))
    contexts.advance(bar_factory(0, close=1, time_frame=TimeFrame.HOUR_1))
    assert not contexts.is_stable
    contexts.advance(bar_factory(1, close=2, time_frame=TimeFrame.HOUR_1))
    assert contexts.is_stable
