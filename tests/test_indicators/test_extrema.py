from __future__ import annotations

import math
import random

import pytest

from barstream.core.errors import InvalidParameterError
from barstream.indicators import ClosePriceIndicator, HighestValueIndicator, LowestValueIndicator
from barstream.num.factory import DoubleNumFactory

DOUBLE_ONLY = pytest.mark.parametrize("num_factory", [DoubleNumFactory()], ids=["double"])


def test_highest_should_track_rolling_window(num_factory, series_factory, feed) -> None:
    bars = series_factory([3, 1, 4, 1, 5, 9, 2, 6])
    highest = ClosePriceIndicator(num_factory).highest(3)
    assert [float(v) for v in feed(highest, bars)] == [3, 3, 4, 4, 5, 9, 9, 9]


def test_lowest_should_track_rolling_window(num_factory, series_factory, feed) -> None:
    bars = series_factory([3, 1, 4, 1, 5, 9, 2, 6])
    lowest = LowestValueIndicator(ClosePriceIndicator(num_factory), 3)
    assert [float(v) for v in feed(lowest, bars)] == [3, 1, 1, 1, 1, 1, 2, 2]


@DOUBLE_ONLY
def test_extrema_should_become_stable_once_window_is_full(num_factory, series_factory) -> None:
    highest = HighestValueIndicator(ClosePriceIndicator(num_factory), 3)
    bars = series_factory([1, 2, 3])
    highest.advance(bars[0])
    highest.advance(bars[1])
    assert not highest.is_stable
    highest.advance(bars[2])
    assert highest.is_stable


def test_extrema_should_skip_nan_and_report_nan_for_all_nan_window(num_factory, series_factory, feed) -> None:
    bars = series_factory([5, math.nan, math.nan, 2])
    values = feed(HighestValueIndicator(ClosePriceIndicator(num_factory), 2), bars)
    assert float(values[0]) == 5
    assert float(values[1]) == 5
    assert num_factory.is_nan(values[2])
    assert float(values[3]) == 2


@DOUBLE_ONLY
def test_extrema_should_match_brute_force_over_random_series(num_factory, series_factory) -> None:
    rng = random.Random(2024)
    closes = [math.nan if rng.random() < 0.15 else rng.uniform(90, 110) for _ in range(200)]
    bar_count = 6
    close = ClosePriceIndicator(num_factory)
    highest = close.highest(bar_count)
    lowest = close.lowest(bar_count)
    for index, bar in enumerate(series_factory(closes)):
        highest.advance(bar)
        lowest.advance(bar)
        window = [value for value in closes[max(0, index - bar_count + 1) : index + 1] if not math.isnan(value)]
        if not window:
            assert math.isnan(highest.value) and math.isnan(lowest.value)
        else:
            assert highest.value == max(window)
            assert lowest.value == min(window)


def test_extrema_should_reject_non_positive_window(double_factory) -> None:
    with pytest.raises(InvalidParameterError):
        HighestValueIndicator(ClosePriceIndicator(double_factory), 0)
    with pytest.raises(InvalidParameterError):
        LowestValueIndicator(ClosePriceIndicator(double_factory), -1)
