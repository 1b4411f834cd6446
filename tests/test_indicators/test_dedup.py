from __future__ import annotations

from barstream.indicators import ClosePriceIndicator, NumericIndicator


class CountingIndicator(NumericIndicator):
    """Close price that counts how often it is recomputed."""

    def __init__(self, num_factory) -> None:
        super().__init__(num_factory)
        self.updates = 0

    def _update(self, bar) -> None:
        self.updates += 1
        self._value = bar.close

    @property
    def is_stable(self) -> bool:
        return self.updates > 0


def test_shared_input_should_advance_once_per_bar(num_factory, series_factory) -> None:
    source = CountingIndicator(num_factory)
    sma = source.sma(2)
    ema = source.ema(2)
    combined = sma - ema
    for bar in series_factory([1, 2, 3]):
        combined.advance(bar)
        sma.advance(bar)
        ema.advance(bar)
    assert source.updates == 3


def test_repeated_bar_should_be_ignored(num_factory, bar_factory) -> None:
    source = CountingIndicator(num_factory)
    bar = bar_factory(0, close=10)
    source.advance(bar)
    source.advance(bar)
    assert source.updates == 1


def test_older_bar_should_not_rewind_indicator(num_factory, bar_factory) -> None:
    close = ClosePriceIndicator(num_factory)
    close.advance(bar_factory(1, close=20))
    close.advance(bar_factory(0, close=10))
    assert float(close.value) == 20.0
