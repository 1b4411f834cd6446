"""Moving averages maintained bar by bar."""
from __future__ import annotations

from barstream.core.errors import require_positive
from barstream.core.types import Num
from barstream.market.models import Bar
from barstream.market.windows import CircularWindow

from .base import NumericIndicator


class SMAIndicator(NumericIndicator):
    """Simple moving average over a running sum.

    Reports zero until ``bar_count`` values have been seen. A NaN input makes
    the average NaN for as long as it stays in the window.
    """

    def __init__(self, indicator: NumericIndicator, bar_count: int) -> None:
        super().__init__(indicator.num_factory)
        self.indicator = indicator
        self.bar_count = require_positive("bar_count", bar_count)
        self._window: CircularWindow[Num] = CircularWindow(bar_count)
        self._sum = self.num_factory.zero()
        self._divisor = self.num_factory.value_of(bar_count)

    def _update(self, bar: Bar) -> None:
        self.indicator.advance(bar)
        current = self.indicator.value
        was_full = self._window.is_full
        evicted = self._window.append(current)
        if was_full and self.num_factory.is_nan(evicted):
            total = self.num_factory.zero()
            for value in self._window:
                total = total + value
            self._sum = total
        else:
            self._sum = self._sum + current
            if was_full:
                self._sum = self._sum - evicted
        self._value = self._sum / self._divisor if self._window.is_full else self.num_factory.zero()

    @property
    def is_stable(self) -> bool:
        return self._window.is_full and self.indicator.is_stable

    @property
    def lag(self) -> int:
        return self.bar_count

    def __repr__(self) -> str:
        return f"SMA({self.bar_count}) => {self._value}"


class EMAIndicator(NumericIndicator):
    """Exponential moving average with ``k = 2 / (bar_count + 1)``.

    The first value seeds the average; it is stable after ``bar_count`` bars.
    """

    def __init__(self, indicator: NumericIndicator, bar_count: int) -> None:
        super().__init__(indicator.num_factory)
        self.indicator = indicator
        self.bar_count = require_positive("bar_count", bar_count)
        self._multiplier = self.num_factory.two() / self.num_factory.value_of(bar_count + 1)
        self._bars = 0

    def _update(self, bar: Bar) -> None:
        self.indicator.advance(bar)
        current = self.indicator.value
        self._bars += 1
        if self._bars == 1:
            self._value = current
        else:
            self._value = self._value + (current - self._value) * self._multiplier

    @property
    def is_stable(self) -> bool:
        return self._bars >= self.bar_count and self.indicator.is_stable

    @property
    def lag(self) -> int:
        return self.bar_count

    def __repr__(self) -> str:
        return f"EMA({self.bar_count}) => {self._value}"


class WMAIndicator(NumericIndicator):
    """Linearly weighted moving average, weights 1..N from oldest to newest.

    Weights and their sum N(N+1)/2 are computed once. The value is zero until
    the window is full.
    """

    def __init__(self, indicator: NumericIndicator, bar_count: int) -> None:
        super().__init__(indicator.num_factory)
        self.indicator = indicator
        self.bar_count = require_positive("bar_count", bar_count)
        self._window: CircularWindow[Num] = CircularWindow(bar_count)
        self._weights = [self.num_factory.value_of(weight) for weight in range(1, bar_count + 1)]
        self._denominator = self.num_factory.value_of(bar_count * (bar_count + 1) // 2)

    def _update(self, bar: Bar) -> None:
        self.indicator.advance(bar)
        self._window.append(self.indicator.value)
        if not self._window.is_full:
            self._value = self.num_factory.zero()
            return
        total = self.num_factory.zero()
        for weight, value in zip(self._weights, self._window):
            total = total + value * weight
        self._value = total / self._denominator

    @property
    def is_stable(self) -> bool:
        return self._window.is_full and self.indicator.is_stable

    @property
    def lag(self) -> int:
        return self.bar_count

    def __repr__(self) -> str:
        return f"WMA({self.bar_count}) => {self._value}"


class MMAIndicator(NumericIndicator):
    """Wilder's smoothed (modified) moving average.

    While warming up the value is the simple average of the values seen so
    far; at bar N it equals the simple average of the first N values, and
    afterwards ``prev + (new - prev) / N``.
    """

    def __init__(self, indicator: NumericIndicator, bar_count: int) -> None:
        super().__init__(indicator.num_factory)
        self.indicator = indicator
        self.bar_count = require_positive("bar_count", bar_count)
        self._divisor = self.num_factory.value_of(bar_count)
        self._warmup_sum = self.num_factory.zero()
        self._bars = 0

    def _update(self, bar: Bar) -> None:
        self.indicator.advance(bar)
        current = self.indicator.value
        self._bars += 1
        if self._bars <= self.bar_count:
            self._warmup_sum = self._warmup_sum + current
            self._value = self._warmup_sum / self.num_factory.value_of(self._bars)
        else:
            self._value = self._value + (current - self._value) / self._divisor

    @property
    def is_stable(self) -> bool:
        return self._bars >= self.bar_count and self.indicator.is_stable

    @property
    def lag(self) -> int:
        return self.bar_count

    def __repr__(self) -> str:
        return f"MMA({self.bar_count}) => {self._value}"


__all__ = ["SMAIndicator", "EMAIndicator", "WMAIndicator", "MMAIndicator"]
