"""Boolean indicators comparing numeric ones."""
from __future__ import annotations

from barstream.market.models import Bar

from .base import BooleanIndicator, NumericIndicator
from .helpers import PreviousValueIndicator


class CrossIndicator(BooleanIndicator):
    """True on the bar where ``up`` moves above ``low``.

    ``up`` must be strictly above ``low`` now and at or below it
    ``bar_count`` bars ago. Any NaN involved makes the result false.
    """

    def __init__(self, up: NumericIndicator, low: NumericIndicator, bar_count: int = 1) -> None:
        super().__init__()
        self.up = up
        self.low = low
        self.previous_up = PreviousValueIndicator(up, bar_count)
        self.previous_low = PreviousValueIndicator(low, bar_count)

    def _update(self, bar: Bar) -> None:
        self.low.advance(bar)
        self.up.advance(bar)
        self.previous_up.advance(bar)
        self.previous_low.advance(bar)
        values = (self.up.value, self.low.value, self.previous_up.value, self.previous_low.value)
        is_nan = self.up.num_factory.is_nan
        if any(is_nan(value) for value in values):
            self._value = False
            return
        up_now, low_now, up_before, low_before = values
        self._value = up_now > low_now and up_before <= low_before

    @property
    def is_stable(self) -> bool:
        return (
            self.up.is_stable
            and self.low.is_stable
            and self.previous_up.is_stable
            and self.previous_low.is_stable
        )

    @property
    def lag(self) -> int:
        return max(self.previous_up.lag, self.up.lag, self.low.lag)

    def __repr__(self) -> str:
        return f"Cross({self.up!r}, {self.low!r}) => {self._value}"


class _ComparisonIndicator(BooleanIndicator):
    _symbol = "?"

    def __init__(self, first: NumericIndicator, second: NumericIndicator) -> None:
        super().__init__()
        self.first = first
        self.second = second

    def _compare(self, a, b) -> bool:
        raise NotImplementedError

    def _update(self, bar: Bar) -> None:
        self.first.advance(bar)
        self.second.advance(bar)
        a = self.first.value
        b = self.second.value
        is_nan = self.first.num_factory.is_nan
        self._value = False if is_nan(a) or is_nan(b) else self._compare(a, b)

    @property
    def is_stable(self) -> bool:
        return self.first.is_stable and self.second.is_stable

    @property
    def lag(self) -> int:
        return max(self.first.lag, self.second.lag)

    def __repr__(self) -> str:
        return f"({self.first!r} {self._symbol} {self.second!r}) => {self._value}"


class OverIndicator(_ComparisonIndicator):
    """True while ``first`` is strictly above ``second``."""

    _symbol = ">"

    def _compare(self, a, b) -> bool:
        return a > b


class UnderIndicator(_ComparisonIndicator):
    """True while ``first`` is strictly below ``second``."""

    _symbol = "<"

    def _compare(self, a, b) -> bool:
        return a < b


__all__ = ["CrossIndicator", "OverIndicator", "UnderIndicator"]
