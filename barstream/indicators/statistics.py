"""Rolling covariance, variance, standard deviation and correlation.

All of them keep running sums over a queue of the last N input pairs, so a
bar costs O(1) instead of a rescan of the window. A NaN leaving the window
forces the sums to be rebuilt from the queue; otherwise the sums would stay
NaN forever.
"""
from __future__ import annotations

from collections import deque
from typing import Deque, Tuple

from barstream.core.errors import require_positive
from barstream.core.types import Num
from barstream.market.models import Bar

from .base import NumericIndicator


class CovarianceIndicator(NumericIndicator):
    """Population covariance of two indicators over ``bar_count`` bars.

    ``Σxy/n - (Σx/n)(Σy/n)`` with ``n`` the number of pairs currently held,
    so the value is informative but unstable before the window fills. Zero
    before the first pair.
    """

    def __init__(self, first: NumericIndicator, second: NumericIndicator, bar_count: int) -> None:
        super().__init__(first.num_factory)
        self.first = first
        self.second = second
        self.bar_count = require_positive("bar_count", bar_count)
        self._pairs: Deque[Tuple[Num, Num]] = deque()
        self._reset_sums()
        self._value = self.num_factory.zero()

    def _reset_sums(self) -> None:
        zero = self.num_factory.zero()
        self._sum_x = zero
        self._sum_y = zero
        self._sum_xy = zero

    def _update(self, bar: Bar) -> None:
        self.first.advance(bar)
        self.second.advance(bar)
        x = self.first.value
        y = self.second.value
        self._pairs.append((x, y))
        self._sum_x = self._sum_x + x
        self._sum_y = self._sum_y + y
        self._sum_xy = self._sum_xy + x * y
        if len(self._pairs) > self.bar_count:
            old_x, old_y = self._pairs.popleft()
            if self.num_factory.is_nan(old_x) or self.num_factory.is_nan(old_y):
                self._rebuild()
            else:
                self._sum_x = self._sum_x - old_x
                self._sum_y = self._sum_y - old_y
                self._sum_xy = self._sum_xy - old_x * old_y
        self._value = self._compute()

    def _rebuild(self) -> None:
        self._reset_sums()
        for x, y in self._pairs:
            self._sum_x = self._sum_x + x
            self._sum_y = self._sum_y + y
            self._sum_xy = self._sum_xy + x * y

    def _compute(self) -> Num:
        n = self.num_factory.value_of(len(self._pairs))
        return self._sum_xy / n - (self._sum_x / n) * (self._sum_y / n)

    @property
    def is_stable(self) -> bool:
        return len(self._pairs) == self.bar_count and self.first.is_stable and self.second.is_stable

    @property
    def lag(self) -> int:
        return self.bar_count

    def __repr__(self) -> str:
        return f"Covariance({self.bar_count}) => {self._value}"


class VarianceIndicator(CovarianceIndicator):
    """Population variance: the covariance of an indicator with itself."""

    def __init__(self, indicator: NumericIndicator, bar_count: int) -> None:
        super().__init__(indicator, indicator, bar_count)
        self.indicator = indicator

    def __repr__(self) -> str:
        return f"Variance({self.bar_count}) => {self._value}"


class StandardDeviationIndicator(NumericIndicator):
    """Square root of :class:`VarianceIndicator`."""

    def __init__(self, indicator: NumericIndicator, bar_count: int) -> None:
        super().__init__(indicator.num_factory)
        self.indicator = indicator
        self.bar_count = require_positive("bar_count", bar_count)
        self._variance = VarianceIndicator(indicator, bar_count)

    def _update(self, bar: Bar) -> None:
        self._variance.advance(bar)
        variance = self._variance.value
        if self.num_factory.is_nan(variance):
            self._value = self.num_factory.nan()
            return
        # rounding can leave a tiny negative variance for a flat window
        zero = self.num_factory.zero()
        self._value = self.num_factory.sqrt(variance if variance > zero else zero)

    @property
    def is_stable(self) -> bool:
        return self._variance.is_stable

    @property
    def lag(self) -> int:
        return self.bar_count

    def __repr__(self) -> str:
        return f"StdDev({self.bar_count}) => {self._value}"


class PearsonCorrelationIndicator(NumericIndicator):
    """Pearson correlation of two indicators over ``bar_count`` bars.

    Zero when either series has no variance in the window.
    """

    def __init__(self, first: NumericIndicator, second: NumericIndicator, bar_count: int) -> None:
        super().__init__(first.num_factory)
        self.first = first
        self.second = second
        self.bar_count = require_positive("bar_count", bar_count)
        self._pairs: Deque[Tuple[Num, Num]] = deque()
        self._reset_sums()

    def _reset_sums(self) -> None:
        zero = self.num_factory.zero()
        self._sx = zero
        self._sy = zero
        self._sxx = zero
        self._syy = zero
        self._sxy = zero

    def _add(self, x: Num, y: Num) -> None:
        self._sx = self._sx + x
        self._sy = self._sy + y
        self._sxx = self._sxx + x * x
        self._syy = self._syy + y * y
        self._sxy = self._sxy + x * y

    def _update(self, bar: Bar) -> None:
        self.first.advance(bar)
        self.second.advance(bar)
        x = self.first.value
        y = self.second.value
        self._pairs.append((x, y))
        self._add(x, y)
        if len(self._pairs) > self.bar_count:
            old_x, old_y = self._pairs.popleft()
            if self.num_factory.is_nan(old_x) or self.num_factory.is_nan(old_y):
                self._reset_sums()
                for pair_x, pair_y in self._pairs:
                    self._add(pair_x, pair_y)
            else:
                self._sx = self._sx - old_x
                self._sy = self._sy - old_y
                self._sxx = self._sxx - old_x * old_x
                self._syy = self._syy - old_y * old_y
                self._sxy = self._sxy - old_x * old_y
        self._value = self._compute()

    def _compute(self) -> Num:
        factory = self.num_factory
        n = factory.value_of(len(self._pairs))
        to_check = (self._sx, self._sy, self._sxx, self._syy, self._sxy)
        if any(factory.is_nan(value) for value in to_check):
            return factory.nan()
        zero = factory.zero()
        var_x = n * self._sxx - self._sx * self._sx
        var_y = n * self._syy - self._sy * self._sy
        if var_x <= zero or var_y <= zero:
            return zero
        return (n * self._sxy - self._sx * self._sy) / factory.sqrt(var_x * var_y)

    @property
    def is_stable(self) -> bool:
        return len(self._pairs) == self.bar_count and self.first.is_stable and self.second.is_stable

    @property
    def lag(self) -> int:
        return self.bar_count

    def __repr__(self) -> str:
        return f"Correlation({self.bar_count}) => {self._value}"


__all__ = [
    "CovarianceIndicator",
    "VarianceIndicator",
    "StandardDeviationIndicator",
    "PearsonCorrelationIndicator",
]
