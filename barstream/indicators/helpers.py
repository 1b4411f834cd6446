"""Lightweight building blocks: constants, arithmetic, lookback and sums."""
from __future__ import annotations

from numbers import Number
from typing import Callable

from barstream.core.errors import require_positive
from barstream.core.types import Num
from barstream.market.models import Bar
from barstream.market.windows import CircularWindow
from barstream.num.factory import NumFactory

from .base import NumericIndicator


class ConstantIndicator(NumericIndicator):
    """Always reports the same value; stable from construction."""

    def __init__(self, num_factory: NumFactory, constant: Number | Num) -> None:
        super().__init__(num_factory)
        self._value = num_factory.value_of(constant)

    def _update(self, bar: Bar) -> None:
        pass

    @property
    def is_stable(self) -> bool:
        return True


class BinaryOperation(NumericIndicator):
    """Combines the current values of two indicators.

    NaN on either side yields NaN. A quotient whose denominator is zero
    resolves to zero so that downstream indicators stay defined.
    """

    def __init__(
        self,
        symbol: str,
        left: NumericIndicator,
        right: NumericIndicator,
        operator: Callable[[Num, Num], Num],
    ) -> None:
        super().__init__(left.num_factory)
        self.symbol = symbol
        self.left = left
        self.right = right
        self._operator = operator

    @classmethod
    def sum(cls, left: NumericIndicator, right: NumericIndicator) -> "BinaryOperation":
        return cls("+", left, right, lambda a, b: a + b)

    @classmethod
    def difference(cls, left: NumericIndicator, right: NumericIndicator) -> "BinaryOperation":
        return cls("-", left, right, lambda a, b: a - b)

    @classmethod
    def product(cls, left: NumericIndicator, right: NumericIndicator) -> "BinaryOperation":
        return cls("*", left, right, lambda a, b: a * b)

    @classmethod
    def quotient(cls, left: NumericIndicator, right: NumericIndicator) -> "BinaryOperation":
        zero = left.num_factory.zero()
        return cls("/", left, right, lambda a, b: zero if b == zero else a / b)

    @classmethod
    def minimum(cls, left: NumericIndicator, right: NumericIndicator) -> "BinaryOperation":
        return cls("min", left, right, lambda a, b: a if a <= b else b)

    @classmethod
    def maximum(cls, left: NumericIndicator, right: NumericIndicator) -> "BinaryOperation":
        return cls("max", left, right, lambda a, b: a if a >= b else b)

    def _update(self, bar: Bar) -> None:
        self.left.advance(bar)
        self.right.advance(bar)
        a = self.left.value
        b = self.right.value
        if self.num_factory.is_nan(a) or self.num_factory.is_nan(b):
            self._value = self.num_factory.nan()
        else:
            self._value = self._operator(a, b)

    @property
    def is_stable(self) -> bool:
        return self.left.is_stable and self.right.is_stable

    @property
    def lag(self) -> int:
        return max(self.left.lag, self.right.lag)

    def __repr__(self) -> str:
        return f"({self.left!r} {self.symbol} {self.right!r}) => {self._value}"


class UnaryOperation(NumericIndicator):
    """Applies a function to the current value of one indicator."""

    def __init__(self, symbol: str, operand: NumericIndicator, operator: Callable[[Num], Num]) -> None:
        super().__init__(operand.num_factory)
        self.symbol = symbol
        self.operand = operand
        self._operator = operator

    @classmethod
    def abs(cls, operand: NumericIndicator) -> "UnaryOperation":
        return cls("abs", operand, abs)

    @classmethod
    def negate(cls, operand: NumericIndicator) -> "UnaryOperation":
        return cls("neg", operand, lambda a: -a)

    @classmethod
    def sqrt(cls, operand: NumericIndicator) -> "UnaryOperation":
        return cls("sqrt", operand, operand.num_factory.sqrt)

    def _update(self, bar: Bar) -> None:
        self.operand.advance(bar)
        self._value = self._operator(self.operand.value)

    @property
    def is_stable(self) -> bool:
        return self.operand.is_stable

    @property
    def lag(self) -> int:
        return self.operand.lag

    def __repr__(self) -> str:
        return f"{self.symbol}({self.operand!r}) => {self._value}"


class PreviousValueIndicator(NumericIndicator):
    """Value of ``indicator`` as it was ``bar_count`` bars ago (NaN until then)."""

    def __init__(self, indicator: NumericIndicator, bar_count: int = 1) -> None:
        super().__init__(indicator.num_factory)
        self.indicator = indicator
        self.bar_count = require_positive("bar_count", bar_count)
        self._window: CircularWindow[Num] = CircularWindow(bar_count)

    def _update(self, bar: Bar) -> None:
        self.indicator.advance(bar)
        was_full = self._window.is_full
        evicted = self._window.append(self.indicator.value)
        self._value = evicted if was_full else self.num_factory.nan()

    @property
    def is_stable(self) -> bool:
        return self._window.appended > self.bar_count and self.indicator.is_stable

    @property
    def lag(self) -> int:
        return self.bar_count


class RunningTotalIndicator(NumericIndicator):
    """Sum of the last ``bar_count`` values of ``indicator``.

    Before the window fills the value is the sum of the bars seen so far.
    The total is maintained incrementally; when a NaN leaves the window the
    total is rebuilt from the stored values so it does not stay NaN forever.
    """

    def __init__(self, indicator: NumericIndicator, bar_count: int) -> None:
        super().__init__(indicator.num_factory)
        self.indicator = indicator
        self.bar_count = require_positive("bar_count", bar_count)
        self._window: CircularWindow[Num] = CircularWindow(bar_count)
        self._total = self.num_factory.zero()

    def _update(self, bar: Bar) -> None:
        self.indicator.advance(bar)
        current = self.indicator.value
        was_full = self._window.is_full
        evicted = self._window.append(current)
        if was_full and self.num_factory.is_nan(evicted):
            self._total = _sum(self.num_factory, self._window)
        else:
            self._total = self._total + current
            if was_full:
                self._total = self._total - evicted
        self._value = self._total

    @property
    def is_stable(self) -> bool:
        return self._window.is_full and self.indicator.is_stable

    @property
    def lag(self) -> int:
        return self.bar_count

    def __repr__(self) -> str:
        return f"RunningTotal({self.bar_count}) => {self._value}"


class GainIndicator(NumericIndicator):
    """Positive change of ``indicator`` against the previous bar, else zero."""

    def __init__(self, indicator: NumericIndicator) -> None:
        super().__init__(indicator.num_factory)
        self.indicator = indicator
        self._previous: Num | None = None

    def _update(self, bar: Bar) -> None:
        self.indicator.advance(bar)
        self._value = _directional_change(self.num_factory, self._previous, self.indicator.value, sign=1)
        self._previous = self.indicator.value

    @property
    def is_stable(self) -> bool:
        return self._previous is not None and self.indicator.is_stable

    @property
    def lag(self) -> int:
        return 1


class LossIndicator(NumericIndicator):
    """Magnitude of a negative change of ``indicator``, else zero."""

    def __init__(self, indicator: NumericIndicator) -> None:
        super().__init__(indicator.num_factory)
        self.indicator = indicator
        self._previous: Num | None = None

    def _update(self, bar: Bar) -> None:
        self.indicator.advance(bar)
        self._value = _directional_change(self.num_factory, self._previous, self.indicator.value, sign=-1)
        self._previous = self.indicator.value

    @property
    def is_stable(self) -> bool:
        return self._previous is not None and self.indicator.is_stable

    @property
    def lag(self) -> int:
        return 1


def _directional_change(num_factory: NumFactory, previous: Num | None, current: Num, *, sign: int) -> Num:
    zero = num_factory.zero()
    if previous is None:
        return zero
    if num_factory.is_nan(previous) or num_factory.is_nan(current):
        return num_factory.nan()
    change = current - previous if sign > 0 else previous - current
    return change if change > zero else zero


def _sum(num_factory: NumFactory, values) -> Num:
    total = num_factory.zero()
    for value in values:
        total = total + value
    return total


__all__ = [
    "ConstantIndicator",
    "BinaryOperation",
    "UnaryOperation",
    "PreviousValueIndicator",
    "RunningTotalIndicator",
    "GainIndicator",
    "LossIndicator",
]
