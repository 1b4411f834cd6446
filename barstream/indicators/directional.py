"""Directional movement family: true range, +DM/-DM, ATR, +DI/-DI, DX, ADX.

Smoothing is Wilder's (see :class:`MMAIndicator`). Every ratio in this
module resolves a zero denominator to zero.
"""
from __future__ import annotations

from typing import Optional

from barstream.core.errors import require_positive
from barstream.core.types import Num
from barstream.market.models import Bar
from barstream.num.factory import NumFactory

from .averages import MMAIndicator
from .base import NumericIndicator


class TrueRangeIndicator(NumericIndicator):
    """``max(high - low, |high - prev close|, |prev close - low|)``.

    The first bar has no previous close and reports ``high - low``.
    """

    def __init__(self, num_factory: NumFactory) -> None:
        super().__init__(num_factory)
        self._previous_close: Optional[Num] = None

    def _update(self, bar: Bar) -> None:
        is_nan = self.num_factory.is_nan
        span = abs(bar.high - bar.low)
        if is_nan(span) or (self._previous_close is not None and is_nan(self._previous_close)):
            self._value = self.num_factory.nan()
        elif self._previous_close is None:
            self._value = span
        else:
            from_high = abs(bar.high - self._previous_close)
            from_low = abs(self._previous_close - bar.low)
            self._value = max(span, from_high, from_low)
        self._previous_close = bar.close

    @property
    def is_stable(self) -> bool:
        return self._previous_close is not None

    def __repr__(self) -> str:
        return f"TR => {self._value}"


class _DirectionalMovementIndicator(NumericIndicator):
    def __init__(self, num_factory: NumFactory) -> None:
        super().__init__(num_factory)
        self._previous: Optional[Bar] = None
        self._bars = 0

    def _movement(self, up_move: Num, down_move: Num) -> Num:
        raise NotImplementedError

    def _update(self, bar: Bar) -> None:
        self._bars += 1
        zero = self.num_factory.zero()
        if self._previous is None:
            self._value = zero
        else:
            up_move = bar.high - self._previous.high
            down_move = self._previous.low - bar.low
            if self.num_factory.is_nan(up_move) or self.num_factory.is_nan(down_move):
                self._value = self.num_factory.nan()
            else:
                self._value = self._movement(up_move, down_move)
        self._previous = bar

    @property
    def is_stable(self) -> bool:
        return self._bars > 1

    @property
    def lag(self) -> int:
        return 1


class PlusDMIndicator(_DirectionalMovementIndicator):
    """Upward move when it beats the downward move and is positive, else zero."""

    def _movement(self, up_move: Num, down_move: Num) -> Num:
        zero = self.num_factory.zero()
        if up_move > down_move and up_move > zero:
            return up_move
        return zero

    def __repr__(self) -> str:
        return f"+DM => {self._value}"


class MinusDMIndicator(_DirectionalMovementIndicator):
    """Downward move when it beats the upward move and is positive, else zero."""

    def _movement(self, up_move: Num, down_move: Num) -> Num:
        zero = self.num_factory.zero()
        if down_move > up_move and down_move > zero:
            return down_move
        return zero

    def __repr__(self) -> str:
        return f"-DM => {self._value}"


class ATRIndicator(MMAIndicator):
    """Average true range: Wilder smoothing of :class:`TrueRangeIndicator`."""

    def __init__(self, num_factory: NumFactory, bar_count: int) -> None:
        super().__init__(TrueRangeIndicator(num_factory), bar_count)

    def __repr__(self) -> str:
        return f"ATR({self.bar_count}) => {self._value}"


class _DirectionalIndexIndicator(NumericIndicator):
    _label = "DI"

    def __init__(
        self,
        num_factory: NumFactory,
        movement: NumericIndicator,
        bar_count: int,
        atr: Optional[ATRIndicator] = None,
    ) -> None:
        super().__init__(num_factory)
        self.bar_count = require_positive("bar_count", bar_count)
        self.average_movement = MMAIndicator(movement, bar_count)
        self.atr = atr if atr is not None else ATRIndicator(num_factory, bar_count)

    def _update(self, bar: Bar) -> None:
        self.average_movement.advance(bar)
        self.atr.advance(bar)
        average_range = self.atr.value
        zero = self.num_factory.zero()
        if self.num_factory.is_nan(average_range) or self.num_factory.is_nan(self.average_movement.value):
            self._value = self.num_factory.nan()
        elif average_range == zero:
            self._value = zero
        else:
            self._value = self.average_movement.value / average_range * self.num_factory.hundred()

    @property
    def is_stable(self) -> bool:
        return self.average_movement.is_stable and self.atr.is_stable

    @property
    def lag(self) -> int:
        return self.bar_count

    def __repr__(self) -> str:
        return f"{self._label}({self.bar_count}) => {self._value}"


class PlusDIIndicator(_DirectionalIndexIndicator):
    """``100 * MMA(+DM) / ATR``."""

    _label = "+DI"

    def __init__(self, num_factory: NumFactory, bar_count: int, atr: Optional[ATRIndicator] = None) -> None:
        super().__init__(num_factory, PlusDMIndicator(num_factory), bar_count, atr)


class MinusDIIndicator(_DirectionalIndexIndicator):
    """``100 * MMA(-DM) / ATR``."""

    _label = "-DI"

    def __init__(self, num_factory: NumFactory, bar_count: int, atr: Optional[ATRIndicator] = None) -> None:
        super().__init__(num_factory, MinusDMIndicator(num_factory), bar_count, atr)


class DXIndicator(NumericIndicator):
    """``100 * |+DI - -DI| / (+DI + -DI)``; zero when both indices are zero.

    Both indices share one ATR instance.
    """

    def __init__(self, num_factory: NumFactory, bar_count: int) -> None:
        super().__init__(num_factory)
        self.bar_count = require_positive("bar_count", bar_count)
        atr = ATRIndicator(num_factory, bar_count)
        self.plus_di = PlusDIIndicator(num_factory, bar_count, atr)
        self.minus_di = MinusDIIndicator(num_factory, bar_count, atr)

    def _update(self, bar: Bar) -> None:
        self.plus_di.advance(bar)
        self.minus_di.advance(bar)
        plus = self.plus_di.value
        minus = self.minus_di.value
        if self.num_factory.is_nan(plus) or self.num_factory.is_nan(minus):
            self._value = self.num_factory.nan()
            return
        total = plus + minus
        zero = self.num_factory.zero()
        if total == zero:
            self._value = zero
        else:
            self._value = abs(plus - minus) / total * self.num_factory.hundred()

    @property
    def is_stable(self) -> bool:
        return self.plus_di.is_stable and self.minus_di.is_stable

    @property
    def lag(self) -> int:
        return self.bar_count

    def __repr__(self) -> str:
        return f"DX({self.bar_count}) => {self._value}"


class ADXIndicator(MMAIndicator):
    """Average directional index: Wilder smoothing of :class:`DXIndicator`.

    ``di_bar_count`` drives the DI/DX windows and ``adx_bar_count`` (defaulting
    to the same value) the final smoothing.
    """

    def __init__(self, num_factory: NumFactory, di_bar_count: int, adx_bar_count: Optional[int] = None) -> None:
        self.di_bar_count = require_positive("di_bar_count", di_bar_count)
        self.adx_bar_count = di_bar_count if adx_bar_count is None else adx_bar_count
        super().__init__(DXIndicator(num_factory, di_bar_count), self.adx_bar_count)

    @property
    def lag(self) -> int:
        return self.di_bar_count + self.adx_bar_count

    def __repr__(self) -> str:
        return f"ADX({self.di_bar_count}, {self.adx_bar_count}) => {self._value}"


__all__ = [
    "TrueRangeIndicator",
    "PlusDMIndicator",
    "MinusDMIndicator",
    "ATRIndicator",
    "PlusDIIndicator",
    "MinusDIIndicator",
    "DXIndicator",
    "ADXIndicator",
]
