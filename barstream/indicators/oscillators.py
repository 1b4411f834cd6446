"""Momentum oscillators composed from the moving averages."""
from __future__ import annotations

from barstream.core.errors import InvalidParameterError, require_positive
from barstream.market.models import Bar

from .averages import EMAIndicator, MMAIndicator
from .base import NumericIndicator
from .helpers import GainIndicator, LossIndicator


class MACDIndicator(NumericIndicator):
    """Difference between a short and a long EMA of ``indicator``.

    ``signal(bar_count)`` and ``histogram(bar_count)`` build the usual derived
    lines on top of it.
    """

    def __init__(self, indicator: NumericIndicator, short_bar_count: int = 12, long_bar_count: int = 26) -> None:
        super().__init__(indicator.num_factory)
        require_positive("short_bar_count", short_bar_count)
        require_positive("long_bar_count", long_bar_count)
        if short_bar_count >= long_bar_count:
            raise InvalidParameterError(
                f"short_bar_count ({short_bar_count}) must be lower than long_bar_count ({long_bar_count})"
            )
        self.indicator = indicator
        self.short_bar_count = short_bar_count
        self.long_bar_count = long_bar_count
        self.short_ema = EMAIndicator(indicator, short_bar_count)
        self.long_ema = EMAIndicator(indicator, long_bar_count)

    def _update(self, bar: Bar) -> None:
        self.short_ema.advance(bar)
        self.long_ema.advance(bar)
        self._value = self.short_ema.value - self.long_ema.value

    def signal(self, bar_count: int = 9) -> EMAIndicator:
        return EMAIndicator(self, bar_count)

    def histogram(self, bar_count: int = 9) -> NumericIndicator:
        return self - self.signal(bar_count)

    @property
    def is_stable(self) -> bool:
        return self.short_ema.is_stable and self.long_ema.is_stable

    @property
    def lag(self) -> int:
        return self.long_bar_count

    def __repr__(self) -> str:
        return f"MACD({self.short_bar_count}, {self.long_bar_count}) => {self._value}"


class RSIIndicator(NumericIndicator):
    """Relative strength index over Wilder-smoothed gains and losses.

    100 when the average loss is zero and the average gain is positive, zero
    when both are zero.
    """

    def __init__(self, indicator: NumericIndicator, bar_count: int) -> None:
        super().__init__(indicator.num_factory)
        self.indicator = indicator
        self.bar_count = require_positive("bar_count", bar_count)
        self.average_gain = MMAIndicator(GainIndicator(indicator), bar_count)
        self.average_loss = MMAIndicator(LossIndicator(indicator), bar_count)

    def _update(self, bar: Bar) -> None:
        self.average_gain.advance(bar)
        self.average_loss.advance(bar)
        gain = self.average_gain.value
        loss = self.average_loss.value
        factory = self.num_factory
        if factory.is_nan(gain) or factory.is_nan(loss):
            self._value = factory.nan()
            return
        zero = factory.zero()
        hundred = factory.hundred()
        if loss == zero:
            self._value = hundred if gain > zero else zero
            return
        relative_strength = gain / loss
        self._value = hundred - hundred / (factory.one() + relative_strength)

    @property
    def is_stable(self) -> bool:
        return self.average_gain.is_stable and self.average_loss.is_stable

    @property
    def lag(self) -> int:
        return self.bar_count

    def __repr__(self) -> str:
        return f"RSI({self.bar_count}) => {self._value}"


__all__ = ["MACDIndicator", "RSIIndicator"]
