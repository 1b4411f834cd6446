"""Indicators reading a field straight off the bar."""
from __future__ import annotations

from barstream.core.types import Num
from barstream.market.models import Bar
from barstream.num.factory import NumFactory

from .base import NumericIndicator


class _BarFieldIndicator(NumericIndicator):
    _label = "Price"

    def __init__(self, num_factory: NumFactory) -> None:
        super().__init__(num_factory)
        self._seen = False

    def _read(self, bar: Bar) -> Num:
        raise NotImplementedError

    def _update(self, bar: Bar) -> None:
        self._value = self._read(bar)
        self._seen = True

    @property
    def is_stable(self) -> bool:
        return self._seen

    def __repr__(self) -> str:
        return f"{self._label} => {self._value}"


class ClosePriceIndicator(_BarFieldIndicator):
    _label = "Close"

    def _read(self, bar: Bar) -> Num:
        return bar.close


class OpenPriceIndicator(_BarFieldIndicator):
    _label = "Open"

    def _read(self, bar: Bar) -> Num:
        return bar.open


class HighPriceIndicator(_BarFieldIndicator):
    _label = "High"

    def _read(self, bar: Bar) -> Num:
        return bar.high


class LowPriceIndicator(_BarFieldIndicator):
    _label = "Low"

    def _read(self, bar: Bar) -> Num:
        return bar.low


class VolumeIndicator(_BarFieldIndicator):
    _label = "Volume"

    def _read(self, bar: Bar) -> Num:
        return bar.volume


class TypicalPriceIndicator(_BarFieldIndicator):
    """``(high + low + close) / 3``."""

    _label = "Typical"

    def _read(self, bar: Bar) -> Num:
        return (bar.high + bar.low + bar.close) / self.num_factory.value_of(3)


__all__ = [
    "ClosePriceIndicator",
    "OpenPriceIndicator",
    "HighPriceIndicator",
    "LowPriceIndicator",
    "VolumeIndicator",
    "TypicalPriceIndicator",
]
