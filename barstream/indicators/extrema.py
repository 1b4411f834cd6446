"""Rolling highest and lowest values."""
from __future__ import annotations

from barstream.core.errors import require_positive
from barstream.core.types import Num
from barstream.market.models import Bar
from barstream.market.windows import MonotonicExtremumWindow

from .base import NumericIndicator


class _RollingExtremumIndicator(NumericIndicator):
    _label = "Extremum"

    def __init__(self, indicator: NumericIndicator, bar_count: int) -> None:
        super().__init__(indicator.num_factory)
        self.indicator = indicator
        self.bar_count = require_positive("bar_count", bar_count)
        self._window = MonotonicExtremumWindow(
            bar_count,
            prefer=self._prefer,
            is_nan=self.num_factory.is_nan,
            nan=self.num_factory.nan(),
        )

    @staticmethod
    def _prefer(candidate: Num, other: Num) -> bool:
        raise NotImplementedError

    def _update(self, bar: Bar) -> None:
        self.indicator.advance(bar)
        self._value = self._window.append(self.indicator.value)

    @property
    def is_stable(self) -> bool:
        return self._window.is_full and self.indicator.is_stable

    @property
    def lag(self) -> int:
        return self.bar_count

    def __repr__(self) -> str:
        return f"{self._label}({self.indicator!r}, {self.bar_count}) => {self._value}"


class HighestValueIndicator(_RollingExtremumIndicator):
    """Maximum of the last ``bar_count`` non-NaN values; NaN if there are none."""

    _label = "HiVa"

    @staticmethod
    def _prefer(candidate: Num, other: Num) -> bool:
        return candidate > other


class LowestValueIndicator(_RollingExtremumIndicator):
    """Minimum of the last ``bar_count`` non-NaN values; NaN if there are none."""

    _label = "LoVa"

    @staticmethod
    def _prefer(candidate: Num, other: Num) -> bool:
        return candidate < other


__all__ = ["HighestValueIndicator", "LowestValueIndicator"]
