"""Indicator contract and bar deduplication.

Every indicator is advanced one bar at a time through :meth:`advance`. An
indicator remembers the begin time of the last bar it processed and ignores
any bar that does not move past it, so a single instance may be wired into
several composites (or registered in a context and used as an input) and
still see each bar exactly once.

Composites advance their inputs explicitly, in the order their constructor
declares, before computing their own value.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from numbers import Number
from typing import TYPE_CHECKING, Generic, Optional, Protocol, TypeVar, Union, runtime_checkable

from barstream.core.types import Num
from barstream.market.models import Bar
from barstream.num.factory import NumFactory

if TYPE_CHECKING:
    from .averages import EMAIndicator, MMAIndicator, SMAIndicator, WMAIndicator
    from .boolean import CrossIndicator, OverIndicator, UnderIndicator
    from .extrema import HighestValueIndicator, LowestValueIndicator
    from .helpers import BinaryOperation, PreviousValueIndicator, RunningTotalIndicator, UnaryOperation
    from .statistics import (
        CovarianceIndicator,
        PearsonCorrelationIndicator,
        StandardDeviationIndicator,
        VarianceIndicator,
    )

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)

Operand = Union["NumericIndicator", Number, Num]


@runtime_checkable
class Indicator(Protocol[T_co]):
    """What contexts and composites rely on."""

    @property
    def value(self) -> T_co: ...

    @property
    def is_stable(self) -> bool: ...

    @property
    def lag(self) -> int: ...

    def advance(self, bar: Bar) -> None: ...


class BaseIndicator(ABC, Generic[T]):
    """Shared deduplication for concrete indicators."""

    def __init__(self, initial_value: T) -> None:
        self._value: T = initial_value
        self._last_begin_time: Optional[datetime] = None

    def advance(self, bar: Bar) -> None:
        """Process ``bar`` unless a bar with the same or a later begin time was seen."""

        if self._last_begin_time is not None and bar.begin_time <= self._last_begin_time:
            return
        self._update(bar)
        self._last_begin_time = bar.begin_time

    @abstractmethod
    def _update(self, bar: Bar) -> None:
        """Advance private state by one bar and store the new value."""

    @property
    def value(self) -> T:
        return self._value

    @property
    @abstractmethod
    def is_stable(self) -> bool:
        """True once the value is meaningful rather than a warm-up artifact."""

    @property
    def lag(self) -> int:
        """Bars of history the indicator needs before it can become stable."""

        return 0

    def __repr__(self) -> str:
        return f"{type(self).__name__} => {self._value}"


class NumericIndicator(BaseIndicator[Num]):
    """Indicator whose value is a number of the run's representation.

    Besides the contract, numeric indicators offer a fluent way to build
    derived indicators (``close.sma(20)``, ``fast - slow``) with ``self`` as
    the input. Derived indicators share ``self`` by reference; advancing them
    advances ``self`` at most once per bar.
    """

    def __init__(self, num_factory: NumFactory) -> None:
        super().__init__(num_factory.nan())
        self.num_factory = num_factory

    # Arithmetic -----------------------------------------------------------
    def _operand(self, other: Operand) -> "NumericIndicator":
        from .helpers import ConstantIndicator

        if isinstance(other, NumericIndicator):
            return other
        return ConstantIndicator(self.num_factory, other)

    def __add__(self, other: Operand) -> "BinaryOperation":
        from .helpers import BinaryOperation

        return BinaryOperation.sum(self, self._operand(other))

    def __radd__(self, other: Operand) -> "BinaryOperation":
        from .helpers import BinaryOperation

        return BinaryOperation.sum(self._operand(other), self)

    def __sub__(self, other: Operand) -> "BinaryOperation":
        from .helpers import BinaryOperation

        return BinaryOperation.difference(self, self._operand(other))

    def __rsub__(self, other: Operand) -> "BinaryOperation":
        from .helpers import BinaryOperation

        return BinaryOperation.difference(self._operand(other), self)

    def __mul__(self, other: Operand) -> "BinaryOperation":
        from .helpers import BinaryOperation

        return BinaryOperation.product(self, self._operand(other))

    def __rmul__(self, other: Operand) -> "BinaryOperation":
        from .helpers import BinaryOperation

        return BinaryOperation.product(self._operand(other), self)

    def __truediv__(self, other: Operand) -> "BinaryOperation":
        from .helpers import BinaryOperation

        return BinaryOperation.quotient(self, self._operand(other))

    def __rtruediv__(self, other: Operand) -> "BinaryOperation":
        from .helpers import BinaryOperation

        return BinaryOperation.quotient(self._operand(other), self)

    def __neg__(self) -> "UnaryOperation":
        from .helpers import UnaryOperation

        return UnaryOperation.negate(self)

    def __abs__(self) -> "UnaryOperation":
        from .helpers import UnaryOperation

        return UnaryOperation.abs(self)

    def sqrt(self) -> "UnaryOperation":
        from .helpers import UnaryOperation

        return UnaryOperation.sqrt(self)

    def min(self, other: Operand) -> "BinaryOperation":
        from .helpers import BinaryOperation

        return BinaryOperation.minimum(self, self._operand(other))

    def max(self, other: Operand) -> "BinaryOperation":
        from .helpers import BinaryOperation

        return BinaryOperation.maximum(self, self._operand(other))

    # Windowed derivations -------------------------------------------------
    def sma(self, bar_count: int) -> "SMAIndicator":
        from .averages import SMAIndicator

        return SMAIndicator(self, bar_count)

    def ema(self, bar_count: int) -> "EMAIndicator":
        from .averages import EMAIndicator

        return EMAIndicator(self, bar_count)

    def wma(self, bar_count: int) -> "WMAIndicator":
        from .averages import WMAIndicator

        return WMAIndicator(self, bar_count)

    def mma(self, bar_count: int) -> "MMAIndicator":
        from .averages import MMAIndicator

        return MMAIndicator(self, bar_count)

    def highest(self, bar_count: int) -> "HighestValueIndicator":
        from .extrema import HighestValueIndicator

        return HighestValueIndicator(self, bar_count)

    def lowest(self, bar_count: int) -> "LowestValueIndicator":
        from .extrema import LowestValueIndicator

        return LowestValueIndicator(self, bar_count)

    def previous(self, bar_count: int = 1) -> "PreviousValueIndicator":
        from .helpers import PreviousValueIndicator

        return PreviousValueIndicator(self, bar_count)

    def running_total(self, bar_count: int) -> "RunningTotalIndicator":
        from .helpers import RunningTotalIndicator

        return RunningTotalIndicator(self, bar_count)

    def variance(self, bar_count: int) -> "VarianceIndicator":
        from .statistics import VarianceIndicator

        return VarianceIndicator(self, bar_count)

    def stddev(self, bar_count: int) -> "StandardDeviationIndicator":
        from .statistics import StandardDeviationIndicator

        return StandardDeviationIndicator(self, bar_count)

    def covariance(self, other: "NumericIndicator", bar_count: int) -> "CovarianceIndicator":
        from .statistics import CovarianceIndicator

        return CovarianceIndicator(self, other, bar_count)

    def correlation(self, other: "NumericIndicator", bar_count: int) -> "PearsonCorrelationIndicator":
        from .statistics import PearsonCorrelationIndicator

        return PearsonCorrelationIndicator(self, other, bar_count)

    # Rules ----------------------------------------------------------------
    def crossed_over(self, other: Operand) -> "CrossIndicator":
        from .boolean import CrossIndicator

        return CrossIndicator(self, self._operand(other))

    def crossed_under(self, other: Operand) -> "CrossIndicator":
        from .boolean import CrossIndicator

        return CrossIndicator(self._operand(other), self)

    def is_greater_than(self, other: Operand) -> "OverIndicator":
        from .boolean import OverIndicator

        return OverIndicator(self, self._operand(other))

    def is_less_than(self, other: Operand) -> "UnderIndicator":
        from .boolean import UnderIndicator

        return UnderIndicator(self, self._operand(other))


class BooleanIndicator(BaseIndicator[bool]):
    """Indicator whose value is a truth value; ``False`` before the first bar."""

    def __init__(self) -> None:
        super().__init__(False)


__all__ = ["Indicator", "BaseIndicator", "NumericIndicator", "BooleanIndicator"]
