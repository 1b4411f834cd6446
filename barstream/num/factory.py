"""Numeric factories: the only place a concrete number type is chosen.

Indicators and valuation code never write ``0.0`` or ``Decimal("1")``
directly; they ask the factory they were constructed with. Values produced by
one factory must not be mixed with values of another (``float`` and
``Decimal`` do not interoperate under arithmetic).
"""
from __future__ import annotations

import math
from decimal import Context, Decimal, ROUND_HALF_UP, getcontext
from numbers import Number
from typing import Protocol, runtime_checkable

from barstream.core.errors import InvalidParameterError, require_positive
from barstream.core.types import Num


@runtime_checkable
class NumFactory(Protocol):
    """Contract shared by all numeric representations."""

    name: str

    def zero(self) -> Num: ...

    def one(self) -> Num: ...

    def two(self) -> Num: ...

    def hundred(self) -> Num: ...

    def nan(self) -> Num: ...

    def value_of(self, number: Number | str | Num) -> Num: ...

    def is_nan(self, value: Num) -> bool: ...

    def sqrt(self, value: Num) -> Num: ...

    def log(self, value: Num) -> Num: ...


class DoubleNumFactory:
    """Factory for IEEE-754 ``float`` values."""

    name = "double"

    _ZERO = 0.0
    _ONE = 1.0
    _TWO = 2.0
    _HUNDRED = 100.0

    def zero(self) -> float:
        return self._ZERO

    def one(self) -> float:
        return self._ONE

    def two(self) -> float:
        return self._TWO

    def hundred(self) -> float:
        return self._HUNDRED

    def nan(self) -> float:
        return math.nan

    def value_of(self, number: Number | str | Num) -> float:
        return float(number)  # type: ignore[arg-type]

    def is_nan(self, value: Num) -> bool:
        return isinstance(value, float) and math.isnan(value)

    def sqrt(self, value: float) -> float:
        if self.is_nan(value) or value < 0:
            return math.nan
        return math.sqrt(value)

    def log(self, value: float) -> float:
        if self.is_nan(value) or value <= 0:
            return math.nan
        return math.log(value)

    def __repr__(self) -> str:
        return "DoubleNumFactory()"


class DecimalNumFactory:
    """Factory for ``decimal.Decimal`` values with a fixed precision.

    ``value_of`` converts floats through their shortest ``repr`` so that
    ``value_of(0.1)`` is ``Decimal("0.1")`` rather than the exact binary
    expansion. Square roots and logarithms use the factory's own context;
    the ordinary operators use the thread's current decimal context, so
    ``precision`` may not exceed that context's precision (28 unless the
    caller raised it).
    """

    name = "decimal"

    def __init__(self, precision: int = 28) -> None:
        require_positive("precision", precision)
        arithmetic_precision = getcontext().prec
        if precision > arithmetic_precision:
            raise InvalidParameterError(
                f"precision {precision} exceeds the decimal context precision {arithmetic_precision}"
            )
        self.precision = precision
        self._context = Context(prec=precision, rounding=ROUND_HALF_UP)
        self._zero = Decimal(0)
        self._one = Decimal(1)
        self._two = Decimal(2)
        self._hundred = Decimal(100)
        self._nan = Decimal("NaN")

    def zero(self) -> Decimal:
        return self._zero

    def one(self) -> Decimal:
        return self._one

    def two(self) -> Decimal:
        return self._two

    def hundred(self) -> Decimal:
        return self._hundred

    def nan(self) -> Decimal:
        return self._nan

    def value_of(self, number: Number | str | Num) -> Decimal:
        if isinstance(number, Decimal):
            return self._context.plus(number) if not number.is_nan() else self._nan
        if isinstance(number, float):
            if math.isnan(number):
                return self._nan
            return self._context.create_decimal(repr(number))
        return self._context.create_decimal(number)  # type: ignore[arg-type]

    def is_nan(self, value: Num) -> bool:
        return isinstance(value, Decimal) and value.is_nan()

    def sqrt(self, value: Decimal) -> Decimal:
        if self.is_nan(value) or value < 0:
            return self._nan
        return self._context.sqrt(value)

    def log(self, value: Decimal) -> Decimal:
        if self.is_nan(value) or value <= 0:
            return self._nan
        return self._context.ln(value)

    def __repr__(self) -> str:
        return f"DecimalNumFactory(precision={self.precision})"


__all__ = ["NumFactory", "DoubleNumFactory", "DecimalNumFactory"]
