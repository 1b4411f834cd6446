from __future__ import annotations

import math
from decimal import Decimal, localcontext

import pytest

from barstream.config.models import NumericConfig
from barstream.core.enums import NumKind
from barstream.core.errors import InvalidParameterError
from barstream.num import DecimalNumFactory, DoubleNumFactory, NumFactory, build_num_factory


def test_factories_should_satisfy_protocol(num_factory) -> None:
    assert isinstance(num_factory, NumFactory)


def test_constants_should_use_factory_representation(num_factory) -> None:
    expected_type = float if isinstance(num_factory, DoubleNumFactory) else Decimal
    for value in (num_factory.zero(), num_factory.one(), num_factory.two(), num_factory.hundred()):
        assert type(value) is expected_type
    assert num_factory.hundred() == num_factory.value_of(100)


def test_nan_should_be_detected(num_factory) -> None:
    assert num_factory.is_nan(num_factory.nan())
    assert num_factory.is_nan(num_factory.value_of(math.nan))
    assert not num_factory.is_nan(num_factory.one())


def test_sqrt_and_log_should_return_nan_outside_domain(num_factory) -> None:
    assert float(num_factory.sqrt(num_factory.value_of(16))) == pytest.approx(4.0)
    assert float(num_factory.log(num_factory.one())) == pytest.approx(0.0)
    assert num_factory.is_nan(num_factory.sqrt(num_factory.value_of(-1)))
    assert num_factory.is_nan(num_factory.log(num_factory.zero()))


def test_decimal_factory_should_convert_floats_through_repr() -> None:
    factory = DecimalNumFactory()
    assert factory.value_of(0.1) == Decimal("0.1")
    assert factory.value_of("2.50") == Decimal("2.50")


def test_decimal_factory_should_reject_non_positive_precision() -> None:
    with pytest.raises(ValueError):
        DecimalNumFactory(precision=0)


def test_build_num_factory_should_follow_config() -> None:
    assert isinstance(build_num_factory(), DoubleNumFactory)
    decimal_factory = build_num_factory(NumericConfig(kind=NumKind.DECIMAL, precision=20))
    assert isinstance(decimal_factory, DecimalNumFactory)
    assert decimal_factory.precision == 20


def test_decimal_factory_should_reject_precision_above_arithmetic_context() -> None:
    with pytest.raises(InvalidParameterError):
        DecimalNumFactory(precision=32)
    with pytest.raises(InvalidParameterError):
        build_num_factory(NumericConfig(kind=NumKind.DECIMAL, precision=40))
    with localcontext() as context:
        context.prec = 40
        assert DecimalNumFactory(precision=40).precision == 40


def test_decimal_factory_default_precision_should_match_arithmetic() -> None:
    factory = build_num_factory(NumericConfig(kind=NumKind.DECIMAL))
    assert factory.precision == 28
    third = factory.one() / factory.value_of(3)
    assert len(third.as_tuple().digits) == factory.precision
