"""Numeric representations used by every computation in the engine."""

from __future__ import annotations

from barstream.config.models import NumericConfig
from barstream.core.enums import NumKind

from .factory import DecimalNumFactory, DoubleNumFactory, NumFactory


def build_num_factory(config: NumericConfig | None = None) -> NumFactory:
    """Return the factory selected by ``config`` (double precision by default)."""

    if config is None or config.kind is NumKind.DOUBLE:
        return DoubleNumFactory()
    return DecimalNumFactory(precision=config.precision)


__all__ = ["NumFactory", "DoubleNumFactory", "DecimalNumFactory", "build_num_factory"]
