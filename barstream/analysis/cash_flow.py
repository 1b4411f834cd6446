"""Cash flow: portfolio value over time, following every observed bar."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, Iterable, Optional

from barstream.core.types import Num
from barstream.num.factory import NumFactory

from .position import Position, TradingRecord

logger = logging.getLogger("barstream.analysis")


class CashFlow:
    """Ordered ``end_time -> value`` series built from positions.

    Every bar a position observed contributes the ratio between its
    holding-cost-adjusted close and the entry price. Contributions of
    concurrent positions landing on the same timestamp are summed. Instants
    without a value read as one.
    """

    def __init__(self, num_factory: NumFactory, positions: Iterable[Position] = ()) -> None:
        self.num_factory = num_factory
        accumulated: Dict[datetime, Num] = {}
        for position in positions:
            if position.entry is not None:
                self._accumulate(position, accumulated)
        self._values: Dict[datetime, Num] = dict(sorted(accumulated.items()))

    @classmethod
    def from_position(cls, position: Position) -> "CashFlow":
        return cls(position.num_factory, [position])

    @classmethod
    def from_trading_record(cls, record: TradingRecord) -> "CashFlow":
        return cls(record.num_factory, record.all_positions())

    @staticmethod
    def _accumulate(position: Position, accumulated: Dict[datetime, Num]) -> None:
        assert position.entry is not None
        entry_price = position.entry.price_per_asset
        holding_cost = position.holding_cost()
        for bar in position.bars:
            adjusted = position.adjusted_price(bar.close, holding_cost)
            ratio = position.price_ratio(entry_price, adjusted)
            previous = accumulated.get(bar.end_time)
            accumulated[bar.end_time] = ratio if previous is None else previous + ratio

    def value_at(self, when: datetime) -> Num:
        return self._values.get(when, self.num_factory.one())

    @property
    def values(self) -> Dict[datetime, Num]:
        return dict(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def maximum_drawdown(self) -> Num:
        """Largest relative fall from a running peak that starts at one."""

        factory = self.num_factory
        zero = factory.zero()
        peak = factory.one()
        maximum = zero
        if not self._values:
            logger.debug("No cash flow values, drawdown is zero")
            return maximum
        for value in self._values.values():
            if factory.is_nan(value):
                continue
            if value > peak:
                peak = value
            if peak <= zero:
                continue
            drawdown = (peak - value) / peak
            if drawdown > maximum:
                maximum = drawdown
        return maximum

    def __repr__(self) -> str:
        return f"CashFlow({len(self._values)} values)"


__all__ = ["CashFlow"]
