"""Per-bar returns of positions, logarithmic or arithmetic."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from barstream.config.models import ValuationConfig
from barstream.core.enums import ReturnType
from barstream.core.types import Num
from barstream.num.factory import NumFactory

from .position import Position, TradingRecord


def period_return(return_type: ReturnType, new_price: Num, old_price: Num, num_factory: NumFactory) -> Num:
    """``ln(new/old)`` or ``new/old - 1``; zero when ``old`` is zero."""

    if num_factory.is_nan(new_price) or num_factory.is_nan(old_price):
        return num_factory.nan()
    if old_price == num_factory.zero():
        return num_factory.zero()
    ratio = new_price / old_price
    if return_type is ReturnType.LOG:
        return num_factory.log(ratio)
    return ratio - num_factory.one()


@dataclass(frozen=True)
class _ReturnRange:
    start: datetime
    end: Optional[datetime]
    returns: Dict[datetime, Num]

    def contains(self, when: datetime) -> bool:
        return self.start <= when and (self.end is None or when <= self.end)


class Returns:
    """Returns of every position keyed by bar end time.

    The price of each bar is adjusted by the holding cost and compared with
    the previous raw close, starting from the entry's net price. Short
    positions flip the sign. Instants outside every holding interval read as
    zero; overlapping positions add up.
    """

    def __init__(
        self,
        num_factory: NumFactory,
        positions: Iterable[Position] = (),
        return_type: ReturnType = ReturnType.ARITHMETIC,
    ) -> None:
        self.num_factory = num_factory
        self.return_type = return_type
        self._ranges: List[_ReturnRange] = []
        for position in positions:
            if position.entry is None:
                continue
            end = position.exit.when if position.exit is not None else None
            self._ranges.append(_ReturnRange(position.entry.when, end, self._position_returns(position)))

    @classmethod
    def from_position(cls, position: Position, return_type: ReturnType = ReturnType.ARITHMETIC) -> "Returns":
        return cls(position.num_factory, [position], return_type)

    @classmethod
    def from_trading_record(
        cls, record: TradingRecord, return_type: ReturnType = ReturnType.ARITHMETIC
    ) -> "Returns":
        return cls(record.num_factory, record.all_positions(), return_type)

    @classmethod
    def from_config(cls, record: TradingRecord, config: Optional[ValuationConfig] = None) -> "Returns":
        """Returns of ``record`` expressed as ``config.return_type``."""

        config = config or ValuationConfig()
        return cls.from_trading_record(record, config.return_type)

    def _position_returns(self, position: Position) -> Dict[datetime, Num]:
        assert position.entry is not None
        returns: Dict[datetime, Num] = {}
        holding_cost = position.holding_cost()
        previous = position.entry.net_price
        for bar in position.bars:
            adjusted = position.adjusted_price(bar.close, holding_cost)
            asset_return = period_return(self.return_type, adjusted, previous, self.num_factory)
            returns[bar.end_time] = asset_return if position.is_long else -asset_return
            previous = bar.close
        return returns

    def value_at(self, when: datetime) -> Num:
        total = self.num_factory.zero()
        for return_range in self._ranges:
            if return_range.contains(when):
                total = total + return_range.returns.get(when, self.num_factory.zero())
        return total

    @property
    def values(self) -> List[Num]:
        """A leading zero, then the summed return at every distinct timestamp."""

        timestamps = sorted({when for return_range in self._ranges for when in return_range.returns})
        return [self.num_factory.zero()] + [self.value_at(when) for when in timestamps]

    @property
    def size(self) -> int:
        """Number of positions contributing returns."""

        return len(self._ranges)

    def __repr__(self) -> str:
        return f"Returns({self.return_type.value}, {len(self._ranges)} positions)"


__all__ = ["Returns", "period_return"]
