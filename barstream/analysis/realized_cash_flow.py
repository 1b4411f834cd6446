"""Realized cash flow: value recorded only at position entry and exit boundaries.

Buying at 100, seeing the price drop to 50 and selling at 150 yields 1.5 at
the exit; intra-holding fluctuation is not tracked (see :mod:`.returns`).
Between two recorded points the value is interpolated linearly over
wall-clock seconds. Outside the recorded range the nearest boundary value is
returned unchanged (one before the first point). Every position records its
entry value as well as its exit, so a flat stretch between two positions
holds the previous exit value.
"""
from __future__ import annotations

import bisect
from datetime import datetime
from typing import Dict, List, Optional

from barstream.core.time_utils import seconds_between
from barstream.core.types import Num
from barstream.num.factory import NumFactory

from .position import Position, TradingRecord


class RealizedCashFlow:
    def __init__(self, num_factory: NumFactory) -> None:
        self.num_factory = num_factory
        self._values: Dict[datetime, Num] = {}
        self._times: List[datetime] = []

    @classmethod
    def from_position(cls, position: Position, evaluation_time: Optional[datetime] = None) -> "RealizedCashFlow":
        flow = cls(position.num_factory)
        if position.entry is not None:
            flow._put(position.entry.when, flow.num_factory.one())
            flow._record(position, evaluation_time)
        return flow

    @classmethod
    def from_trading_record(
        cls, record: TradingRecord, evaluation_time: Optional[datetime] = None
    ) -> "RealizedCashFlow":
        """Closed positions in order, then the open one at ``evaluation_time``.

        ``evaluation_time`` defaults to the end time of the last bar the record
        observed, falling back to the entry time of the open position.
        """

        flow = cls(record.num_factory)
        positions = record.all_positions()
        if positions and positions[0].entry is not None:
            flow._put(positions[0].entry.when, flow.num_factory.one())
        if evaluation_time is None and record.last_bar is not None:
            evaluation_time = record.last_bar.end_time
        for position in positions:
            flow._record(position, evaluation_time)
        return flow

    def _put(self, when: datetime, value: Num) -> None:
        if when not in self._values:
            bisect.insort(self._times, when)
        self._values[when] = value

    def _record(self, position: Position, evaluation_time: Optional[datetime]) -> None:
        entry = position.entry
        if entry is None:
            return
        entry_value = self.value_at(entry.when)
        self._put(entry.when, entry_value)
        if position.exit is not None:
            ratio = position.price_ratio(entry.net_price, position.exit.net_price)
            self._put(position.exit.when, entry_value * ratio)
            return
        # open position: synthetic boundary at the evaluation instant
        when = evaluation_time or position.valuation_time
        if when < entry.when:
            when = entry.when
        adjusted = position.adjusted_price(entry.price_per_asset, position.holding_cost(when))
        self._put(when, entry_value * position.price_ratio(entry.net_price, adjusted))

    def value_at(self, when: datetime) -> Num:
        exact = self._values.get(when)
        if exact is not None:
            return exact
        index = bisect.bisect_left(self._times, when)
        if index == 0:
            return self.num_factory.one()
        if index == len(self._times):
            return self._values[self._times[-1]]
        start = self._times[index - 1]
        end = self._times[index]
        start_value = self._values[start]
        end_value = self._values[end]
        progress = self.num_factory.value_of(seconds_between(start, when) / seconds_between(start, end))
        return start_value + (end_value - start_value) * progress

    @property
    def values(self) -> Dict[datetime, Num]:
        return {when: self._values[when] for when in self._times}

    def __len__(self) -> int:
        return len(self._times)

    def __repr__(self) -> str:
        return f"RealizedCashFlow({len(self._times)} points)"


__all__ = ["RealizedCashFlow"]
