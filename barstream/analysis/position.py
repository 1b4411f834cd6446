"""Trades, positions, trading records and their cost models.

A :class:`Position` is opened by one trade and closed by another. While it is
open it records the bars it observes; the valuation classes read those bars
together with the entry/exit trades and the holding cost. Trade prices carry
the transaction cost in ``net_price``: a buy pays more per asset, a sell
receives less.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta
from numbers import Number
from typing import List, Optional, Union

from barstream.core.enums import TradeType
from barstream.core.errors import InvalidParameterError, PositionStateError
from barstream.core.time_utils import ensure_aware
from barstream.core.types import Num
from barstream.market.models import Bar
from barstream.num.factory import NumFactory

Amount = Union[Number, Num]


# ----------------------------------------------------------------------
# Cost models
# ----------------------------------------------------------------------
class CostModel(ABC):
    """Cost of executing trades or of holding a position."""

    @abstractmethod
    def trade_cost(self, num_factory: NumFactory, price: Num, amount: Num) -> Num:
        """Cost of one trade of ``amount`` assets at ``price``."""

    @abstractmethod
    def position_cost(self, position: "Position", until: Optional[datetime] = None) -> Num:
        """Cost attributed to ``position`` up to ``until``."""


def _require_fee(name: str, fee: float) -> float:
    if fee < 0:
        raise InvalidParameterError(f"{name} must not be negative, got {fee}")
    return fee


class ZeroCostModel(CostModel):
    def trade_cost(self, num_factory: NumFactory, price: Num, amount: Num) -> Num:
        return num_factory.zero()

    def position_cost(self, position: "Position", until: Optional[datetime] = None) -> Num:
        return position.num_factory.zero()

    def __repr__(self) -> str:
        return "ZeroCostModel()"


class _TransactionCostModel(CostModel):
    def position_cost(self, position: "Position", until: Optional[datetime] = None) -> Num:
        """Sum of the costs of the trades executed so far."""

        total = position.num_factory.zero()
        for trade in (position.entry, position.exit):
            if trade is not None:
                total = total + trade.cost
        return total


class FixedTransactionCostModel(_TransactionCostModel):
    """Flat fee per trade, independent of price and amount."""

    def __init__(self, fee_per_trade: float) -> None:
        self.fee_per_trade = _require_fee("fee_per_trade", fee_per_trade)

    def trade_cost(self, num_factory: NumFactory, price: Num, amount: Num) -> Num:
        return num_factory.value_of(self.fee_per_trade)

    def __repr__(self) -> str:
        return f"FixedTransactionCostModel({self.fee_per_trade})"


class LinearTransactionCostModel(_TransactionCostModel):
    """Fee proportional to the traded value: ``price * amount * fee``."""

    def __init__(self, fee_ratio: float) -> None:
        self.fee_ratio = _require_fee("fee_ratio", fee_ratio)

    def trade_cost(self, num_factory: NumFactory, price: Num, amount: Num) -> Num:
        return price * amount * num_factory.value_of(self.fee_ratio)

    def __repr__(self) -> str:
        return f"LinearTransactionCostModel({self.fee_ratio})"


class LinearBorrowingCostModel(CostModel):
    """Holding cost per asset growing linearly with whole elapsed periods.

    ``entry price * fee_per_period * periods`` where periods are counted from
    the entry to ``until`` (default: the exit, or the last observed bar of an
    open position).
    """

    def __init__(self, fee_per_period: float, period: timedelta = timedelta(days=1)) -> None:
        self.fee_per_period = _require_fee("fee_per_period", fee_per_period)
        if period <= timedelta(0):
            raise InvalidParameterError(f"period must be positive, got {period}")
        self.period = period

    def trade_cost(self, num_factory: NumFactory, price: Num, amount: Num) -> Num:
        return num_factory.zero()

    def position_cost(self, position: "Position", until: Optional[datetime] = None) -> Num:
        factory = position.num_factory
        if position.entry is None:
            return factory.zero()
        end = until or position.valuation_time
        elapsed = end - position.entry.when
        periods = max(elapsed // self.period, 0)
        return position.entry.price_per_asset * factory.value_of(self.fee_per_period) * factory.value_of(periods)

    def __repr__(self) -> str:
        return f"LinearBorrowingCostModel({self.fee_per_period}, {self.period})"


# ----------------------------------------------------------------------
# Trades and positions
# ----------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class Trade:
    """One executed trade."""

    when: datetime
    price_per_asset: Num
    trade_type: TradeType
    amount: Num
    cost: Num
    net_price: Num

    @classmethod
    def execute(
        cls,
        num_factory: NumFactory,
        when: datetime,
        price_per_asset: Amount,
        trade_type: TradeType,
        amount: Amount,
        cost_model: Optional[CostModel] = None,
    ) -> "Trade":
        """Build a trade, pricing its transaction cost into ``net_price``."""

        ensure_aware(when)
        price = num_factory.value_of(price_per_asset)
        quantity = num_factory.value_of(amount)
        if num_factory.is_nan(quantity) or quantity <= num_factory.zero():
            raise InvalidParameterError(f"trade amount must be positive, got {amount}")
        cost = (cost_model or ZeroCostModel()).trade_cost(num_factory, price, quantity)
        cost_per_asset = cost / quantity
        net_price = price + cost_per_asset if trade_type is TradeType.BUY else price - cost_per_asset
        return cls(
            when=when,
            price_per_asset=price,
            trade_type=trade_type,
            amount=quantity,
            cost=cost,
            net_price=net_price,
        )

    @property
    def is_buy(self) -> bool:
        return self.trade_type is TradeType.BUY

    @property
    def value(self) -> Num:
        return self.price_per_asset * self.amount

    def __str__(self) -> str:
        return f"{self.trade_type.value} {self.when.isoformat()} | {self.amount} @ {self.price_per_asset}"


class Position:
    """A pair of entry and exit trades plus the bars seen in between."""

    def __init__(
        self,
        num_factory: NumFactory,
        starting_type: TradeType = TradeType.BUY,
        transaction_cost_model: Optional[CostModel] = None,
        holding_cost_model: Optional[CostModel] = None,
    ) -> None:
        self.num_factory = num_factory
        self.starting_type = starting_type
        self.transaction_cost_model = transaction_cost_model or ZeroCostModel()
        self.holding_cost_model = holding_cost_model or ZeroCostModel()
        self.entry: Optional[Trade] = None
        self.exit: Optional[Trade] = None
        self._bars: List[Bar] = []

    @property
    def is_new(self) -> bool:
        return self.entry is None

    @property
    def is_opened(self) -> bool:
        return self.entry is not None and self.exit is None

    @property
    def is_closed(self) -> bool:
        return self.entry is not None and self.exit is not None

    @property
    def is_long(self) -> bool:
        return self.starting_type is TradeType.BUY

    def operate(self, when: datetime, price_per_asset: Amount, amount: Amount = 1) -> Trade:
        """Enter a new position or exit an opened one."""

        if self.is_new:
            trade = Trade.execute(
                self.num_factory, when, price_per_asset, self.starting_type, amount, self.transaction_cost_model
            )
            self.entry = trade
            return trade
        if self.is_opened:
            assert self.entry is not None
            if when < self.entry.when:
                raise PositionStateError(
                    f"exit at {when.isoformat()} precedes entry at {self.entry.when.isoformat()}"
                )
            trade = Trade.execute(
                self.num_factory,
                when,
                price_per_asset,
                self.starting_type.complement,
                amount,
                self.transaction_cost_model,
            )
            self.exit = trade
            return trade
        raise PositionStateError("cannot operate a closed position")

    def on_bar(self, bar: Bar) -> None:
        """Record ``bar`` while the position is open; stale bars are ignored."""

        if not self.is_opened:
            return
        if self._bars and bar.end_time <= self._bars[-1].end_time:
            return
        self._bars.append(bar)

    @property
    def bars(self) -> List[Bar]:
        return list(self._bars)

    @property
    def valuation_time(self) -> datetime:
        """Exit time, else the end of the last observed bar, else the entry time."""

        if self.entry is None:
            raise PositionStateError("position has no entry")
        if self.exit is not None:
            return self.exit.when
        if self._bars:
            return self._bars[-1].end_time
        return self.entry.when

    def holding_cost(self, until: Optional[datetime] = None) -> Num:
        return self.holding_cost_model.position_cost(self, until)

    def transaction_cost(self) -> Num:
        return self.transaction_cost_model.position_cost(self)

    def adjusted_price(self, price: Num, holding_cost: Num) -> Num:
        """``price`` reduced (long) or raised (short) by ``holding_cost``."""

        return price - holding_cost if self.is_long else price + holding_cost

    def price_ratio(self, entry_price: Num, price: Num) -> Num:
        """Growth of one unit invested at ``entry_price`` when the price is ``price``.

        Long: ``price / entry``. Short: ``1 + (entry - price) / entry``.
        Resolves to one when the entry price is zero.
        """

        one = self.num_factory.one()
        if entry_price == self.num_factory.zero():
            return one
        if self.is_long:
            return price / entry_price
        return one + (entry_price - price) / entry_price

    def gross_profit(self) -> Num:
        """Profit before costs; zero while the position is not closed."""

        if not self.is_closed:
            return self.num_factory.zero()
        assert self.entry is not None and self.exit is not None
        profit = self.exit.value - self.entry.value
        return profit if self.is_long else -profit

    def profit(self) -> Num:
        if not self.is_closed:
            return self.num_factory.zero()
        return self.gross_profit() - self.transaction_cost() - self.holding_cost() * self.entry.amount

    def __repr__(self) -> str:
        return f"Position(entry={self.entry}, exit={self.exit})"


class TradingRecord:
    """Closed positions plus the position currently being traded."""

    def __init__(
        self,
        num_factory: NumFactory,
        starting_type: TradeType = TradeType.BUY,
        transaction_cost_model: Optional[CostModel] = None,
        holding_cost_model: Optional[CostModel] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.num_factory = num_factory
        self.starting_type = starting_type
        self.transaction_cost_model = transaction_cost_model or ZeroCostModel()
        self.holding_cost_model = holding_cost_model or ZeroCostModel()
        self.logger = logger or logging.getLogger("barstream.analysis")
        self._positions: List[Position] = []
        self._current = self._new_position()
        self._last_bar: Optional[Bar] = None

    def _new_position(self) -> Position:
        return Position(
            self.num_factory, self.starting_type, self.transaction_cost_model, self.holding_cost_model
        )

    @property
    def positions(self) -> List[Position]:
        """Closed positions in the order they were closed."""

        return list(self._positions)

    @property
    def current_position(self) -> Position:
        return self._current

    @property
    def is_closed(self) -> bool:
        return not self._current.is_opened

    @property
    def last_bar(self) -> Optional[Bar]:
        return self._last_bar

    def operate(self, when: datetime, price_per_asset: Amount, amount: Amount = 1) -> Trade:
        """Enter when flat, exit when a position is open."""

        trade = self._current.operate(when, price_per_asset, amount)
        if self._current.is_closed:
            self._positions.append(self._current)
            self.logger.debug(
                "Position closed",
                extra={"exit_time": when.isoformat(), "price": str(trade.price_per_asset), "positions": len(self._positions)},
            )
            self._current = self._new_position()
        else:
            self.logger.debug(
                "Position opened",
                extra={"entry_time": when.isoformat(), "price": str(trade.price_per_asset), "type": trade.trade_type.value},
            )
        return trade

    def enter(self, when: datetime, price_per_asset: Amount, amount: Amount = 1) -> Trade:
        if self._current.is_opened:
            raise PositionStateError("a position is already open")
        return self.operate(when, price_per_asset, amount)

    def exit(self, when: datetime, price_per_asset: Amount, amount: Amount = 1) -> Trade:
        if not self._current.is_opened:
            raise PositionStateError("no open position to exit")
        return self.operate(when, price_per_asset, amount)

    def on_bar(self, bar: Bar) -> None:
        """Forward ``bar`` to the open position and remember it as the latest."""

        if self._last_bar is not None and bar.end_time <= self._last_bar.end_time:
            return
        self._last_bar = bar
        self._current.on_bar(bar)

    def all_positions(self) -> List[Position]:
        """Closed positions followed by the open one, if any."""

        positions = list(self._positions)
        if self._current.is_opened:
            positions.append(self._current)
        return positions


__all__ = [
    "CostModel",
    "ZeroCostModel",
    "FixedTransactionCostModel",
    "LinearTransactionCostModel",
    "LinearBorrowingCostModel",
    "Trade",
    "Position",
    "TradingRecord",
]
