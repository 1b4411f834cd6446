"""Time-indexed valuation of positions: cash flow, realized cash flow, returns."""

from .cash_flow import CashFlow
from .position import (
    CostModel,
    FixedTransactionCostModel,
    LinearBorrowingCostModel,
    LinearTransactionCostModel,
    Position,
    Trade,
    TradingRecord,
    ZeroCostModel,
)
from .realized_cash_flow import RealizedCashFlow
from .returns import Returns, period_return

__all__ = [
    "CashFlow",
    "RealizedCashFlow",
    "Returns",
    "period_return",
    "CostModel",
    "ZeroCostModel",
    "FixedTransactionCostModel",
    "LinearTransactionCostModel",
    "LinearBorrowingCostModel",
    "Trade",
    "Position",
    "TradingRecord",
]
