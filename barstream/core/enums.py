"""Enumerations shared across engine subsystems.

They live in the core package so that the market, indicator and analysis
modules can import them without introducing circular dependencies.
"""
from __future__ import annotations

from enum import Enum


class TradeType(str, Enum):
    """Direction of a trade: buying or selling the asset."""

    BUY = "buy"
    SELL = "sell"

    @property
    def complement(self) -> "TradeType":
        """Return the opposite direction (the exit type of a position)."""

        return TradeType.SELL if self is TradeType.BUY else TradeType.BUY


class TimeFrame(str, Enum):
    """Bar durations an indicator context can be keyed by."""

    UNDEFINED = "undefined"
    MIN_1 = "1m"
    MIN_5 = "5m"
    MIN_15 = "15m"
    HOUR_1 = "1h"
    HOUR_4 = "4h"
    DAY = "1d"
    WEEK = "1w"


class NumKind(str, Enum):
    """Numeric representations a run can be configured with."""

    DOUBLE = "double"
    DECIMAL = "decimal"


class ReturnType(str, Enum):
    """How per-bar returns are expressed."""

    LOG = "log"
    ARITHMETIC = "arithmetic"


class IndicatorKind(str, Enum):
    """Indicator families that can be declared in engine configuration."""

    CLOSE = "close"
    SMA = "sma"
    EMA = "ema"
    WMA = "wma"
    MMA = "mma"
    HIGHEST = "highest"
    LOWEST = "lowest"
    RUNNING_TOTAL = "running_total"
    VARIANCE = "variance"
    STDDEV = "stddev"
    RSI = "rsi"
    MACD = "macd"
    ATR = "atr"
    PLUS_DI = "plus_di"
    MINUS_DI = "minus_di"
    ADX = "adx"
