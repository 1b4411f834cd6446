"""Build indicator contexts from engine configuration."""
from __future__ import annotations

import logging
from typing import Callable, Dict, Optional

from barstream.config.models import ContextConfig, EngineConfig, IndicatorDefinition
from barstream.core.enums import IndicatorKind
from barstream.core.errors import InvalidParameterError
from barstream.num.factory import NumFactory

from .base import NumericIndicator
from .context import IndicatorContext, IndicatorContexts, IndicatorIdentification
from .directional import ADXIndicator, ATRIndicator, MinusDIIndicator, PlusDIIndicator
from .oscillators import MACDIndicator, RSIIndicator
from .prices import ClosePriceIndicator

Builder = Callable[[IndicatorDefinition, ClosePriceIndicator, NumFactory], NumericIndicator]

_BUILDERS: Dict[IndicatorKind, Builder] = {
    IndicatorKind.CLOSE: lambda definition, close, factory: close,
    IndicatorKind.SMA: lambda definition, close, factory: close.sma(definition.bar_count),
    IndicatorKind.EMA: lambda definition, close, factory: close.ema(definition.bar_count),
    IndicatorKind.WMA: lambda definition, close, factory: close.wma(definition.bar_count),
    IndicatorKind.MMA: lambda definition, close, factory: close.mma(definition.bar_count),
    IndicatorKind.HIGHEST: lambda definition, close, factory: close.highest(definition.bar_count),
    IndicatorKind.LOWEST: lambda definition, close, factory: close.lowest(definition.bar_count),
    IndicatorKind.RUNNING_TOTAL: lambda definition, close, factory: close.running_total(definition.bar_count),
    IndicatorKind.VARIANCE: lambda definition, close, factory: close.variance(definition.bar_count),
    IndicatorKind.STDDEV: lambda definition, close, factory: close.stddev(definition.bar_count),
    IndicatorKind.RSI: lambda definition, close, factory: RSIIndicator(close, definition.bar_count),
    IndicatorKind.MACD: lambda definition, close, factory: MACDIndicator(
        close, definition.short_bar_count, definition.long_bar_count
    ),
    IndicatorKind.ATR: lambda definition, close, factory: ATRIndicator(factory, definition.bar_count),
    IndicatorKind.PLUS_DI: lambda definition, close, factory: PlusDIIndicator(factory, definition.bar_count),
    IndicatorKind.MINUS_DI: lambda definition, close, factory: MinusDIIndicator(factory, definition.bar_count),
    IndicatorKind.ADX: lambda definition, close, factory: ADXIndicator(
        factory, definition.di_bar_count or definition.bar_count, definition.bar_count
    ),
}


def build_indicator(definition: IndicatorDefinition, close: ClosePriceIndicator, num_factory: NumFactory) -> NumericIndicator:
    """Instantiate one configured indicator on top of the shared close price."""

    builder = _BUILDERS.get(definition.kind)
    if builder is None:
        raise InvalidParameterError(f"unsupported indicator kind: {definition.kind}")
    return builder(definition, close, num_factory)


def build_context(
    config: ContextConfig,
    num_factory: NumFactory,
    logger: Optional[logging.Logger] = None,
) -> IndicatorContext:
    """Build the context of one time frame; all indicators share one close price."""

    context = IndicatorContext.empty(config.time_frame, config.history_window, logger)
    close = ClosePriceIndicator(num_factory)
    for definition in config.indicators:
        indicator = build_indicator(definition, close, num_factory)
        context.add(indicator, IndicatorIdentification(definition.name, indicator.lag))
    return context


def build_contexts(
    config: EngineConfig,
    num_factory: NumFactory,
    logger: Optional[logging.Logger] = None,
) -> IndicatorContexts:
    """Build every configured context, keyed by time frame."""

    logger = logger or logging.getLogger("barstream.indicators")
    contexts = IndicatorContexts(logger=logger)
    for context_config in config.contexts:
        contexts.add(build_context(context_config, num_factory, logger))
        logger.info(
            "Indicator context built",
            extra={
                "time_frame": context_config.time_frame.value,
                "indicators": [definition.name for definition in context_config.indicators],
            },
        )
    return contexts


__all__ = ["build_indicator", "build_context", "build_contexts"]
