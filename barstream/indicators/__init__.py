"""Streaming technical indicators.

Indicators are advanced one bar at a time and keep only the window state
they need. Build them directly, fluently from another indicator
(``ClosePriceIndicator(factory).sma(20)``), or from configuration via
:func:`build_contexts`.
"""

from .averages import EMAIndicator, MMAIndicator, SMAIndicator, WMAIndicator
from .base import BaseIndicator, BooleanIndicator, Indicator, NumericIndicator
from .boolean import CrossIndicator, OverIndicator, UnderIndicator
from .context import IndicatorContext, IndicatorContexts, IndicatorHistory, IndicatorIdentification
from .directional import (
    ADXIndicator,
    ATRIndicator,
    DXIndicator,
    MinusDIIndicator,
    MinusDMIndicator,
    PlusDIIndicator,
    PlusDMIndicator,
    TrueRangeIndicator,
)
from .extrema import HighestValueIndicator, LowestValueIndicator
from .helpers import (
    BinaryOperation,
    ConstantIndicator,
    GainIndicator,
    LossIndicator,
    PreviousValueIndicator,
    RunningTotalIndicator,
    UnaryOperation,
)
from .oscillators import MACDIndicator, RSIIndicator
from .prices import (
    ClosePriceIndicator,
    HighPriceIndicator,
    LowPriceIndicator,
    OpenPriceIndicator,
    TypicalPriceIndicator,
    VolumeIndicator,
)
from .registry import build_context, build_contexts, build_indicator
from .statistics import (
    CovarianceIndicator,
    PearsonCorrelationIndicator,
    StandardDeviationIndicator,
    VarianceIndicator,
)

__all__ = [
    "Indicator",
    "BaseIndicator",
    "NumericIndicator",
    "BooleanIndicator",
    "ConstantIndicator",
    "BinaryOperation",
    "UnaryOperation",
    "PreviousValueIndicator",
    "RunningTotalIndicator",
    "GainIndicator",
    "LossIndicator",
    "SMAIndicator",
    "EMAIndicator",
    "WMAIndicator",
    "MMAIndicator",
    "HighestValueIndicator",
    "LowestValueIndicator",
    "CovarianceIndicator",
    "VarianceIndicator",
    "StandardDeviationIndicator",
    "PearsonCorrelationIndicator",
    "TrueRangeIndicator",
    "PlusDMIndicator",
    "MinusDMIndicator",
    "ATRIndicator",
    "PlusDIIndicator",
    "MinusDIIndicator",
    "DXIndicator",
    "ADXIndicator",
    "MACDIndicator",
    "RSIIndicator",
    "CrossIndicator",
    "OverIndicator",
    "UnderIndicator",
    "ClosePriceIndicator",
    "OpenPriceIndicator",
    "HighPriceIndicator",
    "LowPriceIndicator",
    "VolumeIndicator",
    "TypicalPriceIndicator",
    "IndicatorIdentification",
    "IndicatorHistory",
    "IndicatorContext",
    "IndicatorContexts",
    "build_indicator",
    "build_context",
    "build_contexts",
]
