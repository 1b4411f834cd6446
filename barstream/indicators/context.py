"""Named indicator registries per time frame.

An :class:`IndicatorContext` owns the indicators computed for one time frame,
fans every bar out to them in registration order and notifies listeners.
:class:`IndicatorContexts` groups contexts by time frame and creates empty
ones on first access.
"""
from __future__ import annotations

import logging
import uuid
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Deque, Dict, Iterator, List, Optional, Tuple, Union

from barstream.core.enums import TimeFrame
from barstream.core.errors import HistoryNotEnabledError, InvalidParameterError, require_positive
from barstream.core.types import ChangeListener, UpdateListener
from barstream.market.models import Bar

from .base import BooleanIndicator, Indicator, NumericIndicator


@dataclass(frozen=True)
class IndicatorIdentification:
    """Registry key: a name plus the lag of the registered indicator."""

    name: str
    lag: int = 0


Key = Union[str, IndicatorIdentification]


class IndicatorHistory:
    """Change listener keeping the last values of every indicator in a context.

    Holds ``window + 1`` values per indicator, so the current value and
    ``window`` previous ones are available.
    """

    def __init__(self, window: int) -> None:
        self.window = require_positive("history_window", window)
        self._values: Dict[IndicatorIdentification, Deque[Any]] = {}

    def __call__(self, begin_time: datetime, identification: IndicatorIdentification, indicator: Indicator) -> None:
        values = self._values.get(identification)
        if values is None:
            values = deque(maxlen=self.window + 1)
            self._values[identification] = values
        values.append(indicator.value)

    def previous(self, identification: IndicatorIdentification, bars: int = 1) -> Optional[Any]:
        """Value ``bars`` bars before the latest one; ``bars=0`` is the latest."""

        if bars < 0 or bars > self.window:
            raise InvalidParameterError(f"bars must be within [0, {self.window}], got {bars}")
        values = self._values.get(identification)
        if values is None or bars >= len(values):
            return None
        return values[-1 - bars]


class IndicatorContext:
    """Insertion-ordered registry of indicators sharing one bar stream."""

    def __init__(
        self,
        time_frame: TimeFrame = TimeFrame.UNDEFINED,
        *indicators: Indicator,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.time_frame = time_frame
        self.logger = logger or logging.getLogger("barstream.indicators")
        self._indicators: Dict[IndicatorIdentification, Indicator] = {}
        self._change_listeners: List[ChangeListener] = []
        self._update_listeners: List[UpdateListener] = []
        self._history: Optional[IndicatorHistory] = None
        self._stable = False
        self._last_end_time: Optional[datetime] = None
        for indicator in indicators:
            self.add(indicator)

    @classmethod
    def empty(
        cls,
        time_frame: TimeFrame = TimeFrame.UNDEFINED,
        history_window: Optional[int] = None,
        logger: Optional[logging.Logger] = None,
    ) -> "IndicatorContext":
        context = cls(time_frame, logger=logger)
        if history_window is not None:
            context.enable_history(history_window)
        return context

    # Registration ---------------------------------------------------------
    def add(self, indicator: Indicator, name: Optional[Key] = None) -> IndicatorIdentification:
        """Register ``indicator`` and return the key it is stored under.

        Without ``name`` a unique placeholder is generated. A plain string is
        combined with the indicator's lag.
        """

        if name is None:
            identification = IndicatorIdentification(str(uuid.uuid4()), indicator.lag)
        elif isinstance(name, IndicatorIdentification):
            identification = name
        else:
            identification = IndicatorIdentification(name, indicator.lag)
        self._indicators[identification] = indicator
        return identification

    def add_all(self, *indicators: Indicator) -> None:
        for indicator in indicators:
            self.add(indicator)

    def register_change_listener(self, listener: ChangeListener) -> None:
        self._change_listeners.append(listener)

    def register_update_listener(self, listener: UpdateListener) -> None:
        self._update_listeners.append(listener)

    def enable_history(self, window: int) -> IndicatorHistory:
        if self._history is not None:
            self._change_listeners.remove(self._history)
        self._history = IndicatorHistory(window)
        self.register_change_listener(self._history)
        return self._history

    # Event fan-out --------------------------------------------------------
    def advance(self, bar: Bar) -> None:
        if self._last_end_time is not None and bar.end_time <= self._last_end_time:
            self.logger.debug(
                "Ignoring stale bar",
                extra={
                    "time_frame": self.time_frame.value,
                    "end_time": bar.end_time.isoformat(),
                    "last_end_time": self._last_end_time.isoformat(),
                },
            )
            return
        self._last_end_time = bar.end_time
        for identification, indicator in self._indicators.items():
            indicator.advance(bar)
            for listener in self._change_listeners:
                listener(bar.begin_time, identification, indicator)
        for listener in self._update_listeners:
            listener(bar.end_time)

    @property
    def is_stable(self) -> bool:
        """Latches true once every registered indicator is stable."""

        if not self._stable:
            self._stable = all(indicator.is_stable for indicator in self._indicators.values())
        return self._stable

    # Lookup ---------------------------------------------------------------
    def _resolve(self, name: Key) -> Optional[IndicatorIdentification]:
        if isinstance(name, IndicatorIdentification):
            return name if name in self._indicators else None
        for identification in self._indicators:
            if identification.name == name:
                return identification
        return None

    def get(self, name: Key) -> Optional[Indicator]:
        identification = self._resolve(name)
        return self._indicators[identification] if identification is not None else None

    def get_numeric(self, name: Key) -> Optional[NumericIndicator]:
        indicator = self.get(name)
        return indicator if isinstance(indicator, NumericIndicator) else None

    def get_boolean(self, name: Key) -> Optional[BooleanIndicator]:
        indicator = self.get(name)
        return indicator if isinstance(indicator, BooleanIndicator) else None

    def previous_value(self, name: Key, bars: int = 1) -> Optional[Any]:
        if self._history is None:
            raise HistoryNotEnabledError(f"history is not enabled for context {self.time_frame.value}")
        identification = self._resolve(name)
        if identification is None:
            return None
        return self._history.previous(identification, bars)

    @property
    def first(self) -> Optional[Indicator]:
        return next(iter(self._indicators.values()), None)

    @property
    def indicators(self) -> Dict[IndicatorIdentification, Indicator]:
        return dict(self._indicators)

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, (str, IndicatorIdentification)):
            return False
        return self._resolve(name) is not None

    def __iter__(self) -> Iterator[Tuple[IndicatorIdentification, Indicator]]:
        return iter(list(self._indicators.items()))

    def __len__(self) -> int:
        return len(self._indicators)

    def __repr__(self) -> str:
        return f"IndicatorContext({self.time_frame.value}, {len(self._indicators)} indicators)"


class IndicatorContexts:
    """Contexts keyed by time frame, created lazily."""

    def __init__(self, history_window: Optional[int] = None, logger: Optional[logging.Logger] = None) -> None:
        self.history_window = history_window
        self.logger = logger or logging.getLogger("barstream.indicators")
        self._contexts: Dict[TimeFrame, IndicatorContext] = {}

    def __getitem__(self, time_frame: TimeFrame) -> IndicatorContext:
        context = self._contexts.get(time_frame)
        if context is None:
            context = IndicatorContext.empty(time_frame, self.history_window, self.logger)
            self._contexts[time_frame] = context
            self.logger.debug("Created indicator context", extra={"time_frame": time_frame.value})
        return context

    def add(self, context: IndicatorContext) -> None:
        self._contexts[context.time_frame] = context

    def advance(self, bar: Bar) -> None:
        """Route ``bar`` to the context of its time frame."""

        self[bar.time_frame].advance(bar)

    @property
    def is_stable(self) -> bool:
        return all(context.is_stable for context in self._contexts.values())

    @property
    def time_frames(self) -> List[TimeFrame]:
        return list(self._contexts)

    def __contains__(self, time_frame: object) -> bool:
        return time_frame in self._contexts

    def __iter__(self) -> Iterator[IndicatorContext]:
        return iter(list(self._contexts.values()))

    def __len__(self) -> int:
        return len(self._contexts)


__all__ = ["IndicatorIdentification", "IndicatorHistory", "IndicatorContext", "IndicatorContexts"]
