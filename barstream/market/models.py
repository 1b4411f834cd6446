"""Bar model consumed by indicators and positions."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from barstream.core.enums import TimeFrame
from barstream.core.time_utils import ensure_aware
from barstream.core.types import Num
from barstream.num.factory import NumFactory


@dataclass(frozen=True, slots=True)
class Bar:
    """Normalized OHLCV bar.

    Produced by an external feed or replayer and never mutated by the engine.
    ``begin_time`` drives indicator deduplication, ``end_time`` keys the
    valuation series.
    """

    time_frame: TimeFrame
    begin_time: datetime
    end_time: datetime
    open: Num
    high: Num
    low: Num
    close: Num
    volume: Num
    trades: int = 0

    def __post_init__(self) -> None:
        ensure_aware(self.begin_time)
        ensure_aware(self.end_time)
        if self.end_time < self.begin_time:
            raise ValueError("Bar end_time must not precede begin_time")

    @property
    def time_period(self) -> timedelta:
        return self.end_time - self.begin_time

    @classmethod
    def of(
        cls,
        num_factory: NumFactory,
        *,
        begin_time: datetime,
        duration: timedelta,
        open: float,
        high: float,
        low: float,
        close: float,
        volume: float = 0.0,
        trades: int = 0,
        time_frame: TimeFrame = TimeFrame.UNDEFINED,
    ) -> "Bar":
        """Build a bar from plain numbers using ``num_factory``."""

        return cls(
            time_frame=time_frame,
            begin_time=begin_time,
            end_time=begin_time + duration,
            open=num_factory.value_of(open),
            high=num_factory.value_of(high),
            low=num_factory.value_of(low),
            close=num_factory.value_of(close),
            volume=num_factory.value_of(volume),
            trades=trades,
        )

    def as_dict(self) -> dict[str, object]:
        """Convenience representation for logging/tests."""

        return {
            "begin_time": self.begin_time.isoformat(),
            "end_time": self.end_time.isoformat(),
            "open": str(self.open),
            "high": str(self.high),
            "low": str(self.low),
            "close": str(self.close),
            "volume": str(self.volume),
        }


__all__ = ["Bar"]
