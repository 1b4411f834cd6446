from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Optional, Sequence

import pytest

from barstream.core.enums import TimeFrame
from barstream.market.models import Bar
from barstream.num.factory import DecimalNumFactory, DoubleNumFactory, NumFactory

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)
ONE_DAY = timedelta(days=1)


@pytest.fixture(params=[DoubleNumFactory(), DecimalNumFactory()], ids=["double", "decimal"])
def num_factory(request: pytest.FixtureRequest) -> NumFactory:
    return request.param


@pytest.fixture
def double_factory() -> NumFactory:
    return DoubleNumFactory()


@pytest.fixture
def base_time() -> datetime:
    return BASE_TIME


@pytest.fixture
def bar_factory(num_factory: NumFactory) -> Callable[..., Bar]:
    """Build a single daily bar; ``index`` selects its position in time."""

    def _factory(
        index: int = 0,
        *,
        close: float = 100.0,
        open: Optional[float] = None,
        high: Optional[float] = None,
        low: Optional[float] = None,
        volume: float = 1_000.0,
        duration: timedelta = ONE_DAY,
        time_frame: TimeFrame = TimeFrame.DAY,
    ) -> Bar:
        return Bar.of(
            num_factory,
            begin_time=BASE_TIME + duration * index,
            duration=duration,
            open=close if open is None else open,
            high=close if high is None else high,
            low=close if low is None else low,
            close=close,
            volume=volume,
            time_frame=time_frame,
        )

    return _factory


@pytest.fixture
def series_factory(bar_factory: Callable[..., Bar]) -> Callable[..., list[Bar]]:
    """Build consecutive daily bars from close prices (and optional highs/lows)."""

    def _factory(
        closes: Sequence[float],
        highs: Optional[Sequence[float]] = None,
        lows: Optional[Sequence[float]] = None,
        **kwargs: object,
    ) -> list[Bar]:
        bars = []
        for index, close in enumerate(closes):
            bars.append(
                bar_factory(
                    index,
                    close=close,
                    high=highs[index] if highs is not None else None,
                    low=lows[index] if lows is not None else None,
                    **kwargs,
                )
            )
        return bars

    return _factory


@pytest.fixture
def telemetry_tmpdir(tmp_path_factory: pytest.TempPathFactory) -> Path:
    return tmp_path_factory.mktemp("telemetry")


@pytest.fixture
def feed() -> Callable[..., list]:
    """Advance an indicator over bars and collect its value after each one."""

    def _feed(indicator, bars: Sequence[Bar]) -> list:
        values = []
        for bar in bars:
            indicator.advance(bar)
            values.append(indicator.value)
        return values

    return _feed
