"""Trip and activity status derivation.

Pure functions over a ``[start, end]`` window and a ``now``, plus a
cancellable ticker that recomputes the countdown while a trip is on screen.
"""

import asyncio
import logging
from collections.abc import Callable, Iterable
from contextlib import suppress
from datetime import datetime

from pydantic import BaseModel, ConfigDict

from triptribe.models import TimeComponents, Trip, TripStatus, utcnow

logger = logging.getLogger(__name__)

COUNTDOWN_LABELS: dict[TripStatus, str] = {
    TripStatus.UPCOMING: "Time until trip:",
    TripStatus.ONGOING: "Time remaining:",
    TripStatus.COMPLETED: "Trip completed",
}


def trip_status(start: datetime, end: datetime, now: datetime) -> TripStatus:
    if now < start:
        return TripStatus.UPCOMING
    if now <= end:
        return TripStatus.ONGOING
    return TripStatus.COMPLETED


def trip_progress(start: datetime, end: datetime, now: datetime) -> float:
    """Elapsed fraction of the window, clamped to [0, 1]."""
    if now < start:
        return 0.0
    if now > end:
        return 1.0
    total = (end - start).total_seconds()
    if total <= 0:
        return 1.0
    elapsed = (now - start).total_seconds()
    return min(max(elapsed / total, 0.0), 1.0)


def countdown_target(start: datetime, end: datetime, now: datetime) -> datetime | None:
    status = trip_status(start, end, now)
    if status == TripStatus.UPCOMING:
        return start
    if status == TripStatus.ONGOING:
        return end
    return None


def time_remaining(start: datetime, end: datetime, now: datetime) -> TimeComponents:
    target = countdown_target(start, end, now)
    if target is None:
        return TimeComponents()
    return TimeComponents.from_timedelta(target - now)


def split_upcoming_and_past(trips: Iterable[Trip], now: datetime) -> tuple[list[Trip], list[Trip]]:
    """Trips not yet over (soonest first) and finished trips (most recent first)."""
    trips = list(trips)
    upcoming = sorted((t for t in trips if t.end_date >= now), key=lambda t: t.start_date)
    past = sorted((t for t in trips if t.end_date < now), key=lambda t: t.start_date, reverse=True)
    return upcoming, past


class CountdownSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: TripStatus
    progress: float
    remaining: TimeComponents
    label: str


def countdown_snapshot(start: datetime, end: datetime, now: datetime) -> CountdownSnapshot:
    status = trip_status(start, end, now)
    return CountdownSnapshot(
        status=status,
        progress=trip_progress(start, end, now),
        remaining=time_remaining(start, end, now),
        label=COUNTDOWN_LABELS[status],
    )


class CountdownTicker:
    """Repeating countdown recomputation bound to an active view.

    Runs as a task on the current event loop. ``stop()`` cancels it; as an
    async context manager the task never outlives the ``async with`` block.
    """

    def __init__(
        self,
        start: datetime,
        end: datetime,
        on_tick: Callable[[CountdownSnapshot], None],
        interval: float = 1.0,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._start = start
        self._end = end
        self._on_tick = on_tick
        self._interval = interval
        self._clock = clock
        self._task: asyncio.Task[None] | None = None

    @classmethod
    def for_trip(cls, trip: Trip, on_tick: Callable[[CountdownSnapshot], None], **kwargs) -> "CountdownTicker":
        return cls(trip.start_date, trip.end_date, on_tick, **kwargs)

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def snapshot(self) -> CountdownSnapshot:
        return countdown_snapshot(self._start, self._end, self._clock())

    def start(self) -> None:
        self.stop()
        self._task = asyncio.get_running_loop().create_task(self._run())

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def _run(self) -> None:
        while True:
            try:
                self._on_tick(self.snapshot())
            except Exception:
                logger.exception("Countdown tick callback failed")
            await asyncio.sleep(self._interval)

    async def __aenter__(self) -> "CountdownTicker":
        self.start()
        return self

    async def __aexit__(self, *args: object) -> None:
        task = self._task
        self.stop()
        if task is not None:
            with suppress(asyncio.CancelledError):
                await task
