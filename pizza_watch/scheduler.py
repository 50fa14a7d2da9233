"""
Daily Run Scheduler

Triggers one watch run per day at a fixed wall-clock time. Scheduling is an
explicit state machine (idle, waiting, running) so that only one run is ever
in flight, and the clock and sleep functions are injectable.
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, time, timedelta, timezone, tzinfo
from enum import Enum
from typing import Callable, Optional, Union
from zoneinfo import ZoneInfo

from .exceptions import SchedulerError

logger = logging.getLogger(__name__)

DEFAULT_RUN_AT = time(13, 37)
DEFAULT_TIMEZONE = "America/Los_Angeles"


class SchedulerState(Enum):
    """Where the scheduler is in its daily cycle."""
    IDLE = "idle"
    WAITING = "waiting"
    RUNNING = "running"


@dataclass(frozen=True)
class Schedule:
    state: SchedulerState = SchedulerState.IDLE
    # Trigger being waited for, or the one the current run was started by
    until: Optional[datetime] = None


@dataclass(frozen=True)
class Start:
    pass


@dataclass(frozen=True)
class TimerFired:
    pass


@dataclass(frozen=True)
class RunCompleted:
    error: Optional[BaseException] = None


Event = Union[Start, TimerFired, RunCompleted]


def next_run_after(now: datetime, run_at: time, tz: tzinfo) -> datetime:
    """Today's trigger in ``tz`` unless ``now`` is already past it, else tomorrow's."""
    local = now.astimezone(tz)
    target = datetime.combine(local.date(), run_at, tzinfo=tz)
    if local > target:
        target = datetime.combine(local.date() + timedelta(days=1), run_at, tzinfo=tz)
    return target


def transition(
    schedule: Schedule,
    event: Event,
    now: datetime,
    run_at: time = DEFAULT_RUN_AT,
    tz: tzinfo = timezone.utc,
) -> Schedule:
    """Return the schedule that follows ``event``; illegal events raise SchedulerError."""
    state = schedule.state

    if state is SchedulerState.IDLE and isinstance(event, Start):
        return Schedule(SchedulerState.WAITING, next_run_after(now, run_at, tz))

    if state is SchedulerState.WAITING and isinstance(event, TimerFired):
        if now < schedule.until:
            # Woken early
            return schedule
        return Schedule(SchedulerState.RUNNING, schedule.until)

    if state is SchedulerState.RUNNING and isinstance(event, RunCompleted):
        following = next_run_after(now, run_at, tz)
        if schedule.until is not None and following <= schedule.until:
            following = next_run_after(schedule.until + timedelta(seconds=1), run_at, tz)
        return Schedule(SchedulerState.WAITING, following)

    raise SchedulerError(f"Cannot handle {type(event).__name__} while {state.value}")


class DailyScheduler:
    """Runs ``job`` once a day, forever, one run at a time."""

    def __init__(
        self,
        job: Callable[[], object],
        run_at: time = DEFAULT_RUN_AT,
        tz: tzinfo | None = None,
        clock: Callable[[], datetime] | None = None,
        sleep: Callable[[float], object] | None = None,
    ):
        self.job = job
        self.run_at = run_at
        self.tz = tz or ZoneInfo(DEFAULT_TIMEZONE)
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self._stop_event = threading.Event()
        self.sleep = sleep or self._stop_event.wait
        self.schedule = Schedule()

    @property
    def state(self) -> SchedulerState:
        return self.schedule.state

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    def _apply(self, event: Event) -> None:
        self.schedule = transition(self.schedule, event, self.clock(), self.run_at, self.tz)

    def _format(self, moment: datetime) -> str:
        return moment.astimezone(self.tz).strftime("%Y-%m-%d %H:%M:%S %Z")

    def start(self) -> None:
        self._apply(Start())
        logger.info(f"Next run scheduled for: {self._format(self.schedule.until)}")

    def stop(self) -> None:
        """Stop after the current wait or run."""
        self._stop_event.set()

    def run_pending(self) -> bool:
        """
        Wait for the next trigger and run the job once.

        Returns False if stopped before the trigger was reached. Job errors
        are logged and the next trigger is scheduled anyway.
        """
        if self.state is SchedulerState.IDLE:
            self.start()

        while self.state is SchedulerState.WAITING:
            if self.stopped:
                return False
            delay = (self.schedule.until - self.clock()).total_seconds()
            if delay > 0:
                self.sleep(delay)
                continue
            self._apply(TimerFired())

        logger.info(f"Running at {self._format(self.clock())}")
        error = None
        try:
            self.job()
            logger.info("Run completed, scheduling next run...")
        except Exception as e:
            logger.error(f"Run failed: {e}", exc_info=True)
            logger.info("Scheduling next run anyway...")
            error = e

        self._apply(RunCompleted(error))
        logger.info(f"Next run scheduled for: {self._format(self.schedule.until)}")
        return True

    def run_forever(self) -> None:
        """Loop until stop() is called."""
        logger.info(f"Starting scheduler for daily runs at {self.run_at.strftime('%H:%M')}...")
        while not self.stopped:
            self.run_pending()
