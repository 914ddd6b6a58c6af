"""
Background cron scheduler for category releases.

Runs as an asyncio task next to the HTTP server. Every tick it fires the
categories whose next fire time has passed; each firing runs
``FileReleaser.run_scheduled`` in a worker thread, so a slow move never holds
up the event loop or the other categories.

Misfire policy: fire times are computed from the moment the scheduler starts;
firings missed while the service was down are not replayed.
"""

from __future__ import annotations

import asyncio
import time
from datetime import datetime
from typing import Any
from zoneinfo import ZoneInfo

from filerelease.config.settings import ScheduleSettings
from filerelease.core.categories import Category
from filerelease.service.cron_parser import CronParseError, next_fire_time_cron, resolve_timezone
from filerelease.service.releaser import FileReleaser, ScheduledRun
from filerelease.utils.logging import get_logger

logger = get_logger("filerelease.service.scheduler")

TICK_SECONDS = 0.5
INVALID_CRON_BACKOFF_SECONDS = 60.0


class ReleaseScheduler:
    def __init__(
        self,
        releaser: FileReleaser,
        schedules: dict[Category, ScheduleSettings],
        *,
        tick_seconds: float = TICK_SECONDS,
    ):
        self.releaser = releaser
        self.schedules = dict(schedules)
        self.tick_seconds = tick_seconds

        self._next_fire: dict[Category, float] = {}
        self._last_runs: dict[Category, ScheduledRun] = {}
        self._in_flight: set[asyncio.Task] = set()
        self._task: asyncio.Task | None = None
        self._stopping = asyncio.Event()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def active_schedules(self) -> dict[Category, ScheduleSettings]:
        return {c: s for c, s in self.schedules.items() if s.enabled}

    def start(self) -> None:
        """Start the scheduler loop on the running event loop."""
        if self.running:
            return
        self._stopping.clear()
        self.prime(time.time())
        self._task = asyncio.create_task(self._loop())
        logger.info(f"Scheduler started with {len(self.active_schedules)} active schedule(s)")

    async def stop(self) -> None:
        """Stop the loop and wait for in-flight releases to finish."""
        self._stopping.set()
        if self._task is not None:
            self._task.cancel()
            await asyncio.gather(self._task, return_exceptions=True)
            self._task = None
        if self._in_flight:
            await asyncio.gather(*self._in_flight, return_exceptions=True)
        logger.info("Scheduler stopped")

    def prime(self, now: float) -> None:
        """Compute the first fire time of every active schedule relative to ``now``."""
        for category, sched in self.active_schedules.items():
            self._next_fire[category] = self.compute_next_fire(sched, now)
            logger.debug(f"Scheduler: {category.name} next fire at {_iso(self._next_fire[category])}")

    def compute_next_fire(self, sched: ScheduleSettings, reference_ts: float) -> float:
        """Return the next fire timestamp after ``reference_ts`` for ``sched``."""
        try:
            return next_fire_time_cron(
                sched.cron,
                now=datetime.fromtimestamp(reference_ts, tz=resolve_timezone(sched.timezone)),
                timezone=sched.timezone,
            ).timestamp()
        except CronParseError as e:
            logger.error(f"Scheduler: invalid cron for {sched.category.name}: {e}")
            return reference_ts + INVALID_CRON_BACKOFF_SECONDS

    def tick(self, now: float | None = None) -> list[asyncio.Task]:
        """
        Fire every category that is due at ``now``.

        Returns:
            The tasks started for this tick
        """
        now = time.time() if now is None else now
        started: list[asyncio.Task] = []

        for category, sched in self.active_schedules.items():
            due = self._next_fire.get(category)
            if due is None:
                self._next_fire[category] = self.compute_next_fire(sched, now)
                continue
            if now < due:
                continue

            self._next_fire[category] = self.compute_next_fire(sched, now)
            task = asyncio.create_task(self._fire(category))
            self._in_flight.add(task)
            task.add_done_callback(self._in_flight.discard)
            started.append(task)

        return started

    async def _fire(self, category: Category) -> ScheduledRun | None:
        try:
            run = await asyncio.to_thread(self.releaser.run_scheduled, category)
        except Exception as e:
            logger.error(f"Scheduler: firing {category.name} failed: {e}", exc_info=True)
            return None
        self._last_runs[category] = run
        return run

    async def _loop(self) -> None:
        while not self._stopping.is_set():
            try:
                self.tick()
            except Exception as e:
                logger.error(f"schedule loop error: {e}", exc_info=True)
            await asyncio.sleep(self.tick_seconds)

    def status(self) -> dict[str, Any]:
        """Scheduler status for the API and the CLI."""
        categories = []
        for category, sched in self.schedules.items():
            last = self._last_runs.get(category)
            next_ts = self._next_fire.get(category) if sched.enabled else None
            categories.append(
                {
                    "category": category.name,
                    **sched.as_dict(),
                    "next_fire_at": _iso(next_ts) if next_ts else None,
                    "last_run_at": last.started_at.isoformat() if last else None,
                    "last_outcome": last.status if last else None,
                    "running": self.releaser.is_running(category),
                }
            )
        return {
            "running": self.running,
            "scheduled_categories": len(self.active_schedules),
            "categories": categories,
        }


def _iso(ts: float) -> str:
    return datetime.fromtimestamp(ts, tz=ZoneInfo("UTC")).isoformat()
