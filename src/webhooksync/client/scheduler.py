"""Scheduler for periodic inbound pulls.

This module provides:
- PullScheduler: Pulls every sync_interval minutes, and once shortly after
  start when auto_sync_on_startup is set
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.date import DateTrigger
from apscheduler.triggers.interval import IntervalTrigger

if TYPE_CHECKING:
    from webhooksync.client.inbound import InboundResult, InboundSync
    from webhooksync.core.config import SyncConfig

logger = logging.getLogger(__name__)

STARTUP_DELAY = 2.0  # seconds

PERIODIC_JOB_ID = "periodic_pull"
STARTUP_JOB_ID = "startup_pull"


class PullScheduler:
    """Background scheduler for inbound pulls."""

    def __init__(
        self,
        config: SyncConfig,
        inbound: InboundSync,
        startup_delay: float = STARTUP_DELAY,
    ) -> None:
        """Initialize the scheduler.

        Args:
            config: Sync configuration (interval, startup flag).
            inbound: Inbound sync to run.
            startup_delay: Seconds between start() and the startup pull.
        """
        self._config = config
        self._inbound = inbound
        self._startup_delay = startup_delay
        self._scheduler: BackgroundScheduler | None = None

    @property
    def is_running(self) -> bool:
        return self._scheduler is not None

    def _pull_job(self) -> None:
        """Job function for scheduled pulls."""
        try:
            self._inbound.pull()
        except Exception:
            logger.exception("Scheduled pull failed")

    def _add_periodic_job(self, scheduler: BackgroundScheduler, minutes: int) -> None:
        if minutes <= 0:
            logger.info("Periodic pull disabled")
            return
        scheduler.add_job(
            self._pull_job,
            trigger=IntervalTrigger(minutes=minutes),
            id=PERIODIC_JOB_ID,
            name="Periodic pull",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        logger.info("Periodic pull started: every %d minutes", minutes)

    def start(self) -> None:
        """Start the scheduler."""
        if self._scheduler is not None:
            return  # Already running
        if not self._config.inbound_enabled:
            logger.info("Inbound sync disabled, pull scheduler not started")
            return

        self._scheduler = BackgroundScheduler()
        self._add_periodic_job(self._scheduler, self._config.sync_interval)

        if self._config.auto_sync_on_startup:
            run_date = datetime.now() + timedelta(seconds=self._startup_delay)
            self._scheduler.add_job(
                self._pull_job,
                trigger=DateTrigger(run_date=run_date),
                id=STARTUP_JOB_ID,
                name="Startup pull",
                replace_existing=True,
            )

        self._scheduler.start()

    def stop(self) -> None:
        """Stop the scheduler."""
        if self._scheduler is not None:
            self._scheduler.shutdown(wait=False)
            self._scheduler = None
            logger.info("Periodic pull stopped")

    def reschedule(self, minutes: int) -> None:
        """Change the pull interval; 0 disables periodic pulls."""
        self._config.sync_interval = minutes
        if self._scheduler is None:
            return
        if self._scheduler.get_job(PERIODIC_JOB_ID):
            self._scheduler.remove_job(PERIODIC_JOB_ID)
        self._add_periodic_job(self._scheduler, minutes)

    def run_now(self) -> InboundResult:
        """Pull immediately (manual trigger)."""
        return self._inbound.pull()

    def job_ids(self) -> list[str]:
        """IDs of scheduled jobs."""
        if self._scheduler is None:
            return []
        return [job.id for job in self._scheduler.get_jobs()]
