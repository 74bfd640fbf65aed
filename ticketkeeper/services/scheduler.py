"""
Periodic task scheduling for ticketkeeper.

``TicketScheduler`` is built once at startup with every collaborator it
needs and registers one interval job per enabled task. Jobs never run
concurrently with themselves: a firing that arrives while the previous
pass of the same task is still running is skipped.
"""

from typing import Awaitable, Callable, List, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from .blacklist import BlacklistCleaner
from .error_reporter import ErrorReporter
from .lifecycle import LifecycleSweeper
from .stats import StatsUpdater
from ..core.config import STATS_MIN_INTERVAL, Config
from ..core.logger import LoggerMixin


BLACKLIST_JOB = "blacklist-cleanup"
AUTO_CLOSE_JOB = "auto-close"
AUTO_DELETE_JOB = "auto-delete"
STATS_JOB = "stats-channels"


class TicketScheduler(LoggerMixin):
    """Owns the interval jobs and the services they run."""

    def __init__(self, config: Config, sweeper: LifecycleSweeper, blacklist_cleaner: BlacklistCleaner,
                 stats_updater: Optional[StatsUpdater] = None, reporter: Optional[ErrorReporter] = None,
                 scheduler: Optional[AsyncIOScheduler] = None):
        self.config = config
        self.sweeper = sweeper
        self.blacklist_cleaner = blacklist_cleaner
        self.stats_updater = stats_updater
        self.reporter = reporter or ErrorReporter()
        self.scheduler = scheduler or AsyncIOScheduler()
        self._configured = False
        self._stopping = False

    async def run_guarded(self, job_id: str, task: Callable[[], Awaitable]) -> None:
        """Run one pass; anything that escapes it is reported, not raised."""
        try:
            await task()
        except Exception as e:
            await self.reporter.report(f"TASK:{job_id}", e)

    def _add_job(self, job_id: str, task: Callable[[], Awaitable], seconds: int) -> None:
        self.scheduler.add_job(
            self.run_guarded,
            IntervalTrigger(seconds=seconds),
            args=[job_id, task],
            id=job_id,
            name=job_id,
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )
        self.logger.info(f"Scheduled {job_id} every {seconds}s")

    def configure(self) -> List[str]:
        """Register the jobs for every enabled task.

        Returns:
            Ids of the registered jobs
        """
        jobs = []

        self._add_job(BLACKLIST_JOB, self.blacklist_cleaner.clean,
                      self.config.blacklist_cleanup_interval_seconds)
        jobs.append(BLACKLIST_JOB)

        if self.config.auto_close.enabled:
            self._add_job(AUTO_CLOSE_JOB, self.sweeper.auto_close_pass,
                          self.config.auto_close.interval_seconds)
            jobs.append(AUTO_CLOSE_JOB)

        if self.config.auto_delete.enabled:
            self._add_job(AUTO_DELETE_JOB, self.sweeper.auto_delete_pass,
                          self.config.auto_delete.interval_seconds)
            jobs.append(AUTO_DELETE_JOB)

        if self.config.stats_channels.enabled:
            if self.stats_updater is None:
                self.logger.warning("Stats channels are enabled but no stats updater was provided")
            else:
                seconds = max(self.config.stats_channels.interval_seconds, STATS_MIN_INTERVAL)
                self._add_job(STATS_JOB, self.stats_updater.update, seconds)
                jobs.append(STATS_JOB)

        self._configured = True
        return jobs

    def start(self) -> None:
        """Start firing jobs. Must be called from inside the running event loop."""
        if not self._configured:
            self.configure()
        if not self.scheduler.running:
            self._stopping = False
            self.scheduler.start()
            self.logger.info("Ticket scheduler started")

    def shutdown(self) -> None:
        """Stop future firings; a pass already running is not interrupted.

        Safe to call again while a previous shutdown is still pending.
        """
        if self.scheduler.running and not self._stopping:
            self._stopping = True
            self.scheduler.shutdown(wait=False)
            self.logger.info("Ticket scheduler stopped")
