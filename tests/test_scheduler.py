"""
Interval job registration and guarded execution
"""
import asyncio
from datetime import timedelta

import pytest

from ticketkeeper.core.config import Config
from ticketkeeper.services.blacklist import BlacklistCleaner
from ticketkeeper.services.lifecycle import LifecycleSweeper
from ticketkeeper.services.scheduler import (
    AUTO_CLOSE_JOB, AUTO_DELETE_JOB, BLACKLIST_JOB, STATS_JOB, TicketScheduler
)
from ticketkeeper.services.stats import StatsUpdater
from tests.conftest import (
    FakeOracle, MemoryBlacklistStore, MemoryTicketStore, RecordingActions, RecordingPublisher
)


class RecordingReporter:
    def __init__(self):
        self.reports = []

    async def report(self, kind, error):
        self.reports.append((kind, error))


def build(config, reporter=None):
    store = MemoryTicketStore()
    return TicketScheduler(
        config,
        LifecycleSweeper(store, FakeOracle(), RecordingActions()),
        BlacklistCleaner(MemoryBlacklistStore()),
        stats_updater=StatsUpdater(store, RecordingPublisher(), config.stats_channels),
        reporter=reporter or RecordingReporter(),
    )


def jobs_by_id(scheduler):
    return {job.id: job for job in scheduler.scheduler.get_jobs()}


def test_only_blacklist_cleanup_runs_when_features_are_disabled():
    scheduler = build(Config())

    assert scheduler.configure() == [BLACKLIST_JOB]
    job = jobs_by_id(scheduler)[BLACKLIST_JOB]
    assert job.trigger.interval == timedelta(seconds=120)


def test_enabled_tasks_get_their_own_intervals():
    config = Config(
        blacklist_cleanup_interval_seconds=300,
        auto_close={'enabled': True, 'interval_seconds': 30},
        auto_delete={'enabled': True, 'interval_seconds': 45},
        stats_channels={'enabled': True, 'interval_seconds': 10},
    )
    scheduler = build(config)

    assert scheduler.configure() == [BLACKLIST_JOB, AUTO_CLOSE_JOB, AUTO_DELETE_JOB, STATS_JOB]
    jobs = jobs_by_id(scheduler)
    assert jobs[BLACKLIST_JOB].trigger.interval == timedelta(seconds=300)
    assert jobs[AUTO_CLOSE_JOB].trigger.interval == timedelta(seconds=30)
    assert jobs[AUTO_DELETE_JOB].trigger.interval == timedelta(seconds=45)
    assert jobs[STATS_JOB].trigger.interval == timedelta(seconds=600)


def test_stats_interval_is_floored_even_when_changed_after_loading():
    config = Config(stats_channels={'enabled': True})
    config.stats_channels.interval_seconds = 10
    scheduler = build(config)

    scheduler.configure()

    assert jobs_by_id(scheduler)[STATS_JOB].trigger.interval == timedelta(seconds=600)


def test_jobs_never_overlap_with_themselves():
    config = Config(auto_close={'enabled': True}, auto_delete={'enabled': True})
    scheduler = build(config)

    scheduler.configure()

    for job in scheduler.scheduler.get_jobs():
        assert job.max_instances == 1
        assert job.coalesce is True


@pytest.mark.asyncio
async def test_failed_pass_is_reported_not_raised():
    reporter = RecordingReporter()
    scheduler = build(Config(), reporter)

    async def broken():
        raise RuntimeError("store offline")

    await scheduler.run_guarded(AUTO_CLOSE_JOB, broken)

    assert len(reporter.reports) == 1
    kind, error = reporter.reports[0]
    assert kind == f"TASK:{AUTO_CLOSE_JOB}"
    assert str(error) == "store offline"


@pytest.mark.asyncio
async def test_successful_pass_reports_nothing():
    reporter = RecordingReporter()
    scheduler = build(Config(), reporter)
    calls = []

    async def task():
        calls.append(True)

    await scheduler.run_guarded(BLACKLIST_JOB, task)

    assert calls == [True]
    assert reporter.reports == []


@pytest.mark.asyncio
async def test_start_and_shutdown():
    scheduler = build(Config(auto_close={'enabled': True}))

    scheduler.start()
    assert scheduler.scheduler.running
    assert set(jobs_by_id(scheduler)) == {BLACKLIST_JOB, AUTO_CLOSE_JOB}

    scheduler.shutdown()
    await asyncio.sleep(0.01)
    assert not scheduler.scheduler.running


@pytest.mark.asyncio
async def test_repeated_shutdown_is_harmless():
    loop = asyncio.get_running_loop()
    loop_errors = []
    loop.set_exception_handler(lambda _loop, context: loop_errors.append(context))
    scheduler = build(Config())

    try:
        scheduler.start()
        scheduler.shutdown()
        scheduler.shutdown()
        await asyncio.sleep(0.01)
    finally:
        loop.set_exception_handler(None)

    assert not scheduler.scheduler.running
    assert loop_errors == []
