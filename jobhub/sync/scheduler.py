"""Periodic sync with APScheduler."""

from __future__ import annotations

import logging
from datetime import datetime

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.schedulers.blocking import BlockingScheduler

from jobhub.sync.runner import SyncJob

logger = logging.getLogger(__name__)

JOB_ID = "jobhub-sync"


def _run_sync(job: SyncJob) -> None:
    try:
        job.run()
    except Exception:
        # keep the scheduler alive; the next interval retries
        logger.exception("Scheduled sync failed")


def schedule_sync(scheduler, job: SyncJob, interval_minutes: int, run_now: bool = False):
    kwargs = {"next_run_time": datetime.now()} if run_now else {}
    scheduler.add_job(
        _run_sync,
        "interval",
        minutes=interval_minutes,
        args=[job],
        id=JOB_ID,
        max_instances=1,
        coalesce=True,
        replace_existing=True,
        **kwargs,
    )
    return scheduler


def start_background_sync(job: SyncJob, interval_minutes: int, run_now: bool = False) -> BackgroundScheduler:
    sched = schedule_sync(BackgroundScheduler(daemon=True), job, interval_minutes, run_now)
    sched.start()
    logger.info("Background sync every %d min (run on startup: %s)", interval_minutes, run_now)
    return sched


def run_blocking_sync(job: SyncJob, interval_minutes: int) -> None:
    sched = schedule_sync(BlockingScheduler(), job, interval_minutes, run_now=True)
    logger.info("Sync scheduler started, interval %d min", interval_minutes)
    sched.start()
