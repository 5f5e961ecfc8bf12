"""
APScheduler background jobs.

Active jobs:
- close_expired_ppdb_periods : hourly, deactivates PPDB periods past their end date
"""
import logging
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

log = logging.getLogger(__name__)

_scheduler: Optional[BackgroundScheduler] = None


def start_scheduler():
    """Start the scheduler and register jobs. Idempotent."""
    global _scheduler
    if _scheduler and _scheduler.running:
        return

    _scheduler = BackgroundScheduler(timezone="UTC")
    _scheduler.add_job(
        _job_close_expired_ppdb_periods,
        trigger=IntervalTrigger(hours=1),
        id="close_expired_ppdb_periods",
        replace_existing=True,
        misfire_grace_time=300,
    )

    _scheduler.start()
    log.info("Scheduler started, %d job(s)", len(_scheduler.get_jobs()))


def stop_scheduler():
    """Stop the scheduler (called on shutdown)."""
    global _scheduler
    if _scheduler and _scheduler.running:
        _scheduler.shutdown(wait=False)
        log.info("Scheduler stopped")
    _scheduler = None


def scheduler_status() -> list:
    """Job state for the admin dashboard."""
    if not _scheduler:
        return [{"id": "-", "next_run": "tidak berjalan", "trigger": "-"}]
    jobs = []
    for j in _scheduler.get_jobs():
        next_run = str(j.next_run_time) if j.next_run_time else "-"
        jobs.append({"id": j.id, "next_run": next_run, "trigger": str(j.trigger)})
    return jobs


# ── Jobs ───────────────────────────────────────────────────────────────────────

def _job_close_expired_ppdb_periods():
    from .database import new_session
    from .services.ppdb import close_expired_periods
    db = new_session()
    try:
        closed = close_expired_periods(db)
        if closed:
            log.info("close_expired_ppdb_periods: %d period(s) closed", closed)
    except Exception as e:
        db.rollback()
        log.error("close_expired_ppdb_periods: %s", e)
    finally:
        db.close()
