# core/scheduler.py
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from core.config import settings
from core.logging_config import logger
from core.wizard_registry import get_registry


_scheduler: Optional[BackgroundScheduler] = None


def run_wizard_cleanup() -> int:
    """Drop wizard sessions that have been idle past their TTL."""
    try:
        return get_registry().cleanup_expired()
    except Exception as e:
        logger.error(f"[SCHEDULER] ❌ Wizard cleanup failed: {e}", exc_info=True)
        return 0


def start_scheduler() -> BackgroundScheduler:
    """
    Initialize the APScheduler background process.
    Sweeps idle wizard sessions every WIZARD_CLEANUP_INTERVAL_SECONDS.
    """
    global _scheduler
    if _scheduler is not None and _scheduler.running:
        return _scheduler

    scheduler = BackgroundScheduler(timezone="UTC")

    scheduler.add_job(
        run_wizard_cleanup,
        trigger=IntervalTrigger(seconds=settings.WIZARD_CLEANUP_INTERVAL_SECONDS),
        id="wizard_cleanup_job",
        replace_existing=True,
    )

    scheduler.start()
    _scheduler = scheduler
    logger.info(f"⏰ Scheduler started. Wizard cleanup every {settings.WIZARD_CLEANUP_INTERVAL_SECONDS}s.")
    return scheduler


def stop_scheduler():
    global _scheduler
    if _scheduler is not None and _scheduler.running:
        _scheduler.shutdown(wait=False)
    _scheduler = None
