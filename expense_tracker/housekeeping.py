"""Timer-driven maintenance jobs.

None of these touch domain data. They keep a free-tier host from idling the
process and leave a trail of memory and uptime figures in the log.
"""
import gc
import resource
import sys
import time

import httpx
from apscheduler.schedulers.background import BackgroundScheduler
from loguru import logger

from expense_tracker.config import Settings

_started_at = time.monotonic()


def max_rss_mb() -> float:
    usage = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
    # ru_maxrss is bytes on macOS, kilobytes elsewhere
    if sys.platform == "darwin":
        return usage / (1024 * 1024)
    return usage / 1024


def keep_alive(settings: Settings) -> bool:
    health_url = f"http://localhost:{settings.SERVER_PORT}/health"
    logger.debug(f"Sending keep-alive ping to: {health_url}")
    try:
        response = httpx.get(health_url, timeout=10.0)
        response.raise_for_status()
    except httpx.HTTPError as exc:
        logger.warning(f"Keep-alive ping failed: {exc}")
        return False
    logger.debug(f"Keep-alive ping successful. Response length: {len(response.text)} chars")
    return True


def memory_cleanup() -> int:
    collected = gc.collect()
    try:
        rss = max_rss_mb()
    except (OSError, ValueError) as exc:
        logger.warning(f"Memory cleanup could not read memory usage: {exc}")
        return collected
    logger.debug(f"Memory cleanup: {collected} objects collected. Max RSS: {rss:.1f} MB")
    return collected


def log_application_status() -> bool:
    uptime = time.monotonic() - _started_at
    try:
        rss = max_rss_mb()
    except (OSError, ValueError) as exc:
        logger.warning(f"Status logging failed: {exc}")
        return False
    logger.info(f"Application Status - Uptime: {uptime:.0f} s, Max RSS: {rss:.1f} MB")
    return True


def build_scheduler(settings: Settings) -> BackgroundScheduler:
    scheduler = BackgroundScheduler()
    scheduler.add_job(
        keep_alive, "interval", seconds=settings.KEEP_ALIVE_INTERVAL_SECONDS,
        args=[settings], id="keep_alive",
    )
    scheduler.add_job(
        memory_cleanup, "interval", seconds=settings.MEMORY_CLEANUP_INTERVAL_SECONDS,
        id="memory_cleanup",
    )
    scheduler.add_job(
        log_application_status, "interval", seconds=settings.STATUS_REPORT_INTERVAL_SECONDS,
        id="application_status",
    )
    return scheduler
