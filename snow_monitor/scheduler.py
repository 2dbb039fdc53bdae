from __future__ import annotations

from typing import Callable, Optional

from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.cron import CronTrigger

from snow_monitor.config import SchedulerConfig
from snow_monitor.logging import get_logger

logger = get_logger(__name__)

REFRESH_JOB_ID = "refresh-snapshot"


def build_scheduler(
    job: Callable[[], None],
    config: SchedulerConfig,
    *,
    timezone: str = "Europe/Rome",
) -> Optional[BlockingScheduler]:
    """Schedule the snapshot refresh; cron fields are read in the resorts' timezone."""
    if not config.enabled:
        logger.info("scheduler.disabled", job_id=REFRESH_JOB_ID)
        return None

    scheduler = BlockingScheduler(timezone=timezone)
    trigger = CronTrigger.from_crontab(config.cron, timezone=timezone)
    scheduler.add_job(job, trigger=trigger, id=REFRESH_JOB_ID, max_instances=1, coalesce=True)
    logger.info("scheduler.configured", job_id=REFRESH_JOB_ID, cron=config.cron, timezone=timezone)
    return scheduler
