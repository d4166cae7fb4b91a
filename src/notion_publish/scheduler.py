# ABOUTME: Cron-based job scheduling using APScheduler.
# ABOUTME: Runs the full database publish on the configured schedule.

import logging
import signal
import sys
from typing import Callable

from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.cron import CronTrigger

from .config import PublishConfig
from .errors import ConfigurationError

logger = logging.getLogger(__name__)


def build_scheduler(config: PublishConfig, publish_fn: Callable[[PublishConfig], None]) -> BlockingScheduler:
    """Create a scheduler with one cron job for ``publish_fn``.

    Raises:
        ConfigurationError: If no schedule is configured or it is not a valid crontab.
    """
    if not config.schedule:
        raise ConfigurationError(["Schedule is required to run the scheduler"])

    try:
        trigger = CronTrigger.from_crontab(config.schedule)
    except ValueError as e:
        raise ConfigurationError([f"Invalid schedule '{config.schedule}': {e}"])

    scheduler = BlockingScheduler()
    scheduler.add_job(
        lambda: publish_fn(config),
        trigger,
        id="notion_publish",
    )
    return scheduler


def run_scheduler(config: PublishConfig, publish_fn: Callable[[PublishConfig], None]) -> None:
    """Run the publish scheduler indefinitely."""
    scheduler = build_scheduler(config, publish_fn)

    def shutdown(signum, frame):
        logger.info("Received shutdown signal, stopping scheduler...")
        scheduler.shutdown(wait=False)
        sys.exit(0)

    signal.signal(signal.SIGTERM, shutdown)
    signal.signal(signal.SIGINT, shutdown)

    logger.info(f"Starting scheduler with schedule: {config.schedule}")
    logger.info("Waiting for next scheduled publish...")

    scheduler.start()
