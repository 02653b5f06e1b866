"""Timer trigger blueprint — scheduled entry point for folder synchronization."""

import logging

import azure.functions as func

from folder_watch.config import load_config
from folder_watch.orchestration.driver import sync_driver_from_config

logger = logging.getLogger(__name__)

bp = func.Blueprint()


@bp.timer_trigger(
    schedule="0 0 * * * *",
    arg_name="timer",
    run_on_startup=False,
)
def timer_trigger(timer: func.TimerRequest) -> None:
    """Scheduled trigger that checks every configured folder for new entries.

    Runs hourly. Only one schedule should be active so that runs never overlap.
    """
    logger.info("Timer trigger fired")

    try:
        if timer.past_due:
            logger.warning("Timer trigger is past due")

        config = load_config()
        driver = sync_driver_from_config(config)
        report = driver.run()
        logger.info(
            "Synchronization complete — %d row(s), %d new entries",
            len(report.results),
            report.new_entry_count,
        )

    except Exception:
        logger.exception("Timer trigger failed")
        raise
