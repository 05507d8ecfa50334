#!/usr/bin/env python3
"""
Notification Worker

Runs the dispatch loop outside the web service, for cron or a long-lived
container.

Usage:
    python -m notification.worker                       # one batch, then exit
    python -m notification.worker --interval 60         # poll every 60s
    python -m notification.worker --schedule-reminders  # enqueue weekly reminders
    python -m notification.worker --verbose
"""

import argparse
import logging
import sys
import time
from typing import Optional

from core.config_loader import AppConfig, load_config
from notification.dispatcher import NotificationDispatcher
from notification.exceptions import ClaimError

logger = logging.getLogger(__name__)


def schedule_reminders() -> None:
    """Ask the database to enqueue this week's reminder rows."""
    from database.uow import notification_uow

    with notification_uow() as repo:
        repo.queue.schedule_weekly_reminders()
    logger.info("Weekly reminders scheduled")


def run_once(dispatcher: NotificationDispatcher) -> int:
    result = dispatcher.process_batch()
    return result.processed


def run_forever(dispatcher: NotificationDispatcher, interval: float) -> None:
    logger.info(f"Worker started, polling every {interval}s. Press Ctrl+C to stop.")
    while True:
        try:
            run_once(dispatcher)
        except ClaimError as e:
            # The next tick retries the claim
            logger.error(f"Claim failed: {e}")
        time.sleep(interval)


def start_worker(config: AppConfig, interval: Optional[float] = None, reminders: bool = False) -> int:
    from database.database import init_engine

    init_engine(config.database.url)

    if reminders:
        schedule_reminders()
        return 0

    dispatcher = NotificationDispatcher(config)
    if interval:
        run_forever(dispatcher, interval)
        return 0

    processed = run_once(dispatcher)
    logger.info(f"Processed {processed} notification(s)")
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description='Kudos Notification Worker')
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument('--once', action='store_true', help='Process one batch and exit (default)')
    mode.add_argument('--interval', type=float, help='Poll the queue every N seconds')
    mode.add_argument('--schedule-reminders', action='store_true',
                      help='Enqueue weekly reminder notifications and exit')
    parser.add_argument('--config', default='config.yaml')
    parser.add_argument('--verbose', action='store_true')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    config = load_config(args.config)

    try:
        return start_worker(config, interval=args.interval, reminders=args.schedule_reminders)
    except KeyboardInterrupt:
        logger.info("Worker stopped")
        return 0
    except Exception as e:
        logger.error(f"Error: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
