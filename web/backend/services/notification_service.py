#!/usr/bin/env python3
"""
Notification dispatch service for the web application.
"""

import logging

from notification.dispatcher import DispatchResult, NotificationDispatcher
from notification.exceptions import ClaimError

from ..exceptions import DispatchClaimException, ReminderSchedulingException

logger = logging.getLogger(__name__)


class NotificationDispatchService:
    """Runs dispatcher operations and translates their failures for the API."""

    def __init__(self, dispatcher: NotificationDispatcher):
        self.dispatcher = dispatcher

    def process_notifications(self) -> DispatchResult:
        """
        Process one batch of pending notifications.

        Raises:
            DispatchClaimException: nothing could be claimed.
        """
        try:
            return self.dispatcher.process_batch()
        except ClaimError as e:
            raise DispatchClaimException(str(e)) from e

    def schedule_reminders(self) -> None:
        """
        Enqueue this week's reminder notifications.

        Raises:
            ReminderSchedulingException: the database procedure failed.
        """
        try:
            with self.dispatcher.uow_factory() as repo:
                repo.queue.schedule_weekly_reminders()
        except Exception as e:
            raise ReminderSchedulingException(f"Failed to schedule weekly reminders: {e}") from e
        logger.info("Weekly reminders scheduled")
