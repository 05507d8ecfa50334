"""
Dispatch loop for the notification queue.

One call to process_batch claims a batch of pending rows, then for each row
loads its context, renders it, sends it and writes the final status. Only a
failed claim aborts the run; every other failure is recorded on the row it
belongs to.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, ContextManager, Optional, Tuple

from core.config_loader import AppConfig
from notification.channels import NotificationChannelFactory
from notification.exceptions import (
    ClaimError,
    ContextNotFoundError,
    MissingDestinationError,
)
from notification.message_builder import (
    ChannelPayload,
    NotificationMessageBuilder,
    RenderContext,
    parse_channel,
    parse_notification_type,
)
from notification.schemas import (
    NotificationChannelType,
    NotificationRecord,
    NotificationType,
)
from notification.stats import StatsAggregator

logger = logging.getLogger(__name__)


@dataclass
class DispatchResult:
    processed: int = 0
    sent: int = 0
    failed: int = 0


def _default_uow_factory() -> Callable[[], ContextManager]:
    # Imported here: the database package imports notification.schemas
    from database.uow import notification_uow
    return notification_uow


class NotificationDispatcher:
    """
    Drains the notification queue one batch at a time.

    Args:
        config: Application config; batch size, email pacing, app URL and
            provider settings are read from it.
        uow_factory: Callable returning a context manager that yields a
            NotificationRepository and commits on exit.
        channel_factory: Builds the sender for a channel type.
        sleep: Used for email pacing; tests pass a fake.
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        uow_factory: Optional[Callable[[], ContextManager]] = None,
        channel_factory: Optional[NotificationChannelFactory] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.config = config or AppConfig()
        self.uow_factory = uow_factory or _default_uow_factory()
        self.channel_factory = channel_factory or NotificationChannelFactory(self.config)
        self.sleep = sleep

    def process_batch(self) -> DispatchResult:
        """
        Claim and deliver up to `dispatch.batch_size` notifications.

        Raises:
            ClaimError: the claim could not be performed; nothing was claimed.
        """
        records = self._claim()
        result = DispatchResult(processed=len(records))

        if not records:
            logger.info("No pending notifications to process")
            return result

        logger.info(f"Processing {len(records)} notification(s)")

        email_attempted = False
        for record in records:
            try:
                recipient, payload = self._prepare(record)

                if record.channel == NotificationChannelType.EMAIL.value:
                    if email_attempted:
                        self.sleep(self.config.dispatch.email_delay_seconds)
                    email_attempted = True

                self.channel_factory.get_channel(record.channel).send(recipient, payload)

            except Exception as e:
                logger.error(
                    f"Failed to process notification {record.id} ({record.type}/{record.channel}): {e}",
                    exc_info=True,
                )
                self._finalize(record, error=str(e) or type(e).__name__)
                result.failed += 1
                continue

            self._finalize(record)
            result.sent += 1

        logger.info(
            f"Batch complete: {result.processed} processed, "
            f"{result.sent} sent, {result.failed} failed"
        )
        return result

    def _claim(self):
        try:
            with self.uow_factory() as repo:
                return repo.queue.claim_pending(self.config.dispatch.batch_size)
        except Exception as e:
            logger.error(f"Failed to claim pending notifications: {e}")
            raise ClaimError(f"Failed to claim pending notifications: {e}") from e

    def _prepare(self, record: NotificationRecord) -> Tuple[str, ChannelPayload]:
        """Load everything the renderer needs and return (recipient, payload)."""
        with self.uow_factory() as repo:
            user = repo.users.get_user(record.user_id)
            if user is None:
                raise ContextNotFoundError(f"User not found: {record.user_id}")

            settings = repo.users.get_settings(record.user_id)
            if settings is None:
                raise ContextNotFoundError(f"Settings not found for user: {record.user_id}")

            kudos = None
            if record.kudos_id:
                kudos = repo.kudos.get_kudos_with_context(record.kudos_id)
                if kudos is None:
                    raise ContextNotFoundError(f"Kudos not found: {record.kudos_id}")

            notification_type = parse_notification_type(record.type)
            channel = parse_channel(record.channel)

            stats = None
            if notification_type == NotificationType.WEEKLY_REMINDER:
                stats = StatsAggregator(repo.stats).get_weekly_stats(record.user_id)

        if channel == NotificationChannelType.CHAT:
            recipient = settings.chat_destination
            if not settings.chat_user_id or not recipient:
                raise MissingDestinationError(f"User {record.user_id} has no chat user id configured")
        else:
            recipient = user.email

        payload = NotificationMessageBuilder.build(RenderContext(
            notification=record,
            user=user,
            settings=settings,
            kudos=kudos,
            stats=stats,
            app_url=self.config.app_url,
        ))
        return recipient, payload

    def _finalize(self, record: NotificationRecord, error: Optional[str] = None) -> None:
        """Write the terminal status. Never raises; the row stays 'processing' on failure."""
        try:
            with self.uow_factory() as repo:
                if error is None:
                    updated = repo.queue.mark_sent(record.id)
                else:
                    updated = repo.queue.mark_failed(record.id, error)
        except Exception as e:
            logger.error(f"Failed to update status of notification {record.id}: {e}", exc_info=True)
            return

        if not updated:
            logger.warning(f"Notification {record.id} was no longer processing; status left unchanged")
