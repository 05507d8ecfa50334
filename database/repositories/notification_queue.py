import logging
from datetime import datetime, timezone
from typing import Any, List

from sqlalchemy import select, update, text

from database.models import NotificationQueue
from database.repositories.base import BaseRepository
from notification.schemas import NotificationRecord, NotificationStatus

logger = logging.getLogger(__name__)


class NotificationQueueRepository(BaseRepository):

    def claim_pending(self, batch_size: int) -> List[NotificationRecord]:
        """Atomically move up to `batch_size` pending rows to 'processing'.

        One UPDATE statement selects and flips the rows, so two concurrent
        callers can never receive the same row: on PostgreSQL the inner
        SELECT takes row locks with SKIP LOCKED, other engines serialize the
        statement. The caller must commit before delivering anything.

        Returns the claimed rows oldest first.
        """
        pending = (
            select(NotificationQueue.id)
            .where(NotificationQueue.status == NotificationStatus.PENDING.value)
            .order_by(NotificationQueue.created_at, NotificationQueue.id)
            .limit(batch_size)
            .with_for_update(skip_locked=True)
        )

        stmt = (
            update(NotificationQueue)
            .where(
                NotificationQueue.id.in_(pending.scalar_subquery()),
                NotificationQueue.status == NotificationStatus.PENDING.value,
            )
            .values(status=NotificationStatus.PROCESSING.value)
            .returning(NotificationQueue)
            .execution_options(synchronize_session=False)
        )

        claimed = self.db.execute(stmt).scalars().all()
        records = [NotificationRecord.model_validate(row) for row in claimed]
        records.sort(key=lambda r: (r.created_at is None, r.created_at, str(r.id)))
        return records

    def mark_sent(self, notification_id: Any) -> bool:
        """Finalize a claimed row as sent. Returns False if it was no longer 'processing'."""
        return self._finalize(
            notification_id,
            status=NotificationStatus.SENT.value,
            sent_at=datetime.now(timezone.utc),
            error=None,
        )

    def mark_failed(self, notification_id: Any, error: str) -> bool:
        """Finalize a claimed row as failed. Returns False if it was no longer 'processing'."""
        return self._finalize(
            notification_id,
            status=NotificationStatus.FAILED.value,
            error=error,
        )

    def _finalize(self, notification_id: Any, **values) -> bool:
        result = self.db.execute(
            update(NotificationQueue)
            .where(
                NotificationQueue.id == notification_id,
                NotificationQueue.status == NotificationStatus.PROCESSING.value,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    def schedule_weekly_reminders(self) -> None:
        """Run the database procedure that enqueues this week's reminder rows."""
        self.db.execute(text("SELECT schedule_weekly_reminders()"))
