import uuid

from sqlalchemy import Column, Text, TIMESTAMP, ForeignKey, Uuid, func, Index

from .base import Base


class NotificationQueue(Base):
    """
    Durable queue of notifications awaiting delivery.

    Rows are inserted as 'pending' by producers (kudos creation, the weekly
    reminder procedure, access requests) and retired by the dispatcher:
    pending -> processing -> sent | failed.

    `type` and `channel` are plain text so that a row carrying a value this
    version does not know can still be claimed and failed with a reason.
    """
    __tablename__ = 'notification_queue'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    kudos_id = Column(Uuid, ForeignKey('kudos.id', ondelete='CASCADE'), nullable=True)

    type = Column(Text, nullable=False)  # kudos_received, manager_notification, weekly_reminder, ...
    channel = Column(Text, nullable=False)  # email, chat
    message = Column(Text, nullable=True)  # free text, used by access_request

    status = Column(Text, nullable=False, default='pending', server_default='pending')
    error = Column(Text, nullable=True)

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    sent_at = Column(TIMESTAMP(timezone=True), nullable=True)

    __table_args__ = (
        # Claim scans pending rows oldest first
        Index('idx_notification_queue_status', 'status', 'created_at'),
        Index('idx_notification_queue_user', 'user_id'),
    )
