import logging

from sqlalchemy.orm import Session

from database.repositories import (
    NotificationQueueRepository,
    UserRepository,
    KudosRepository,
    StatsRepository,
)

logger = logging.getLogger(__name__)


class NotificationRepository:
    """Facade over the repositories the notification pipeline uses, sharing one Session."""

    def __init__(self, db: Session):
        self.db = db
        self.queue = NotificationQueueRepository(db)
        self.users = UserRepository(db)
        self.kudos = KudosRepository(db)
        self.stats = StatsRepository(db)
