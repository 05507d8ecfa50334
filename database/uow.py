import contextlib
import logging
from typing import Iterator

from database.database import SessionLocal, get_engine
from database.repository import NotificationRepository

logger = logging.getLogger(__name__)


@contextlib.contextmanager
def notification_uow() -> Iterator[NotificationRepository]:
    """Open one transaction and hand out the repositories that share it.

    The dispatcher opens a separate scope for the claim, for each record's
    context loads and for each finalization, so a claim is durable before
    any provider is called:

        with notification_uow() as repo:
            claimed = repo.queue.claim_pending(10)
    """
    get_engine()
    session = SessionLocal()
    repo = NotificationRepository(session)
    try:
        yield repo
        session.commit()
    except Exception as e:
        logger.debug(f"Rolling back notification transaction: {type(e).__name__}")
        session.rollback()
        raise
    finally:
        session.close()
