from typing import Any, Optional

from sqlalchemy import Select
from sqlalchemy.orm import Session


class BaseRepository:
    """Holds the Session shared by every repository in one unit of work."""

    def __init__(self, db: Session):
        self.db = db

    def _one_or_none(self, stmt: Select) -> Optional[Any]:
        return self.db.execute(stmt).scalar_one_or_none()
