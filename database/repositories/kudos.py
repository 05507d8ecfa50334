from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from database.models import Kudos, KudosRecipient
from database.repositories.base import BaseRepository
from notification.schemas import KudosContext, Person


class KudosRepository(BaseRepository):

    def get_kudos_with_context(self, kudos_id: Any) -> Optional[KudosContext]:
        """Load a kudos event joined with giver, category and recipients."""
        stmt = (
            select(Kudos)
            .where(Kudos.id == kudos_id)
            .options(
                selectinload(Kudos.giver),
                selectinload(Kudos.category),
                selectinload(Kudos.recipients).selectinload(KudosRecipient.user),
            )
        )
        kudos = self._one_or_none(stmt)
        if kudos is None:
            return None

        return KudosContext(
            id=kudos.id,
            giver=Person(id=kudos.giver.id, name=kudos.giver.name),
            category_name=kudos.category.name,
            message=kudos.message,
            gif_url=kudos.gif_url,
            recipients=[
                Person(id=r.user.id, name=r.user.name)
                for r in kudos.recipients
            ],
        )
