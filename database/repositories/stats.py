from typing import Any, List, Optional

from sqlalchemy import select

from database.models import KudosStatsWeekly, TopKudosRecipient
from database.repositories.base import BaseRepository


class StatsRepository(BaseRepository):
    """Read-only access to the weekly aggregate views."""

    def get_weekly_stats(self, user_id: Any) -> Optional[KudosStatsWeekly]:
        return self._one_or_none(
            select(KudosStatsWeekly).where(KudosStatsWeekly.user_id == user_id)
        )

    def get_ranked_weekly_stats(self) -> List[KudosStatsWeekly]:
        return list(self.db.execute(
            select(KudosStatsWeekly).order_by(KudosStatsWeekly.total_points.desc())
        ).scalars().all())

    def get_top_category(self, user_id: Any) -> Optional[str]:
        return self._one_or_none(
            select(TopKudosRecipient.top_category).where(TopKudosRecipient.user_id == user_id)
        )
