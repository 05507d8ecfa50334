"""
Weekly standing for one user, computed from the precomputed aggregate views.
Only the weekly reminder uses it.
"""

import logging
from typing import Any, Optional, Sequence

from notification.schemas import WeeklyStats

logger = logging.getLogger(__name__)

NO_LEADER = "No leader yet"
NO_TOP_CATEGORY = "None"


def compute_rank(ranked: Sequence[Any], user_id: Any) -> int:
    """1-indexed position of `user_id` in `ranked` ordered by points, 0 if absent.

    Ties keep their input order (sorted() is stable).
    """
    ordered = sorted(ranked, key=lambda row: row.total_points or 0, reverse=True)
    for position, row in enumerate(ordered, start=1):
        if str(row.user_id) == str(user_id):
            return position
    return 0


def format_leader(ranked: Sequence[Any]) -> str:
    if not ranked:
        return NO_LEADER
    leader = sorted(ranked, key=lambda row: row.total_points or 0, reverse=True)[0]
    return f"{leader.name} ({leader.total_points} points)"


class StatsAggregator:
    """
    Reads the weekly views through a StatsRepository-like object exposing
    get_weekly_stats, get_ranked_weekly_stats and get_top_category.
    """

    def __init__(self, stats_repository):
        self.repo = stats_repository

    def get_weekly_stats(self, user_id: Any) -> WeeklyStats:
        own = self.repo.get_weekly_stats(user_id)
        ranked = self.repo.get_ranked_weekly_stats() or []
        top_category: Optional[str] = self.repo.get_top_category(user_id)

        if own is None:
            logger.debug(f"No weekly activity for user {user_id}; using zero totals")

        return WeeklyStats(
            kudos_received=(own.kudos_received or 0) if own else 0,
            kudos_given=(own.kudos_given or 0) if own else 0,
            total_points=(own.total_points or 0) if own else 0,
            rank=compute_rank(ranked, user_id),
            leader=format_leader(ranked),
            top_category=top_category or NO_TOP_CATEGORY,
        )
