from sqlalchemy import Column, Integer, Text, Uuid

from .base import Base


class KudosStatsWeekly(Base):
    """
    Read-only mapping of the `kudos_stats_weekly` view (per-user totals for the
    current week). The view itself is owned by the database migrations.
    """
    __tablename__ = 'kudos_stats_weekly'
    __table_args__ = {'info': {'is_view': True}}

    user_id = Column(Uuid, primary_key=True)
    name = Column(Text, nullable=False)
    kudos_received = Column(Integer, nullable=False, default=0)
    kudos_given = Column(Integer, nullable=False, default=0)
    total_points = Column(Integer, nullable=False, default=0)


class TopKudosRecipient(Base):
    """Read-only mapping of the `top_kudos_recipients` view."""
    __tablename__ = 'top_kudos_recipients'
    __table_args__ = {'info': {'is_view': True}}

    user_id = Column(Uuid, primary_key=True)
    name = Column(Text, nullable=True)
    top_category = Column(Text, nullable=True)
    category_count = Column(Integer, nullable=True)
