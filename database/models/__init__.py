from .base import Base
from .user import User
from .settings import Settings
from .kudos import Category, Kudos, KudosRecipient
from .notification import NotificationQueue
from .stats import KudosStatsWeekly, TopKudosRecipient

__all__ = [
    'Base',
    'User',
    'Settings',
    'Category',
    'Kudos',
    'KudosRecipient',
    'NotificationQueue',
    'KudosStatsWeekly',
    'TopKudosRecipient',
]
