from database.repositories.base import BaseRepository
from database.repositories.notification_queue import NotificationQueueRepository
from database.repositories.user import UserRepository
from database.repositories.kudos import KudosRepository
from database.repositories.stats import StatsRepository

__all__ = [
    'BaseRepository',
    'NotificationQueueRepository',
    'UserRepository',
    'KudosRepository',
    'StatsRepository',
]
