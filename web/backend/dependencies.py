#!/usr/bin/env python3
"""
FastAPI dependencies for dependency injection.
"""

from fastapi import Depends

from core.config_loader import AppConfig
from database.database import ensure_engine
from notification.dispatcher import NotificationDispatcher

from .config import get_config
from .services.notification_service import NotificationDispatchService


def get_dispatcher(config: AppConfig = Depends(get_config)) -> NotificationDispatcher:
    """
    FastAPI dependency that builds a dispatcher for one request.

    Each request gets its own dispatcher and therefore its own sessions;
    concurrent requests only coordinate through the queue table.
    """
    ensure_engine(config.database.url)
    return NotificationDispatcher(config)


def get_notification_service(
    dispatcher: NotificationDispatcher = Depends(get_dispatcher)
) -> NotificationDispatchService:
    """Dependency to get the notification dispatch service."""
    return NotificationDispatchService(dispatcher)
