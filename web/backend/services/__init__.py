"""Service layer for the web application."""

from .notification_service import NotificationDispatchService
