"""API route handlers."""

from .notifications import router as notifications_router
from .reminders import router as reminders_router
