"""
Detached, read-only snapshots passed between the dispatcher, the renderer and
the channel senders. Built from ORM rows inside a session and safe to use
after the session is closed.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class NotificationType(str, Enum):
    KUDOS_RECEIVED = "kudos_received"
    MANAGER_NOTIFICATION = "manager_notification"
    OTHER_NOTIFICATION = "other_notification"
    WEEKLY_REMINDER = "weekly_reminder"
    ACCESS_REQUEST = "access_request"


class NotificationChannelType(str, Enum):
    EMAIL = "email"
    CHAT = "chat"


class NotificationStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SENT = "sent"
    FAILED = "failed"


class NotificationRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: uuid.UUID
    type: str  # kept raw; unknown values are rejected at render time
    channel: str
    user_id: uuid.UUID
    kudos_id: Optional[uuid.UUID] = None
    message: Optional[str] = None
    status: str = NotificationStatus.PENDING.value
    error: Optional[str] = None
    created_at: Optional[datetime] = None
    sent_at: Optional[datetime] = None


class UserContext(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: uuid.UUID
    name: str
    email: str


class SettingsContext(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    user_id: uuid.UUID
    chat_user_id: Optional[str] = None
    chat_channel_id: Optional[str] = None
    notify_by_email: bool = True
    notify_by_chat: bool = False
    reminder_opt_in: bool = True

    @property
    def chat_destination(self) -> Optional[str]:
        """Where chat messages go: the DM channel if known, else the user id."""
        return self.chat_channel_id or self.chat_user_id


class Person(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: uuid.UUID
    name: str


class KudosContext(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: uuid.UUID
    giver: Person
    category_name: str
    message: Optional[str] = None
    gif_url: Optional[str] = None
    recipients: List[Person] = []

    @property
    def recipient_names(self) -> List[str]:
        return [r.name for r in self.recipients]


class WeeklyStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    kudos_received: int = 0
    kudos_given: int = 0
    rank: int = 0
    total_points: int = 0
    leader: str
    top_category: str
