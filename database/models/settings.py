from sqlalchemy import Column, Boolean, Text, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from .base import Base


class Settings(Base):
    """Per-user delivery preferences and chat identity."""
    __tablename__ = 'settings'

    user_id = Column(Uuid, ForeignKey('users.id', ondelete='CASCADE'), primary_key=True)
    notify_by_email = Column(Boolean, nullable=False, default=True)
    notify_by_chat = Column(Boolean, nullable=False, default=False)
    reminder_opt_in = Column(Boolean, nullable=False, default=True)

    # Set when the user connects the chat workspace
    chat_user_id = Column(Text, nullable=True)
    chat_channel_id = Column(Text, nullable=True)  # DM channel; usually equal to chat_user_id

    user = relationship("User", back_populates="settings")
