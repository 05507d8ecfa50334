import uuid

from sqlalchemy import Column, Text, Boolean, Integer, TIMESTAMP, ForeignKey, Uuid, func, Index
from sqlalchemy.orm import relationship

from .base import Base


class Category(Base):
    __tablename__ = 'categories'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False, unique=True)


class Kudos(Base):
    """A single recognition event from one giver to one or more recipients."""
    __tablename__ = 'kudos'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    giver_id = Column(Uuid, ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    category_id = Column(Uuid, ForeignKey('categories.id'), nullable=False)
    message = Column(Text, nullable=True)
    gif_url = Column(Text, nullable=True)
    notify_manager = Column(Boolean, nullable=False, default=False)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    giver = relationship("User", foreign_keys=[giver_id])
    category = relationship("Category")
    recipients = relationship(
        "KudosRecipient",
        back_populates="kudos",
        cascade="all, delete-orphan",
        order_by="KudosRecipient.position",
    )

    __table_args__ = (
        Index('idx_kudos_giver', 'giver_id', 'created_at'),
    )


class KudosRecipient(Base):
    __tablename__ = 'kudos_recipients'

    kudos_id = Column(Uuid, ForeignKey('kudos.id', ondelete='CASCADE'), primary_key=True)
    recipient_id = Column(Uuid, ForeignKey('users.id', ondelete='CASCADE'), primary_key=True)
    position = Column(Integer, nullable=False, default=0)  # order recipients were picked in

    kudos = relationship("Kudos", back_populates="recipients")
    user = relationship("User")
