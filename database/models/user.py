import uuid

from sqlalchemy import Column, Text, TIMESTAMP, ForeignKey, Uuid, func, Index
from sqlalchemy.orm import relationship

from .base import Base


class User(Base):
    """
    Application user. Rows are created by the sign-in flow; the
    notification pipeline only reads name and email.
    """
    __tablename__ = 'users'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False)
    email = Column(Text, nullable=False, unique=True)
    manager_id = Column(Uuid, ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    settings = relationship("Settings", back_populates="user", uselist=False, cascade="all, delete-orphan")

    __table_args__ = (
        Index('idx_users_manager', 'manager_id'),
    )
