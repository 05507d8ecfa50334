from typing import Any, Optional

from sqlalchemy import select

from database.models import User, Settings
from database.repositories.base import BaseRepository
from notification.schemas import UserContext, SettingsContext


class UserRepository(BaseRepository):

    def get_user(self, user_id: Any) -> Optional[UserContext]:
        user = self._one_or_none(select(User).where(User.id == user_id))
        return UserContext.model_validate(user) if user else None

    def get_settings(self, user_id: Any) -> Optional[SettingsContext]:
        settings = self._one_or_none(select(Settings).where(Settings.user_id == user_id))
        return SettingsContext.model_validate(settings) if settings else None
