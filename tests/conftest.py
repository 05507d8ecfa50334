"""
Pytest configuration and fixtures.

Repository and dispatcher tests run against a file-backed SQLite database
built from the ORM metadata, so the suite needs no external services. The
aggregate views are plain tables here so tests can seed them.
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from core.config_loader import AppConfig
from database import database
from database.models import (
    Base,
    Category,
    Kudos,
    KudosRecipient,
    KudosStatsWeekly,
    NotificationQueue,
    Settings,
    TopKudosRecipient,
    User,
)

BASE_TIME = datetime(2026, 3, 2, 9, 0, 0, tzinfo=timezone.utc)


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "db: marks tests as requiring database (deselect with '-m \"not db\"')"
    )


@pytest.fixture
def app_config():
    return AppConfig(
        app_url="https://kudos.example.com",
        slack={"bot_token": "xoxb-test"},
        sendgrid={"api_key": "SG.test"},
        dispatch={"batch_size": 10, "email_delay_seconds": 1.0},
    )


@pytest.fixture
def sqlite_engine(tmp_path):
    """Bind the global session factory to a fresh SQLite file for one test."""
    engine = database.init_engine(
        f"sqlite:///{tmp_path / 'kudos_test.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()
    database._engine = None


@pytest.fixture
def db_session(sqlite_engine):
    session = database.SessionLocal()
    try:
        yield session
    finally:
        session.close()


class Seeder:
    """Small helpers for inserting related rows in tests."""

    def __init__(self, session):
        self.session = session
        self._tick = 0

    def user(self, name, email=None, chat_user_id=None, chat_channel_id=None, with_settings=True):
        user = User(id=uuid.uuid4(), name=name, email=email or f"{name.lower()}@example.com")
        self.session.add(user)
        if with_settings:
            self.session.add(Settings(
                user_id=user.id,
                chat_user_id=chat_user_id,
                chat_channel_id=chat_channel_id,
                notify_by_email=True,
                notify_by_chat=chat_user_id is not None,
            ))
        self.session.flush()
        return user

    def kudos(self, giver, recipients, category="Teamwork", message="Great job", gif_url=None):
        category_row = self.session.query(Category).filter_by(name=category).one_or_none()
        if category_row is None:
            category_row = Category(id=uuid.uuid4(), name=category)
            self.session.add(category_row)
        kudos = Kudos(
            id=uuid.uuid4(),
            giver_id=giver.id,
            category_id=category_row.id,
            message=message,
            gif_url=gif_url,
        )
        self.session.add(kudos)
        self.session.flush()
        for position, recipient in enumerate(recipients):
            self.session.add(KudosRecipient(kudos_id=kudos.id, recipient_id=recipient.id, position=position))
        self.session.flush()
        return kudos

    def notification(self, user, type='kudos_received', channel='email', kudos=None,
                     message=None, status='pending', created_at=None):
        if created_at is None:
            self._tick += 1
            created_at = BASE_TIME + timedelta(seconds=self._tick)
        row = NotificationQueue(
            id=uuid.uuid4(),
            user_id=user.id if hasattr(user, 'id') else user,
            kudos_id=kudos.id if kudos is not None else None,
            type=type,
            channel=channel,
            message=message,
            status=status,
            created_at=created_at,
        )
        self.session.add(row)
        self.session.flush()
        return row

    def weekly_stats(self, user, received=0, given=0, points=0):
        self.session.add(KudosStatsWeekly(
            user_id=user.id,
            name=user.name,
            kudos_received=received,
            kudos_given=given,
            total_points=points,
        ))
        self.session.flush()

    def top_category(self, user, category, count=1):
        self.session.add(TopKudosRecipient(
            user_id=user.id, name=user.name, top_category=category, category_count=count
        ))
        self.session.flush()

    def commit(self):
        self.session.commit()


@pytest.fixture
def seed(db_session):
    return Seeder(db_session)
