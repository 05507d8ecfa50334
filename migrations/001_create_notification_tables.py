#!/usr/bin/env python3
"""
Migration: Create the tables the notification dispatcher reads and writes

Creates users, settings, categories, kudos, kudos_recipients and
notification_queue from the ORM models, including the (status, created_at)
index the claim query relies on.

The kudos_stats_weekly and top_kudos_recipients views and the
schedule_weekly_reminders() procedure belong to the application schema and
are not created here.

Usage:
    DATABASE_URL=postgresql://... python migrations/001_create_notification_tables.py
"""

import logging

from sqlalchemy import inspect

from database.database import init_engine
from database.models import Base

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def migrate(url=None):
    """Create missing tables; existing tables are left untouched."""
    engine = init_engine(url)
    tables = [t for t in Base.metadata.sorted_tables if not t.info.get('is_view')]

    existing = set(inspect(engine).get_table_names())
    Base.metadata.create_all(engine, tables=tables, checkfirst=True)

    for table in tables:
        if table.name in existing:
            logger.info(f"Table {table.name} already exists")
        else:
            logger.info(f"Created table {table.name}")


if __name__ == "__main__":
    migrate()
