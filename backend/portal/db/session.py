# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Database engine and session factory
"""
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from portal.core.config import settings


def build_engine(database_url: str, **kwargs):
    """Create an engine; SQLite connections get foreign keys enabled"""
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False

    engine = create_engine(
        database_url,
        connect_args=connect_args,
        echo=settings.DATABASE_ECHO,
        pool_pre_ping=not database_url.startswith("sqlite"),
        **kwargs,
    )

    if database_url.startswith("sqlite"):

        @event.listens_for(engine, "connect")
        def _enable_sqlite_fk(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


engine = build_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
