# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from typing import Generator

from fastapi import Query
from sqlalchemy.orm import Session

from portal.core.config import settings
from portal.db.session import SessionLocal
from portal.schemas.common import PageParams


def get_db() -> Generator[Session, None, None]:
    """Yield a database session and close it after the request"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_page_params(
    page: int = Query(1, description="1-based page number"),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, description="Page size"),
) -> PageParams:
    """Pagination parameters, clamped rather than rejected"""
    return PageParams.clamp(page, limit)
