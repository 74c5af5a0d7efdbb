# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Schema creation and seed data for development databases and tests
"""
import logging

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from portal.core.config import settings
from portal.db.base import Base
from portal.models.group import GroupType
from portal.models.user import Role, RoleName, User, UserStatus
from portal.services.user_service import UserService

# Register every model on Base.metadata
import portal.models  # noqa: F401

logger = logging.getLogger(__name__)

DEFAULT_GROUP_TYPES = [
    ("Batch", "Academic batch groups"),
    ("Department", "Department-wise groups"),
    ("Club", "Clubs and societies"),
    ("Course", "Course-specific groups"),
    ("Event", "Event-specific groups"),
]


def seed_group_types(db: Session) -> None:
    existing = {label for (label,) in db.query(GroupType.label).all()}
    for label, description in DEFAULT_GROUP_TYPES:
        if label not in existing:
            db.add(GroupType(label=label, description=description))
    db.commit()


def seed_first_admin(db: Session) -> None:
    """Create the configured first admin account when it does not exist yet"""
    if not settings.FIRST_ADMIN_MOBILE:
        return
    if UserService.get_by_mobile(db, settings.FIRST_ADMIN_MOBILE):
        return

    admin_role = db.query(Role).filter(Role.name == RoleName.ADMIN.value).first()
    admin = User(
        name=settings.FIRST_ADMIN_NAME,
        mobile_number=settings.FIRST_ADMIN_MOBILE,
        status=UserStatus.APPROVED.value,
        created_by_admin=True,
    )
    admin.roles = [admin_role]
    db.add(admin)
    db.commit()
    logger.info(f"Seeded first admin {admin.id}")


def init_db(engine: Engine, seed: bool = True) -> None:
    """Create all tables, then seed roles and, optionally, group types and the first admin"""
    Base.metadata.create_all(bind=engine)

    session = sessionmaker(bind=engine)()
    try:
        UserService.ensure_roles(session)
        if seed:
            seed_group_types(session)
            seed_first_admin(session)
    finally:
        session.close()

    logger.info("Database initialized")
