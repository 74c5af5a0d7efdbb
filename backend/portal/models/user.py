# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
User and Role models
"""
from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String
from sqlalchemy.orm import relationship

from portal.db.base import Base, generate_uuid


class UserStatus(str, Enum):
    """Account approval status, changed only by an admin"""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class RoleName(str, Enum):
    ADMIN = "admin"
    USER = "user"


class Role(Base):
    """Role model (admin | user)"""

    __tablename__ = "roles"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(50), nullable=False, unique=True, index=True)
    description = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=datetime.now)

    __table_args__ = (
        {"mysql_charset": "utf8mb4", "mysql_collate": "utf8mb4_unicode_ci"},
    )


class UserRole(Base):
    """Join table between users and roles"""

    __tablename__ = "user_roles"

    user_id = Column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    role_id = Column(
        String(36), ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True
    )
    assigned_at = Column(DateTime, default=datetime.now)

    __table_args__ = (
        {"mysql_charset": "utf8mb4", "mysql_collate": "utf8mb4_unicode_ci"},
    )


class User(Base):
    """Portal member or administrator"""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(150), nullable=False)
    mobile_number = Column(String(20), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=True)
    profile_picture_url = Column(String(1000), nullable=True)
    status = Column(String(20), nullable=False, default=UserStatus.PENDING.value)
    created_by_admin = Column(Boolean, default=False)
    first_login_complete = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    # Relationships
    roles = relationship("Role", secondary="user_roles", lazy="selectin")
    memberships = relationship(
        "GroupMember",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    @property
    def role_names(self) -> list:
        return [role.name for role in self.roles] or [RoleName.USER.value]

    @property
    def is_admin(self) -> bool:
        return RoleName.ADMIN.value in self.role_names

    __table_args__ = (
        {"mysql_charset": "utf8mb4", "mysql_collate": "utf8mb4_unicode_ci"},
    )
