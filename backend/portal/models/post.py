# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Post and PostGroup models
"""
from datetime import datetime
from enum import Enum

from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from portal.db.base import Base, generate_uuid


class PostStatus(str, Enum):
    """Moderation status of a post"""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class PostGroup(Base):
    """Group association of a post"""

    __tablename__ = "post_groups"

    post_id = Column(
        String(36), ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True
    )
    group_id = Column(
        String(36),
        ForeignKey("groups.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
    created_at = Column(DateTime, default=datetime.now)

    __table_args__ = (
        {"mysql_charset": "utf8mb4", "mysql_collate": "utf8mb4_unicode_ci"},
    )


class Post(Base):
    """User-authored post gated by moderation"""

    __tablename__ = "posts"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    title = Column(String(255), nullable=True)
    # Editor block list serialized as JSON text, never interpreted here
    content = Column(Text, nullable=True)
    author_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    status = Column(
        String(20), nullable=False, default=PostStatus.PENDING.value, index=True
    )
    rejection_reason = Column(Text, nullable=True)
    reviewed_by = Column(String(36), ForeignKey("users.id"), nullable=True)
    reviewed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.now, index=True)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    # Relationships
    author = relationship("User", foreign_keys=[author_id])
    reviewer = relationship("User", foreign_keys=[reviewed_by])
    groups = relationship("Group", secondary="post_groups", lazy="selectin")

    @property
    def group_ids(self) -> frozenset:
        return frozenset(group.id for group in self.groups)

    __table_args__ = (
        {"mysql_charset": "utf8mb4", "mysql_collate": "utf8mb4_unicode_ci"},
    )
