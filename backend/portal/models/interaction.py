# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Comment and Like models attached to a tagged target (kind + id)
"""
from datetime import datetime
from enum import Enum

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from portal.db.base import Base, generate_uuid


class TargetType(str, Enum):
    """Closed set of entity kinds that can be liked or commented on"""

    POST = "post"
    EVENT = "event"
    ALBUM = "album"
    MEDIA = "media"


class Comment(Base):
    """Comment on a post, event, album or album media item"""

    __tablename__ = "comments"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    target_type = Column(String(20), nullable=False)
    target_id = Column(String(36), nullable=False)
    user_id = Column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    content = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    author = relationship("User", foreign_keys=[user_id])

    __table_args__ = (
        Index("idx_comments_target", "target_type", "target_id"),
        {"mysql_charset": "utf8mb4", "mysql_collate": "utf8mb4_unicode_ci"},
    )


class Like(Base):
    """Like on a post, event, album or album media item"""

    __tablename__ = "likes"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    target_type = Column(String(20), nullable=False)
    target_id = Column(String(36), nullable=False)
    user_id = Column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    created_at = Column(DateTime, default=datetime.now)

    user = relationship("User", foreign_keys=[user_id])

    __table_args__ = (
        UniqueConstraint("target_type", "target_id", "user_id", name="uq_likes_target_user"),
        Index("idx_likes_target", "target_type", "target_id"),
        {"mysql_charset": "utf8mb4", "mysql_collate": "utf8mb4_unicode_ci"},
    )
