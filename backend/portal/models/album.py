# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Album, AlbumGroup and AlbumMedia models
"""
from datetime import datetime
from enum import Enum

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from portal.db.base import Base, generate_uuid


class MediaType(str, Enum):
    IMAGE = "image"
    VIDEO = "video"


class AlbumGroup(Base):
    """Group association of an album"""

    __tablename__ = "album_groups"

    album_id = Column(
        String(36), ForeignKey("albums.id", ondelete="CASCADE"), primary_key=True
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


class Album(Base):
    """Photo/video album, normally created under an event"""

    __tablename__ = "albums"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    event_id = Column(
        String(36),
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    created_by = Column(String(36), ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    # Relationships
    event = relationship("Event", back_populates="albums")
    creator = relationship("User", foreign_keys=[created_by])
    groups = relationship("Group", secondary="album_groups", lazy="selectin")
    media = relationship(
        "AlbumMedia",
        back_populates="album",
        order_by="AlbumMedia.display_order",
        cascade="all, delete-orphan",
    )

    @property
    def group_ids(self) -> frozenset:
        return frozenset(group.id for group in self.groups)

    __table_args__ = (
        {"mysql_charset": "utf8mb4", "mysql_collate": "utf8mb4_unicode_ci"},
    )


class AlbumMedia(Base):
    """Image or video owned exclusively by one album"""

    __tablename__ = "album_media"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    album_id = Column(
        String(36),
        ForeignKey("albums.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    media_url = Column(String(1000), nullable=False)
    media_type = Column(String(10), nullable=False, default=MediaType.IMAGE.value)
    caption = Column(Text, nullable=True)
    display_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.now)

    album = relationship("Album", back_populates="media")

    __table_args__ = (
        {"mysql_charset": "utf8mb4", "mysql_collate": "utf8mb4_unicode_ci"},
    )
