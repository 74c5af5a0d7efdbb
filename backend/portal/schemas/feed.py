# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Pydantic schemas for the unified event/album feed
"""
import datetime as dt
from typing import List, Optional

from pydantic import BaseModel

from portal.models.album import MediaType
from portal.schemas.user import UserBrief


class FeedMedia(BaseModel):
    """Preview entry of an album in the feed"""

    id: str
    media_url: str
    media_type: MediaType

    class Config:
        from_attributes = True


class FeedAlbum(BaseModel):
    id: str
    name: str
    photo_count: int = 0
    photos: List[FeedMedia] = []


class FeedEvent(BaseModel):
    """Feed card: an event with its visible albums and interaction stats"""

    id: str
    name: str
    date: dt.date
    end_date: Optional[dt.date] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    description: Optional[str] = None
    creator: Optional[UserBrief] = None
    created_at: dt.datetime
    album_count: int = 0
    albums: List[FeedAlbum] = []
    likes_count: int = 0
    comments_count: int = 0
    liked: bool = False


class FeedMediaItem(FeedMedia):
    caption: Optional[str] = None
    likes_count: int = 0
    comments_count: int = 0
    liked: bool = False


class FeedEventBrief(BaseModel):
    id: str
    name: str
    date: dt.date

    class Config:
        from_attributes = True


class FeedAlbumDetail(BaseModel):
    """Album viewer payload with per-media stats"""

    id: str
    name: str
    description: Optional[str] = None
    event: Optional[FeedEventBrief] = None
    creator: Optional[UserBrief] = None
    media: List[FeedMediaItem] = []
    likes_count: int = 0
    comments_count: int = 0
    liked: bool = False
