# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Pydantic schemas for events, albums and album media
"""
import datetime as dt
import re
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from portal.models.album import MediaType
from portal.schemas.group import GroupBrief
from portal.schemas.user import UserBrief

_TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def _check_time(value: Optional[str]) -> Optional[str]:
    if value in (None, ""):
        return None
    if not _TIME_PATTERN.match(value):
        raise ValueError("Time must use HH:MM format")
    return value


# Event Schemas
class EventCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    date: dt.date
    end_date: Optional[dt.date] = Field(None, alias="endDate")
    start_time: Optional[str] = Field(None, alias="startTime")
    end_time: Optional[str] = Field(None, alias="endTime")
    description: Optional[str] = None
    group_ids: List[str] = Field(default_factory=list, alias="groupIds")

    class Config:
        populate_by_name = True

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_times(cls, value: Optional[str]) -> Optional[str]:
        return _check_time(value)


class EventUpdate(BaseModel):
    """Partial update; group_ids, when present, replaces the whole set"""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    date: Optional[dt.date] = None
    end_date: Optional[dt.date] = Field(None, alias="endDate")
    start_time: Optional[str] = Field(None, alias="startTime")
    end_time: Optional[str] = Field(None, alias="endTime")
    description: Optional[str] = None
    group_ids: Optional[List[str]] = Field(None, alias="groupIds")

    class Config:
        populate_by_name = True

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_times(cls, value: Optional[str]) -> Optional[str]:
        return _check_time(value)


class EventResponse(BaseModel):
    id: str
    name: str
    date: dt.date
    end_date: Optional[dt.date] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    description: Optional[str] = None
    creator: Optional[UserBrief] = None
    groups: List[GroupBrief] = []
    album_count: int = 0
    created_at: dt.datetime

    class Config:
        from_attributes = True


# Album Schemas
class AlbumCreate(BaseModel):
    """Omitting group_ids inherits the event's groups; any list overrides"""

    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    group_ids: Optional[List[str]] = Field(None, alias="groupIds")

    class Config:
        populate_by_name = True


class AlbumUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    group_ids: Optional[List[str]] = Field(None, alias="groupIds")

    class Config:
        populate_by_name = True


class MediaCreate(BaseModel):
    """Register an uploaded file's locator in an album"""

    media_url: str = Field(..., min_length=1, max_length=1000, alias="mediaUrl")
    media_type: Optional[MediaType] = Field(None, alias="mediaType")
    caption: Optional[str] = None

    class Config:
        populate_by_name = True


class MediaResponse(BaseModel):
    id: str
    album_id: str
    media_url: str
    media_type: MediaType
    caption: Optional[str] = None
    display_order: int

    class Config:
        from_attributes = True


class AlbumResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    event_id: Optional[str] = None
    creator: Optional[UserBrief] = None
    groups: List[GroupBrief] = []
    media_count: int = 0
    cover_image: Optional[str] = None
    created_at: dt.datetime

    class Config:
        from_attributes = True


class AlbumDetail(AlbumResponse):
    media: List[MediaResponse] = []
