# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Pydantic schemas for posts and moderation requests
"""
import json
from datetime import datetime
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator

from portal.models.post import PostStatus
from portal.schemas.group import GroupBrief
from portal.schemas.user import UserBrief


class PostCreate(BaseModel):
    """Schema for submitting a post; content is the editor block list"""

    title: Optional[str] = Field(None, max_length=255)
    content: Any
    group_ids: List[str] = Field(default_factory=list, alias="groupIds")

    class Config:
        populate_by_name = True

    @field_validator("content")
    @classmethod
    def serialize_content(cls, value: Any) -> str:
        text = value if isinstance(value, str) else json.dumps(value)
        if value is None or not text.strip():
            raise ValueError("Post content is required")
        return text


class PostStatusUpdate(BaseModel):
    """Moderation transition request"""

    status: PostStatus
    reason: Optional[str] = None
    group_ids: Optional[List[str]] = Field(None, alias="groupIds")

    class Config:
        populate_by_name = True


class BulkAction(str, Enum):
    """Actions offered by the bulk toolbar of the moderation screens"""

    APPROVE = "approve"
    REJECT = "reject"
    DISAPPROVE = "disapprove"
    RESTORE = "restore"
    DELETE = "delete"


class BulkPostStatusUpdate(BaseModel):
    ids: List[str] = Field(..., min_length=1)
    action: BulkAction
    reason: Optional[str] = None
    group_ids: Optional[List[str]] = Field(None, alias="groupIds")

    class Config:
        populate_by_name = True


class BulkItemResult(BaseModel):
    id: str
    success: bool
    error: Optional[str] = None


class BulkResultResponse(BaseModel):
    succeeded: int
    failed: int
    results: List[BulkItemResult]


class PostResponse(BaseModel):
    """Post as returned by listings and detail endpoints"""

    id: str
    title: Optional[str] = None
    content: Optional[str] = None
    status: PostStatus
    author: UserBrief
    groups: List[GroupBrief] = []
    rejection_reason: Optional[str] = None
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    likes_count: int = 0
    comments_count: int = 0
    created_at: datetime

    class Config:
        from_attributes = True
