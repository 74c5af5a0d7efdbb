# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Pydantic schemas for comments and likes
"""
from datetime import datetime
from typing import List

from pydantic import BaseModel, Field, field_validator

from portal.schemas.user import UserBrief


class CommentCreate(BaseModel):
    content: str = Field(..., max_length=5000)

    @field_validator("content")
    @classmethod
    def strip_content(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Comment content is required")
        return value


class CommentUpdate(CommentCreate):
    pass


class CommentResponse(BaseModel):
    id: str
    content: str
    author: UserBrief
    created_at: datetime

    class Config:
        from_attributes = True


class LikeStatusResponse(BaseModel):
    liked: bool
    likes_count: int
    users: List[UserBrief] = []
