# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Pydantic schemas for GroupType, Group and GroupMember
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from portal.schemas.user import UserBrief


# GroupType Schemas
class GroupTypeCreate(BaseModel):
    label: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None


class GroupTypeUpdate(BaseModel):
    label: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None


class GroupTypeResponse(BaseModel):
    id: str
    label: str
    description: Optional[str] = None

    class Config:
        from_attributes = True


# Group Schemas
class GroupBrief(BaseModel):
    """Group reference embedded in content responses"""

    id: str
    name: str

    class Config:
        from_attributes = True


class GroupCreate(BaseModel):
    """Schema for creating a new group"""

    name: str = Field(..., min_length=1, max_length=150)
    description: Optional[str] = None
    group_type_id: Optional[str] = Field(None, alias="groupTypeId")

    class Config:
        populate_by_name = True


class GroupUpdate(BaseModel):
    """Schema for updating group information"""

    name: Optional[str] = Field(None, min_length=1, max_length=150)
    description: Optional[str] = None
    group_type_id: Optional[str] = Field(None, alias="groupTypeId")

    class Config:
        populate_by_name = True


class GroupResponse(BaseModel):
    """Group list item / detail"""

    id: str
    name: str
    description: Optional[str] = None
    group_type: Optional[GroupTypeResponse] = None
    member_count: int = 0
    created_at: datetime

    class Config:
        from_attributes = True


# GroupMember Schemas
class GroupMembersAdd(BaseModel):
    """Add a set of users to a group in one all-or-nothing call"""

    user_ids: List[str] = Field(..., alias="userIds")

    class Config:
        populate_by_name = True


class GroupMembersAddAll(BaseModel):
    """Add every user matching the filter (not just the visible page)"""

    search: Optional[str] = None


class GroupMembersAddResult(BaseModel):
    added: int
    total_members: int


class GroupMemberResponse(UserBrief):
    """Member of a group"""

    mobile_number: str
    email: Optional[str] = None

    class Config:
        from_attributes = True


class GroupMemberListResponse(BaseModel):
    total: int
    items: List[GroupMemberResponse]
