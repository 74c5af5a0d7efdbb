# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Pydantic schemas for users and authentication
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from portal.models.user import RoleName, UserStatus


class TokenData(BaseModel):
    """Claims carried by an access token"""

    user_id: str
    roles: List[str] = []


class UserBrief(BaseModel):
    """Minimal user information embedded in other responses"""

    id: str
    name: str
    profile_picture_url: Optional[str] = None

    class Config:
        from_attributes = True


class UserSignup(BaseModel):
    """Self-registration payload; the account starts pending"""

    name: str = Field(..., min_length=1, max_length=150)
    mobile_number: str = Field(..., min_length=6, max_length=20, alias="mobileNumber")
    email: Optional[str] = Field(None, max_length=255)

    class Config:
        populate_by_name = True


class AdminUserCreate(UserSignup):
    """Admin-created account; approved immediately"""

    role: RoleName = RoleName.USER
    group_ids: List[str] = Field(default_factory=list, alias="groupIds")


class UserUpdate(BaseModel):
    """Profile update by the user themselves"""

    name: Optional[str] = Field(None, min_length=1, max_length=150)
    email: Optional[str] = Field(None, max_length=255)


class AdminUserUpdate(UserUpdate):
    """Profile update by an admin"""

    mobile_number: Optional[str] = Field(
        None, min_length=6, max_length=20, alias="mobileNumber"
    )
    role: Optional[RoleName] = None

    class Config:
        populate_by_name = True


class UserStatusUpdate(BaseModel):
    status: UserStatus


class UserResponse(BaseModel):
    """User as returned by the API"""

    id: str
    name: str
    mobile_number: str
    email: Optional[str] = None
    profile_picture_url: Optional[str] = None
    status: UserStatus
    role_names: List[str] = Field(default_factory=list, serialization_alias="roles")
    first_login_complete: bool = False
    created_at: datetime

    class Config:
        from_attributes = True


# Authentication schemas
class MobileNumberRequest(BaseModel):
    mobile_number: str = Field(..., min_length=6, max_length=20, alias="mobileNumber")

    class Config:
        populate_by_name = True


class OtpVerifyRequest(MobileNumberRequest):
    otp: str = Field(..., min_length=1, max_length=10)


class AccountStatusResponse(BaseModel):
    exists: bool
    status: Optional[UserStatus] = None
    message: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class DashboardStats(BaseModel):
    total_users: int
    pending_users: int
    total_groups: int
    total_events: int
    pending_posts: int
    approved_posts: int
