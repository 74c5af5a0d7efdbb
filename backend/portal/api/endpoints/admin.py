# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Admin user management API endpoints
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from portal.api.dependencies import get_db, get_page_params
from portal.core import security
from portal.models.user import User
from portal.schemas.common import MessageResponse, Page, PageParams
from portal.schemas.group import GroupBrief
from portal.schemas.user import (
    AdminUserCreate,
    AdminUserUpdate,
    DashboardStats,
    UserResponse,
    UserStatusUpdate,
)
from portal.services.group_service import group_service
from portal.services.user_service import user_service

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/stats", response_model=DashboardStats)
async def get_dashboard_stats(
    current_user: User = Depends(security.get_admin_user),
    db: Session = Depends(get_db),
):
    return user_service.get_stats(db)


@router.get("/users", response_model=Page[UserResponse])
async def list_users(
    status_filter: Optional[str] = Query(None, alias="status"),
    search: Optional[str] = Query(None),
    params: PageParams = Depends(get_page_params),
    current_user: User = Depends(security.get_admin_user),
    db: Session = Depends(get_db),
):
    """List users, optionally filtered by status and a name/mobile/email search"""
    users, total = user_service.list_users(db, params, status_filter, search)
    return Page[UserResponse].build(
        [UserResponse.model_validate(u) for u in users], total, params
    )


@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    data: AdminUserCreate,
    current_user: User = Depends(security.get_admin_user),
    db: Session = Depends(get_db),
):
    """Create an approved account"""
    return user_service.create_user(db, current_user, data)


@router.patch("/users/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    data: AdminUserUpdate,
    current_user: User = Depends(security.get_admin_user),
    db: Session = Depends(get_db),
):
    return user_service.update_user(db, user_id, data)


@router.patch("/users/{user_id}/status", response_model=UserResponse)
async def update_user_status(
    user_id: str,
    data: UserStatusUpdate,
    current_user: User = Depends(security.get_admin_user),
    db: Session = Depends(get_db),
):
    return user_service.update_status(db, current_user, user_id, data.status)


@router.delete("/users/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: str,
    current_user: User = Depends(security.get_admin_user),
    db: Session = Depends(get_db),
):
    user_service.delete_user(db, current_user, user_id)
    return MessageResponse(message="User deleted")


@router.get("/users/{user_id}/groups", response_model=List[GroupBrief])
async def get_user_groups(
    user_id: str,
    current_user: User = Depends(security.get_admin_user),
    db: Session = Depends(get_db),
):
    return group_service.get_user_groups(db, user_id)
