# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Self-service user API endpoints
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from portal.api.dependencies import get_db
from portal.core import security
from portal.models.user import User
from portal.schemas.group import GroupBrief
from portal.schemas.user import UserResponse, UserSignup, UserUpdate
from portal.services.group_service import group_service
from portal.services.user_service import user_service

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/signup", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    data: UserSignup,
    db: Session = Depends(get_db),
):
    """Register an account; it stays pending until an admin approves it"""
    return user_service.signup(db, data)


@router.get("/me", response_model=UserResponse)
async def read_current_user(
    current_user: User = Depends(security.get_current_user),
):
    return current_user


@router.patch("/me", response_model=UserResponse)
async def update_current_user(
    data: UserUpdate,
    current_user: User = Depends(security.get_current_user),
    db: Session = Depends(get_db),
):
    return user_service.update_me(db, current_user, data)


@router.get("/me/groups", response_model=List[GroupBrief])
async def read_current_user_groups(
    current_user: User = Depends(security.get_current_user),
    db: Session = Depends(get_db),
):
    return group_service.get_user_groups(db, current_user.id)
