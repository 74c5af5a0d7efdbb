# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Group, group type and group member API endpoints
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from portal.api.dependencies import get_db, get_page_params
from portal.core import security
from portal.models.user import User
from portal.schemas.common import MessageResponse, Page, PageParams
from portal.schemas.group import (
    GroupCreate,
    GroupMemberListResponse,
    GroupMemberResponse,
    GroupMembersAdd,
    GroupMembersAddAll,
    GroupMembersAddResult,
    GroupResponse,
    GroupTypeCreate,
    GroupTypeResponse,
    GroupTypeUpdate,
    GroupUpdate,
)
from portal.services.group_service import group_service

router = APIRouter()
logger = logging.getLogger(__name__)


# Group Type APIs
@router.get("/types", response_model=List[GroupTypeResponse])
async def list_group_types(
    current_user: User = Depends(security.get_current_user),
    db: Session = Depends(get_db),
):
    return group_service.list_group_types(db)


@router.post(
    "/types", response_model=GroupTypeResponse, status_code=status.HTTP_201_CREATED
)
async def create_group_type(
    data: GroupTypeCreate,
    current_user: User = Depends(security.get_admin_user),
    db: Session = Depends(get_db),
):
    return group_service.create_group_type(db, data)


@router.patch("/types/{group_type_id}", response_model=GroupTypeResponse)
async def update_group_type(
    group_type_id: str,
    data: GroupTypeUpdate,
    current_user: User = Depends(security.get_admin_user),
    db: Session = Depends(get_db),
):
    return group_service.update_group_type(db, group_type_id, data)


@router.delete("/types/{group_type_id}", response_model=MessageResponse)
async def delete_group_type(
    group_type_id: str,
    current_user: User = Depends(security.get_admin_user),
    db: Session = Depends(get_db),
):
    """Delete a group type (refused while groups use it)"""
    group_service.delete_group_type(db, group_type_id)
    return MessageResponse(message="Group type deleted")


# Group Management APIs
@router.get("", response_model=Page[GroupResponse])
async def list_groups(
    search: Optional[str] = Query(None),
    all: bool = Query(False, description="Return the complete filtered set"),
    params: PageParams = Depends(get_page_params),
    current_user: User = Depends(security.get_current_user),
    db: Session = Depends(get_db),
):
    """
    List groups. Admins see every group, other users their own groups.

    With ``all=true`` the whole filtered set is returned as a single page.
    """
    if all:
        groups = group_service.list_all_groups(db, current_user, search)
        total = len(groups)
        return Page[GroupResponse](
            items=group_service.to_responses(db, groups),
            total=total,
            page=1,
            limit=max(total, 1),
            total_pages=1 if total else 0,
        )

    groups, total = group_service.list_groups(db, current_user, params, search)
    return Page[GroupResponse].build(
        group_service.to_responses(db, groups), total, params
    )


@router.post("", response_model=GroupResponse, status_code=status.HTTP_201_CREATED)
async def create_group(
    data: GroupCreate,
    current_user: User = Depends(security.get_admin_user),
    db: Session = Depends(get_db),
):
    group = group_service.create_group(db, data, current_user)
    return group_service.to_responses(db, [group])[0]


@router.patch("/{group_id}", response_model=GroupResponse)
async def update_group(
    group_id: str,
    data: GroupUpdate,
    current_user: User = Depends(security.get_admin_user),
    db: Session = Depends(get_db),
):
    group = group_service.update_group(db, group_id, data)
    return group_service.to_responses(db, [group])[0]


@router.delete("/{group_id}", response_model=MessageResponse)
async def delete_group(
    group_id: str,
    current_user: User = Depends(security.get_admin_user),
    db: Session = Depends(get_db),
):
    """Delete a group with its memberships and content associations"""
    group_service.delete_group(db, group_id)
    return MessageResponse(message="Group deleted")


# Group Member Management APIs
@router.get("/{group_id}/members", response_model=GroupMemberListResponse)
async def list_group_members(
    group_id: str,
    search: Optional[str] = Query(None),
    current_user: User = Depends(security.get_admin_user),
    db: Session = Depends(get_db),
):
    members = group_service.get_group_members(db, group_id, search)
    return GroupMemberListResponse(
        total=len(members),
        items=[GroupMemberResponse.model_validate(m) for m in members],
    )


@router.post("/{group_id}/members", response_model=GroupMembersAddResult)
async def add_group_members(
    group_id: str,
    data: GroupMembersAdd,
    current_user: User = Depends(security.get_admin_user),
    db: Session = Depends(get_db),
):
    """Add users to a group; all of them or none"""
    added, total = group_service.add_members(db, group_id, data.user_ids)
    return GroupMembersAddResult(added=added, total_members=total)


@router.post("/{group_id}/members/add-all", response_model=GroupMembersAddResult)
async def add_all_group_members(
    group_id: str,
    data: GroupMembersAddAll,
    current_user: User = Depends(security.get_admin_user),
    db: Session = Depends(get_db),
):
    """Add every approved user matching the search, not only the visible page"""
    added, total = group_service.add_all_members(db, group_id, data.search)
    return GroupMembersAddResult(added=added, total_members=total)


@router.delete("/{group_id}/members/{user_id}", response_model=MessageResponse)
async def remove_group_member(
    group_id: str,
    user_id: str,
    current_user: User = Depends(security.get_admin_user),
    db: Session = Depends(get_db),
):
    group_service.remove_member(db, group_id, user_id)
    return MessageResponse(message="Member removed")
