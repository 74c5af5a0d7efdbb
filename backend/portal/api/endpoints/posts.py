# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Post and moderation API endpoints
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from portal.api.dependencies import get_db, get_page_params
from portal.core import security
from portal.models.user import User
from portal.schemas.common import MessageResponse, Page, PageParams
from portal.schemas.post import (
    BulkPostStatusUpdate,
    BulkResultResponse,
    PostCreate,
    PostResponse,
    PostStatusUpdate,
)
from portal.services.post_service import post_service

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=Page[PostResponse])
async def list_posts(
    mine: bool = Query(False, description="Only my posts, in any status"),
    status_filter: Optional[str] = Query(
        None,
        alias="status",
        description="Status filter: a status, a comma separated list or 'all'",
    ),
    params: PageParams = Depends(get_page_params),
    current_user: User = Depends(security.get_current_user),
    db: Session = Depends(get_db),
):
    """
    List posts, newest first.

    Regular users get the approved posts shared with their groups plus their
    own approved posts. Admins get every post, filtered by ``status``
    (approved when omitted).
    """
    posts, total = post_service.list_posts(
        db, current_user, params, mine=mine, status_param=status_filter
    )
    return Page[PostResponse].build(post_service.to_responses(db, posts), total, params)


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    data: PostCreate,
    current_user: User = Depends(security.get_current_user),
    db: Session = Depends(get_db),
):
    """Submit a post for moderation"""
    post = post_service.create_post(db, current_user, data)
    return post_service.to_responses(db, [post])[0]


@router.post("/bulk-status", response_model=BulkResultResponse)
async def bulk_update_post_status(
    data: BulkPostStatusUpdate,
    current_user: User = Depends(security.get_admin_user),
    db: Session = Depends(get_db),
):
    """Apply one moderation action to many posts, reporting each outcome"""
    return post_service.bulk_update_status(db, current_user, data)


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(
    post_id: str,
    current_user: User = Depends(security.get_current_user),
    db: Session = Depends(get_db),
):
    post = post_service.get_post(db, current_user, post_id)
    return post_service.to_responses(db, [post])[0]


@router.patch("/{post_id}/status", response_model=PostResponse)
async def update_post_status(
    post_id: str,
    data: PostStatusUpdate,
    current_user: User = Depends(security.get_admin_user),
    db: Session = Depends(get_db),
):
    """Approve, reject or return a post to pending"""
    post = post_service.update_status(db, current_user, post_id, data)
    return post_service.to_responses(db, [post])[0]


@router.delete("/{post_id}", response_model=MessageResponse)
async def delete_post(
    post_id: str,
    current_user: User = Depends(security.get_current_user),
    db: Session = Depends(get_db),
):
    """Permanently delete a post (admin or author)"""
    post_service.delete_post(db, current_user, post_id)
    return MessageResponse(message="Post deleted")
