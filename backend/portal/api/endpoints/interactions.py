# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Like and comment API endpoints for every interactable target
"""
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from portal.api.dependencies import get_db, get_page_params
from portal.core import security
from portal.models.user import User
from portal.schemas.common import MessageResponse, Page, PageParams
from portal.schemas.interaction import (
    CommentCreate,
    CommentResponse,
    CommentUpdate,
    LikeStatusResponse,
)
from portal.services.interaction_service import interaction_service, parse_target_type

router = APIRouter()
logger = logging.getLogger(__name__)


# Comment APIs by id
@router.patch("/comments/{comment_id}", response_model=CommentResponse)
async def update_comment(
    comment_id: str,
    data: CommentUpdate,
    current_user: User = Depends(security.get_current_user),
    db: Session = Depends(get_db),
):
    return interaction_service.update_comment(db, current_user, comment_id, data)


@router.delete("/comments/{comment_id}", response_model=MessageResponse)
async def delete_comment(
    comment_id: str,
    current_user: User = Depends(security.get_current_user),
    db: Session = Depends(get_db),
):
    interaction_service.delete_comment(db, current_user, comment_id)
    return MessageResponse(message="Comment deleted")


# Like APIs
@router.get("/{target}/{target_id}/likes", response_model=LikeStatusResponse)
async def get_likes(
    target: str,
    target_id: str,
    current_user: User = Depends(security.get_current_user),
    db: Session = Depends(get_db),
):
    return interaction_service.get_likes(
        db, current_user, parse_target_type(target), target_id
    )


@router.post("/{target}/{target_id}/like", response_model=LikeStatusResponse)
async def add_like(
    target: str,
    target_id: str,
    current_user: User = Depends(security.get_current_user),
    db: Session = Depends(get_db),
):
    return interaction_service.add_like(
        db, current_user, parse_target_type(target), target_id
    )


@router.delete("/{target}/{target_id}/like", response_model=LikeStatusResponse)
async def remove_like(
    target: str,
    target_id: str,
    current_user: User = Depends(security.get_current_user),
    db: Session = Depends(get_db),
):
    return interaction_service.remove_like(
        db, current_user, parse_target_type(target), target_id
    )


# Comment APIs by target
@router.get("/{target}/{target_id}/comments", response_model=Page[CommentResponse])
async def list_comments(
    target: str,
    target_id: str,
    params: PageParams = Depends(get_page_params),
    current_user: User = Depends(security.get_current_user),
    db: Session = Depends(get_db),
):
    comments, total = interaction_service.list_comments(
        db, current_user, parse_target_type(target), target_id, params
    )
    return Page[CommentResponse].build(
        [CommentResponse.model_validate(c) for c in comments], total, params
    )


@router.post(
    "/{target}/{target_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_comment(
    target: str,
    target_id: str,
    data: CommentCreate,
    current_user: User = Depends(security.get_current_user),
    db: Session = Depends(get_db),
):
    return interaction_service.add_comment(
        db, current_user, parse_target_type(target), target_id, data
    )
