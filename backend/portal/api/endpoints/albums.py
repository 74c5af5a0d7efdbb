# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Album and album media API endpoints
"""
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from portal.api.dependencies import get_db
from portal.core import security
from portal.models.user import User
from portal.schemas.common import MessageResponse
from portal.schemas.event import AlbumDetail, AlbumUpdate, MediaCreate, MediaResponse
from portal.services.album_service import album_service

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/{album_id}", response_model=AlbumDetail)
async def get_album(
    album_id: str,
    current_user: User = Depends(security.get_current_user),
    db: Session = Depends(get_db),
):
    album = album_service.get_album(db, current_user, album_id)
    return album_service.to_detail(album)


@router.patch("/{album_id}", response_model=AlbumDetail)
async def update_album(
    album_id: str,
    data: AlbumUpdate,
    current_user: User = Depends(security.get_admin_user),
    db: Session = Depends(get_db),
):
    album = album_service.update_album(db, current_user, album_id, data)
    return album_service.to_detail(album)


@router.delete("/{album_id}", response_model=MessageResponse)
async def delete_album(
    album_id: str,
    current_user: User = Depends(security.get_admin_user),
    db: Session = Depends(get_db),
):
    album_service.delete_album(db, current_user, album_id)
    return MessageResponse(message="Album deleted")


@router.post(
    "/{album_id}/media",
    response_model=MediaResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_album_media(
    album_id: str,
    data: MediaCreate,
    current_user: User = Depends(security.get_admin_user),
    db: Session = Depends(get_db),
):
    """Register an uploaded file in the album"""
    return album_service.add_media(db, current_user, album_id, data)


@router.delete("/{album_id}/media/{media_id}", response_model=MessageResponse)
async def remove_album_media(
    album_id: str,
    media_id: str,
    current_user: User = Depends(security.get_admin_user),
    db: Session = Depends(get_db),
):
    album_service.remove_media(db, current_user, album_id, media_id)
    return MessageResponse(message="Media removed")
