# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Unified feed API endpoints
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from portal.api.dependencies import get_db, get_page_params
from portal.core import security
from portal.models.user import User
from portal.schemas.common import Page, PageParams
from portal.schemas.event import AlbumResponse
from portal.schemas.feed import FeedAlbumDetail, FeedEvent
from portal.services.feed_service import feed_service

router = APIRouter()


@router.get("", response_model=Page[FeedEvent])
async def get_feed(
    params: PageParams = Depends(get_page_params),
    current_user: User = Depends(security.get_current_user),
    db: Session = Depends(get_db),
):
    """Events shared with the viewer, latest date first, with their albums"""
    items, total = feed_service.list_feed(db, current_user, params)
    return Page[FeedEvent].build(items, total, params)


@router.get("/albums", response_model=Page[AlbumResponse])
async def list_feed_albums(
    params: PageParams = Depends(get_page_params),
    current_user: User = Depends(security.get_current_user),
    db: Session = Depends(get_db),
):
    items, total = feed_service.list_albums(db, current_user, params)
    return Page[AlbumResponse].build(items, total, params)


@router.get("/event/{event_id}", response_model=FeedEvent)
async def get_feed_event(
    event_id: str,
    current_user: User = Depends(security.get_current_user),
    db: Session = Depends(get_db),
):
    return feed_service.get_event_card(db, current_user, event_id)


@router.get("/album/{album_id}", response_model=FeedAlbumDetail)
async def get_feed_album(
    album_id: str,
    current_user: User = Depends(security.get_current_user),
    db: Session = Depends(get_db),
):
    return feed_service.get_album_detail(db, current_user, album_id)
