# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Event API endpoints, including the albums nested under an event
"""
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from portal.api.dependencies import get_db, get_page_params
from portal.core import security
from portal.models.user import User
from portal.schemas.common import MessageResponse, Page, PageParams
from portal.schemas.event import (
    AlbumCreate,
    AlbumResponse,
    EventCreate,
    EventResponse,
    EventUpdate,
)
from portal.services.album_service import album_service
from portal.services.event_service import event_service

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=Page[EventResponse])
async def list_events(
    params: PageParams = Depends(get_page_params),
    current_user: User = Depends(security.get_current_user),
    db: Session = Depends(get_db),
):
    events, total = event_service.list_events(db, current_user, params)
    return Page[EventResponse].build(
        event_service.to_responses(db, events), total, params
    )


@router.post("", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    data: EventCreate,
    current_user: User = Depends(security.get_admin_user),
    db: Session = Depends(get_db),
):
    event = event_service.create_event(db, current_user, data)
    return event_service.to_responses(db, [event])[0]


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(
    event_id: str,
    current_user: User = Depends(security.get_current_user),
    db: Session = Depends(get_db),
):
    event = event_service.get_event(db, current_user, event_id)
    return event_service.to_responses(db, [event])[0]


@router.patch("/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: str,
    data: EventUpdate,
    current_user: User = Depends(security.get_admin_user),
    db: Session = Depends(get_db),
):
    event = event_service.update_event(db, current_user, event_id, data)
    return event_service.to_responses(db, [event])[0]


@router.delete("/{event_id}", response_model=MessageResponse)
async def delete_event(
    event_id: str,
    current_user: User = Depends(security.get_admin_user),
    db: Session = Depends(get_db),
):
    """Delete an event together with its albums and their media"""
    event_service.delete_event(db, current_user, event_id)
    return MessageResponse(message="Event deleted")


# Albums under an event
@router.get("/{event_id}/albums", response_model=Page[AlbumResponse])
async def list_event_albums(
    event_id: str,
    params: PageParams = Depends(get_page_params),
    current_user: User = Depends(security.get_current_user),
    db: Session = Depends(get_db),
):
    albums, total = album_service.list_event_albums(db, current_user, event_id, params)
    return Page[AlbumResponse].build(
        album_service.to_responses(db, albums), total, params
    )


@router.post(
    "/{event_id}/albums",
    response_model=AlbumResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_album(
    event_id: str,
    data: AlbumCreate,
    current_user: User = Depends(security.get_admin_user),
    db: Session = Depends(get_db),
):
    """Create an album; without groupIds it starts with the event's groups"""
    album = album_service.create_album(db, current_user, event_id, data)
    return album_service.to_responses(db, [album])[0]
