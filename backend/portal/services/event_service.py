# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Service layer for events
"""
import logging
from typing import Dict, List, Tuple

from fastapi import HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from portal.models.album import Album, AlbumMedia
from portal.models.event import Event
from portal.models.interaction import TargetType
from portal.models.user import User
from portal.schemas.common import PageParams
from portal.schemas.event import EventCreate, EventResponse, EventUpdate
from portal.services.group_service import GroupService
from portal.services.interaction_service import InteractionService
from portal.services.visibility import VisibilityResolver

logger = logging.getLogger(__name__)


class EventService:
    """Service for events"""

    @staticmethod
    def get_event(db: Session, viewer: User, event_id: str) -> Event:
        event = db.get(Event, event_id)
        if not event or not VisibilityResolver.can_view_event(db, viewer, event):
            raise HTTPException(status_code=404, detail="Event not found")
        return event

    @staticmethod
    def list_events(
        db: Session, viewer: User, params: PageParams
    ) -> Tuple[List[Event], int]:
        query = VisibilityResolver.visible_events(db, viewer)
        total = query.count()
        items = (
            query.options(joinedload(Event.creator))
            .offset(params.offset)
            .limit(params.limit)
            .all()
        )
        return items, total

    @staticmethod
    def _album_counts(db: Session, event_ids: List[str]) -> Dict[str, int]:
        if not event_ids:
            return {}
        rows = (
            db.query(Album.event_id, func.count(Album.id))
            .filter(Album.event_id.in_(event_ids))
            .group_by(Album.event_id)
            .all()
        )
        return dict(rows)

    @staticmethod
    def to_responses(db: Session, events: List[Event]) -> List[EventResponse]:
        counts = EventService._album_counts(db, [e.id for e in events])
        items = []
        for event in events:
            item = EventResponse.model_validate(event)
            item.album_count = counts.get(event.id, 0)
            items.append(item)
        return items

    @staticmethod
    def create_event(db: Session, creator: User, data: EventCreate) -> Event:
        groups = GroupService.resolve_groups(db, data.group_ids)
        event = Event(
            name=data.name,
            date=data.date,
            end_date=data.end_date,
            start_time=data.start_time,
            end_time=data.end_time,
            description=data.description,
            created_by=creator.id,
        )
        event.groups = groups
        db.add(event)
        db.commit()
        db.refresh(event)

        logger.info(f"Event {event.id} created by {creator.id} for {len(groups)} groups")
        return event

    @staticmethod
    def update_event(db: Session, viewer: User, event_id: str, data: EventUpdate) -> Event:
        """
        Update an event.

        A supplied ``group_ids`` replaces the whole group set. Albums keep the
        groups they were created with.
        """
        event = EventService.get_event(db, viewer, event_id)

        fields = data.model_dump(exclude_unset=True, exclude={"group_ids"})
        if "name" in fields and fields["name"] is None:
            fields.pop("name")
        if "date" in fields and fields["date"] is None:
            fields.pop("date")
        for key, value in fields.items():
            setattr(event, key, value)

        if data.group_ids is not None:
            event.groups = GroupService.resolve_groups(db, data.group_ids)
            logger.info(f"Event {event.id} groups replaced with {sorted(data.group_ids)}")

        db.commit()
        db.refresh(event)
        return event

    @staticmethod
    def delete_event(db: Session, viewer: User, event_id: str) -> None:
        """Delete an event with its albums, their media and every interaction on them"""
        event = EventService.get_event(db, viewer, event_id)

        album_ids = [album.id for album in event.albums]
        media_ids = []
        if album_ids:
            media_ids = [
                row.id
                for row in db.query(AlbumMedia.id)
                .filter(AlbumMedia.album_id.in_(album_ids))
                .all()
            ]

        InteractionService.purge_targets(db, TargetType.EVENT, [event.id])
        InteractionService.purge_targets(db, TargetType.ALBUM, album_ids)
        InteractionService.purge_targets(db, TargetType.MEDIA, media_ids)
        db.delete(event)
        db.commit()

        logger.info(
            f"Event {event_id} deleted with {len(album_ids)} albums "
            f"and {len(media_ids)} media items"
        )


# Singleton instance
event_service = EventService()
