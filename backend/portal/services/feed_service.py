# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Unified feed of events with their albums, plus the cross-event album listing
"""
import logging
from typing import Dict, List, Tuple

from sqlalchemy.orm import Session, selectinload

from portal.models.album import Album
from portal.models.event import Event
from portal.models.interaction import TargetType
from portal.models.user import User
from portal.schemas.common import PageParams
from portal.schemas.event import AlbumResponse
from portal.schemas.feed import (
    FeedAlbum,
    FeedAlbumDetail,
    FeedEvent,
    FeedEventBrief,
    FeedMedia,
    FeedMediaItem,
)
from portal.schemas.user import UserBrief
from portal.services.album_service import AlbumService
from portal.services.event_service import EventService
from portal.services.interaction_service import InteractionService
from portal.services.visibility import VisibilityResolver

logger = logging.getLogger(__name__)

# Media shown per album on a feed card
FEED_PREVIEW_SIZE = 4


class FeedService:
    """Builds feed cards from the events and albums a viewer can see"""

    @staticmethod
    def _albums_by_event(
        db: Session, viewer: User, event_ids: List[str]
    ) -> Dict[str, List[Album]]:
        """Visible albums of the given events, keyed by event id"""
        if not event_ids:
            return {}
        albums = (
            VisibilityResolver.visible_albums(db, viewer)
            .filter(Album.event_id.in_(event_ids))
            .options(selectinload(Album.media))
            .all()
        )
        grouped: Dict[str, List[Album]] = {}
        for album in albums:
            grouped.setdefault(album.event_id, []).append(album)
        return grouped

    @staticmethod
    def _feed_album(album: Album) -> FeedAlbum:
        return FeedAlbum(
            id=album.id,
            name=album.name,
            photo_count=len(album.media),
            photos=[
                FeedMedia.model_validate(media)
                for media in album.media[:FEED_PREVIEW_SIZE]
            ],
        )

    @staticmethod
    def to_feed_events(
        db: Session, viewer: User, events: List[Event]
    ) -> List[FeedEvent]:
        ids = [event.id for event in events]
        likes, comments = InteractionService.counts(db, TargetType.EVENT, ids)
        liked = InteractionService.liked_ids(db, viewer, TargetType.EVENT, ids)
        albums = FeedService._albums_by_event(db, viewer, ids)

        items = []
        for event in events:
            event_albums = [
                FeedService._feed_album(album) for album in albums.get(event.id, [])
            ]
            items.append(
                FeedEvent(
                    id=event.id,
                    name=event.name,
                    date=event.date,
                    end_date=event.end_date,
                    start_time=event.start_time,
                    end_time=event.end_time,
                    description=event.description,
                    creator=UserBrief.model_validate(event.creator)
                    if event.creator
                    else None,
                    created_at=event.created_at,
                    album_count=len(event_albums),
                    albums=event_albums,
                    likes_count=likes.get(event.id, 0),
                    comments_count=comments.get(event.id, 0),
                    liked=event.id in liked,
                )
            )
        return items

    @staticmethod
    def list_feed(
        db: Session, viewer: User, params: PageParams
    ) -> Tuple[List[FeedEvent], int]:
        """Visible events, latest date first, each with its visible albums"""
        events, total = EventService.list_events(db, viewer, params)
        return FeedService.to_feed_events(db, viewer, events), total

    @staticmethod
    def get_event_card(db: Session, viewer: User, event_id: str) -> FeedEvent:
        event = EventService.get_event(db, viewer, event_id)
        return FeedService.to_feed_events(db, viewer, [event])[0]

    @staticmethod
    def list_albums(
        db: Session, viewer: User, params: PageParams
    ) -> Tuple[List[AlbumResponse], int]:
        """Every album the viewer can see, across events"""
        query = VisibilityResolver.visible_albums(db, viewer)
        total = query.count()
        albums = query.offset(params.offset).limit(params.limit).all()
        return AlbumService.to_responses(db, albums), total

    @staticmethod
    def get_album_detail(db: Session, viewer: User, album_id: str) -> FeedAlbumDetail:
        """
        Album with every media item and like/comment stats at both levels.

        The parent event is only included when the viewer can see it.
        """
        album = AlbumService.get_album(db, viewer, album_id)

        media_ids = [media.id for media in album.media]
        media_likes, media_comments = InteractionService.counts(
            db, TargetType.MEDIA, media_ids
        )
        media_liked = InteractionService.liked_ids(
            db, viewer, TargetType.MEDIA, media_ids
        )
        likes, comments = InteractionService.counts(db, TargetType.ALBUM, [album.id])

        event = None
        if album.event and VisibilityResolver.can_view_event(db, viewer, album.event):
            event = FeedEventBrief.model_validate(album.event)

        return FeedAlbumDetail(
            id=album.id,
            name=album.name,
            description=album.description,
            event=event,
            creator=UserBrief.model_validate(album.creator) if album.creator else None,
            media=[
                FeedMediaItem(
                    id=media.id,
                    media_url=media.media_url,
                    media_type=media.media_type,
                    caption=media.caption,
                    likes_count=media_likes.get(media.id, 0),
                    comments_count=media_comments.get(media.id, 0),
                    liked=media.id in media_liked,
                )
                for media in album.media
            ],
            likes_count=likes.get(album.id, 0),
            comments_count=comments.get(album.id, 0),
            liked=bool(
                InteractionService.liked_ids(db, viewer, TargetType.ALBUM, [album.id])
            ),
        )


# Singleton instance
feed_service = FeedService()
