# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Service layer for albums and album media
"""
import logging
import mimetypes
from typing import Dict, List, Optional, Tuple

from fastapi import HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session

from portal.models.album import Album, AlbumMedia, MediaType
from portal.models.event import Event
from portal.models.interaction import TargetType
from portal.models.user import User
from portal.schemas.common import PageParams
from portal.schemas.event import (
    AlbumCreate,
    AlbumDetail,
    AlbumResponse,
    AlbumUpdate,
    MediaCreate,
)
from portal.services.event_service import EventService
from portal.services.group_service import GroupService
from portal.services.interaction_service import InteractionService
from portal.services.selection import initial_groups_for_album
from portal.services.visibility import VisibilityResolver

logger = logging.getLogger(__name__)


def detect_media_type(media_url: str) -> MediaType:
    """Guess image or video from the locator's extension; unknown means image"""
    guessed, _ = mimetypes.guess_type(media_url)
    if guessed and guessed.startswith("video/"):
        return MediaType.VIDEO
    return MediaType.IMAGE


class AlbumService:
    """Service for albums and their media"""

    @staticmethod
    def get_album(db: Session, viewer: User, album_id: str) -> Album:
        album = db.get(Album, album_id)
        if not album or not VisibilityResolver.can_view_album(db, viewer, album):
            raise HTTPException(status_code=404, detail="Album not found")
        return album

    @staticmethod
    def list_event_albums(
        db: Session, viewer: User, event_id: str, params: PageParams
    ) -> Tuple[List[Album], int]:
        """
        Albums of an event the viewer can see.

        Album groups are independent of the event's groups, so only the
        event's existence is checked here.
        """
        if db.get(Event, event_id) is None:
            raise HTTPException(status_code=404, detail="Event not found")
        query = VisibilityResolver.visible_albums(db, viewer, event_id=event_id)
        total = query.count()
        items = query.offset(params.offset).limit(params.limit).all()
        return items, total

    @staticmethod
    def _media_stats(db: Session, album_ids: List[str]) -> Dict[str, int]:
        if not album_ids:
            return {}
        rows = (
            db.query(AlbumMedia.album_id, func.count(AlbumMedia.id))
            .filter(AlbumMedia.album_id.in_(album_ids))
            .group_by(AlbumMedia.album_id)
            .all()
        )
        return dict(rows)

    @staticmethod
    def to_responses(db: Session, albums: List[Album]) -> List[AlbumResponse]:
        counts = AlbumService._media_stats(db, [a.id for a in albums])
        items = []
        for album in albums:
            item = AlbumResponse.model_validate(album)
            item.media_count = counts.get(album.id, 0)
            item.cover_image = album.media[0].media_url if album.media else None
            items.append(item)
        return items

    @staticmethod
    def to_detail(album: Album) -> AlbumDetail:
        detail = AlbumDetail.model_validate(album)
        detail.media_count = len(album.media)
        detail.cover_image = album.media[0].media_url if album.media else None
        return detail

    @staticmethod
    def create_album(
        db: Session, creator: User, event_id: str, data: AlbumCreate
    ) -> Album:
        """
        Create an album under an event.

        Without ``group_ids`` the album starts with a copy of the event's
        groups. An explicit list, empty included, is used as given.
        """
        event = EventService.get_event(db, creator, event_id)

        if data.group_ids is None:
            group_ids = initial_groups_for_album(event)
        else:
            group_ids = data.group_ids
        groups = GroupService.resolve_groups(db, group_ids)

        album = Album(
            name=data.name,
            description=data.description,
            event_id=event.id,
            created_by=creator.id,
        )
        album.groups = groups
        db.add(album)
        db.commit()
        db.refresh(album)

        logger.info(
            f"Album {album.id} created under event {event.id} "
            f"({'inherited' if data.group_ids is None else 'explicit'} groups: "
            f"{sorted(album.group_ids)})"
        )
        return album

    @staticmethod
    def update_album(
        db: Session, viewer: User, album_id: str, data: AlbumUpdate
    ) -> Album:
        album = AlbumService.get_album(db, viewer, album_id)

        if data.name is not None:
            album.name = data.name
        if data.description is not None:
            album.description = data.description
        if data.group_ids is not None:
            album.groups = GroupService.resolve_groups(db, data.group_ids)
            logger.info(f"Album {album.id} groups replaced with {sorted(data.group_ids)}")

        db.commit()
        db.refresh(album)
        return album

    @staticmethod
    def delete_album(db: Session, viewer: User, album_id: str) -> None:
        album = AlbumService.get_album(db, viewer, album_id)
        media_ids = [media.id for media in album.media]

        InteractionService.purge_targets(db, TargetType.ALBUM, [album.id])
        InteractionService.purge_targets(db, TargetType.MEDIA, media_ids)
        db.delete(album)
        db.commit()

        logger.info(f"Album {album_id} deleted with {len(media_ids)} media items")

    @staticmethod
    def add_media(
        db: Session, viewer: User, album_id: str, data: MediaCreate
    ) -> AlbumMedia:
        """Append a media item at the end of the album"""
        album = AlbumService.get_album(db, viewer, album_id)

        next_order = (
            db.query(func.max(AlbumMedia.display_order))
            .filter(AlbumMedia.album_id == album.id)
            .scalar()
        )
        media_type: Optional[MediaType] = data.media_type or detect_media_type(
            data.media_url
        )
        media = AlbumMedia(
            album_id=album.id,
            media_url=data.media_url,
            media_type=media_type.value,
            caption=data.caption,
            display_order=0 if next_order is None else next_order + 1,
        )
        db.add(media)
        db.commit()
        db.refresh(media)
        return media

    @staticmethod
    def remove_media(db: Session, viewer: User, album_id: str, media_id: str) -> None:
        album = AlbumService.get_album(db, viewer, album_id)
        media = (
            db.query(AlbumMedia)
            .filter(AlbumMedia.id == media_id, AlbumMedia.album_id == album.id)
            .first()
        )
        if not media:
            raise HTTPException(status_code=404, detail="Media not found")

        InteractionService.purge_targets(db, TargetType.MEDIA, [media.id])
        db.delete(media)
        db.commit()


# Singleton instance
album_service = AlbumService()
