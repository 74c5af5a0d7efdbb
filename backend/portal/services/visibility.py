# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Group-scoped visibility rules for posts, albums and events
"""
import logging
from typing import AbstractSet, List, Optional, Set

from fastapi import HTTPException, status
from sqlalchemy import exists, or_, select
from sqlalchemy.orm import Query, Session

from portal.models.album import Album, AlbumGroup
from portal.models.event import Event, EventGroup
from portal.models.group import GroupMember
from portal.models.post import Post, PostGroup, PostStatus
from portal.models.user import User

logger = logging.getLogger(__name__)

STATUS_ALL = "all"


def groups_intersect(viewer_groups: AbstractSet[str], item_groups: AbstractSet[str]) -> bool:
    return not viewer_groups.isdisjoint(item_groups)


def post_visible_to(
    *,
    viewer_id: str,
    viewer_is_admin: bool,
    viewer_groups: AbstractSet[str],
    author_id: str,
    post_status: str,
    post_groups: AbstractSet[str],
) -> bool:
    """
    Listing predicate for a single post.

    Admins see everything. Everyone else only sees approved posts that either
    share a group with them or that they wrote.
    """
    if viewer_is_admin:
        return True
    if post_status != PostStatus.APPROVED.value:
        return False
    return author_id == viewer_id or groups_intersect(viewer_groups, post_groups)


class VisibilityResolver:
    """Computes which content a viewer may see"""

    @staticmethod
    def is_admin(viewer: User) -> bool:
        """Single admin check; admins bypass group filtering entirely"""
        return viewer.is_admin

    @staticmethod
    def parse_status_filter(status_param: Optional[str]) -> Optional[List[str]]:
        """
        Parse the ``status`` query parameter.

        Args:
            status_param: None, "all", a single status or a comma separated list

        Returns:
            None for "all", otherwise the list of requested statuses

        Raises:
            HTTPException: If a status is unknown
        """
        if not status_param:
            return [PostStatus.APPROVED.value]
        if status_param == STATUS_ALL:
            return None

        statuses = [s.strip() for s in status_param.split(",") if s.strip()]
        valid = {s.value for s in PostStatus}
        invalid = [s for s in statuses if s not in valid]
        if invalid or not statuses:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid status filter: {status_param}. Expected 'all' or any of {sorted(valid)}",
            )
        return statuses

    @staticmethod
    def viewer_group_ids(db: Session, viewer: User) -> Set[str]:
        rows = (
            db.query(GroupMember.group_id)
            .filter(GroupMember.user_id == viewer.id)
            .all()
        )
        return {row.group_id for row in rows}

    @staticmethod
    def _member_groups(viewer: User):
        return select(GroupMember.group_id).where(GroupMember.user_id == viewer.id)

    @staticmethod
    def _shared_with(viewer: User, join_model, join_fk, item_id_column):
        """EXISTS clause: the item has at least one group the viewer belongs to"""
        return exists().where(
            join_fk == item_id_column,
            join_model.group_id.in_(VisibilityResolver._member_groups(viewer)),
        )

    @staticmethod
    def visible_posts(
        db: Session, viewer: User, statuses: Optional[List[str]] = None
    ) -> Query:
        """
        Posts visible to ``viewer`` ordered newest first.

        Args:
            db: Database session
            viewer: Requesting user
            statuses: Statuses to include (admins only); None means every status

        Returns:
            Query over Post
        """
        query = db.query(Post)

        if VisibilityResolver.is_admin(viewer):
            if statuses is not None:
                query = query.filter(Post.status.in_(statuses))
        else:
            query = query.filter(
                Post.status == PostStatus.APPROVED.value,
                or_(
                    Post.author_id == viewer.id,
                    VisibilityResolver._shared_with(
                        viewer, PostGroup, PostGroup.post_id, Post.id
                    ),
                ),
            )

        return query.order_by(Post.created_at.desc(), Post.id.desc())

    @staticmethod
    def own_posts(
        db: Session, viewer: User, statuses: Optional[List[str]] = None
    ) -> Query:
        """The viewer's own posts in any moderation state"""
        query = db.query(Post).filter(Post.author_id == viewer.id)
        if statuses is not None:
            query = query.filter(Post.status.in_(statuses))
        return query.order_by(Post.created_at.desc(), Post.id.desc())

    @staticmethod
    def visible_events(db: Session, viewer: User) -> Query:
        query = db.query(Event)
        if not VisibilityResolver.is_admin(viewer):
            query = query.filter(
                VisibilityResolver._shared_with(
                    viewer, EventGroup, EventGroup.event_id, Event.id
                )
            )
        return query.order_by(Event.date.desc(), Event.id.desc())

    @staticmethod
    def visible_albums(
        db: Session, viewer: User, event_id: Optional[str] = None
    ) -> Query:
        query = db.query(Album)
        if event_id is not None:
            query = query.filter(Album.event_id == event_id)
        if not VisibilityResolver.is_admin(viewer):
            query = query.filter(
                VisibilityResolver._shared_with(
                    viewer, AlbumGroup, AlbumGroup.album_id, Album.id
                )
            )
        return query.order_by(Album.created_at.desc(), Album.id.desc())

    @staticmethod
    def can_view_post(db: Session, viewer: User, post: Post) -> bool:
        """Detail access: listing predicate, plus authors always see their own posts"""
        if post.author_id == viewer.id:
            return True
        return post_visible_to(
            viewer_id=viewer.id,
            viewer_is_admin=VisibilityResolver.is_admin(viewer),
            viewer_groups=VisibilityResolver.viewer_group_ids(db, viewer),
            author_id=post.author_id,
            post_status=post.status,
            post_groups=post.group_ids,
        )

    @staticmethod
    def can_view_event(db: Session, viewer: User, event: Event) -> bool:
        if VisibilityResolver.is_admin(viewer):
            return True
        return groups_intersect(
            VisibilityResolver.viewer_group_ids(db, viewer), event.group_ids
        )

    @staticmethod
    def can_view_album(db: Session, viewer: User, album: Album) -> bool:
        if VisibilityResolver.is_admin(viewer):
            return True
        return groups_intersect(
            VisibilityResolver.viewer_group_ids(db, viewer), album.group_ids
        )
