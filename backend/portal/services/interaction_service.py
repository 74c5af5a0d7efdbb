# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Likes and comments on posts, events, albums and album media
"""
import logging
from typing import Dict, Iterable, List, Set, Tuple

from fastapi import HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from portal.models.album import Album, AlbumMedia
from portal.models.event import Event
from portal.models.interaction import Comment, Like, TargetType
from portal.models.post import Post
from portal.models.user import User
from portal.schemas.common import PageParams
from portal.schemas.interaction import CommentCreate, CommentUpdate, LikeStatusResponse
from portal.schemas.user import UserBrief
from portal.services.visibility import VisibilityResolver

logger = logging.getLogger(__name__)

# URL segment -> target kind
TARGET_PATHS: Dict[str, TargetType] = {
    "posts": TargetType.POST,
    "events": TargetType.EVENT,
    "albums": TargetType.ALBUM,
    "media": TargetType.MEDIA,
}

_TARGET_MODELS = {
    TargetType.POST: Post,
    TargetType.EVENT: Event,
    TargetType.ALBUM: Album,
    TargetType.MEDIA: AlbumMedia,
}


def parse_target_type(path_segment: str) -> TargetType:
    """Map a URL segment to a target kind, rejecting anything outside the closed set"""
    try:
        return TARGET_PATHS[path_segment]
    except KeyError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid target type: {path_segment}. "
            f"Expected one of {sorted(TARGET_PATHS)}",
        )


class InteractionService:
    """Service for likes and comments"""

    @staticmethod
    def _can_view(db: Session, viewer: User, target_type: TargetType, target) -> bool:
        if target_type == TargetType.POST:
            return VisibilityResolver.can_view_post(db, viewer, target)
        if target_type == TargetType.EVENT:
            return VisibilityResolver.can_view_event(db, viewer, target)
        if target_type == TargetType.ALBUM:
            return VisibilityResolver.can_view_album(db, viewer, target)
        return VisibilityResolver.can_view_album(db, viewer, target.album)

    @staticmethod
    def resolve_target(db: Session, viewer: User, target_type: TargetType, target_id: str):
        """
        Load the entity a like/comment points at.

        Raises:
            HTTPException: 404 when it does not exist or the viewer cannot see it
        """
        model = _TARGET_MODELS[target_type]
        target = db.get(model, target_id)
        if target is None or not InteractionService._can_view(
            db, viewer, target_type, target
        ):
            raise HTTPException(
                status_code=404, detail=f"{target_type.value.capitalize()} not found"
            )
        return target

    # ---- Likes ----

    @staticmethod
    def _like_query(db: Session, target_type: TargetType, target_id: str):
        return db.query(Like).filter(
            Like.target_type == target_type.value, Like.target_id == target_id
        )

    @staticmethod
    def get_likes(
        db: Session, viewer: User, target_type: TargetType, target_id: str
    ) -> LikeStatusResponse:
        InteractionService.resolve_target(db, viewer, target_type, target_id)
        likes = (
            InteractionService._like_query(db, target_type, target_id)
            .options(joinedload(Like.user))
            .order_by(Like.created_at.desc())
            .all()
        )
        return LikeStatusResponse(
            liked=any(like.user_id == viewer.id for like in likes),
            likes_count=len(likes),
            users=[UserBrief.model_validate(like.user) for like in likes],
        )

    @staticmethod
    def add_like(
        db: Session, user: User, target_type: TargetType, target_id: str
    ) -> LikeStatusResponse:
        """Like a target; liking twice leaves a single like"""
        InteractionService.resolve_target(db, user, target_type, target_id)
        existing = (
            InteractionService._like_query(db, target_type, target_id)
            .filter(Like.user_id == user.id)
            .first()
        )
        if not existing:
            db.add(
                Like(target_type=target_type.value, target_id=target_id, user_id=user.id)
            )
            db.commit()
        return InteractionService.get_likes(db, user, target_type, target_id)

    @staticmethod
    def remove_like(
        db: Session, user: User, target_type: TargetType, target_id: str
    ) -> LikeStatusResponse:
        InteractionService.resolve_target(db, user, target_type, target_id)
        InteractionService._like_query(db, target_type, target_id).filter(
            Like.user_id == user.id
        ).delete(synchronize_session=False)
        db.commit()
        return InteractionService.get_likes(db, user, target_type, target_id)

    # ---- Comments ----

    @staticmethod
    def list_comments(
        db: Session,
        viewer: User,
        target_type: TargetType,
        target_id: str,
        params: PageParams,
    ) -> Tuple[List[Comment], int]:
        """Comments on a target, oldest first"""
        InteractionService.resolve_target(db, viewer, target_type, target_id)
        query = db.query(Comment).filter(
            Comment.target_type == target_type.value, Comment.target_id == target_id
        )
        total = query.count()
        items = (
            query.options(joinedload(Comment.author))
            .order_by(Comment.created_at.asc(), Comment.id.asc())
            .offset(params.offset)
            .limit(params.limit)
            .all()
        )
        return items, total

    @staticmethod
    def add_comment(
        db: Session,
        user: User,
        target_type: TargetType,
        target_id: str,
        data: CommentCreate,
    ) -> Comment:
        InteractionService.resolve_target(db, user, target_type, target_id)
        comment = Comment(
            target_type=target_type.value,
            target_id=target_id,
            user_id=user.id,
            content=data.content,
        )
        db.add(comment)
        db.commit()
        db.refresh(comment)
        return comment

    @staticmethod
    def _get_comment(db: Session, comment_id: str) -> Comment:
        comment = db.get(Comment, comment_id)
        if not comment:
            raise HTTPException(status_code=404, detail="Comment not found")
        return comment

    @staticmethod
    def update_comment(
        db: Session, user: User, comment_id: str, data: CommentUpdate
    ) -> Comment:
        """Only the comment's author may edit it"""
        comment = InteractionService._get_comment(db, comment_id)
        if comment.user_id != user.id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You can only edit your own comments",
            )
        comment.content = data.content
        db.commit()
        db.refresh(comment)
        return comment

    @staticmethod
    def delete_comment(db: Session, user: User, comment_id: str) -> None:
        """The author or an admin may delete a comment"""
        comment = InteractionService._get_comment(db, comment_id)
        if comment.user_id != user.id and not VisibilityResolver.is_admin(user):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You can only delete your own comments",
            )
        db.delete(comment)
        db.commit()

    # ---- Aggregates and cleanup ----

    @staticmethod
    def counts(
        db: Session, target_type: TargetType, target_ids: List[str]
    ) -> Tuple[Dict[str, int], Dict[str, int]]:
        """Like and comment counts for many targets in two grouped queries"""
        if not target_ids:
            return {}, {}
        like_rows = (
            db.query(Like.target_id, func.count(Like.id))
            .filter(Like.target_type == target_type.value, Like.target_id.in_(target_ids))
            .group_by(Like.target_id)
            .all()
        )
        comment_rows = (
            db.query(Comment.target_id, func.count(Comment.id))
            .filter(
                Comment.target_type == target_type.value,
                Comment.target_id.in_(target_ids),
            )
            .group_by(Comment.target_id)
            .all()
        )
        return dict(like_rows), dict(comment_rows)

    @staticmethod
    def liked_ids(
        db: Session, user: User, target_type: TargetType, target_ids: List[str]
    ) -> Set[str]:
        """Ids among ``target_ids`` the user has liked"""
        if not target_ids:
            return set()
        rows = (
            db.query(Like.target_id)
            .filter(
                Like.user_id == user.id,
                Like.target_type == target_type.value,
                Like.target_id.in_(target_ids),
            )
            .all()
        )
        return {row.target_id for row in rows}

    @staticmethod
    def purge_targets(
        db: Session, target_type: TargetType, target_ids: Iterable[str]
    ) -> None:
        """
        Delete every like and comment pointing at the given targets.

        Does not commit; callers delete the targets in the same transaction.
        """
        ids = list(target_ids)
        if not ids:
            return
        likes = (
            db.query(Like)
            .filter(Like.target_type == target_type.value, Like.target_id.in_(ids))
            .delete(synchronize_session=False)
        )
        comments = (
            db.query(Comment)
            .filter(Comment.target_type == target_type.value, Comment.target_id.in_(ids))
            .delete(synchronize_session=False)
        )
        if likes or comments:
            logger.info(
                f"Removed {likes} likes and {comments} comments "
                f"from {len(ids)} {target_type.value} targets"
            )


# Singleton instance
interaction_service = InteractionService()
