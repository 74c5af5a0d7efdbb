# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Post submission, listing and removal
"""
import logging
from typing import List, Optional, Tuple

from fastapi import HTTPException, status
from sqlalchemy.orm import Session, joinedload

from portal.models.interaction import TargetType
from portal.models.post import Post, PostStatus
from portal.models.user import User
from portal.schemas.common import PageParams
from portal.schemas.post import (
    BulkPostStatusUpdate,
    BulkResultResponse,
    PostCreate,
    PostResponse,
    PostStatusUpdate,
)
from portal.services.group_service import GroupService
from portal.services.interaction_service import InteractionService
from portal.services.moderation import ModerationService
from portal.services.visibility import STATUS_ALL, VisibilityResolver

logger = logging.getLogger(__name__)


class PostService:
    """Service for posts"""

    @staticmethod
    def create_post(db: Session, author: User, data: PostCreate) -> Post:
        """
        Submit a post. It always starts pending, whoever the author is.

        The requested groups are stored with the post but only take effect
        once an admin approves it.
        """
        groups = GroupService.resolve_groups(db, data.group_ids)
        post = Post(
            title=data.title,
            content=data.content,
            author_id=author.id,
            status=PostStatus.PENDING.value,
        )
        post.groups = groups
        db.add(post)
        db.commit()
        db.refresh(post)

        logger.info(f"Post {post.id} submitted by {author.id}")
        return post

    @staticmethod
    def get_post(db: Session, viewer: User, post_id: str) -> Post:
        """Get a post the viewer may see; anything else is reported as not found"""
        post = db.get(Post, post_id)
        if not post or not VisibilityResolver.can_view_post(db, viewer, post):
            raise HTTPException(status_code=404, detail="Post not found")
        return post

    @staticmethod
    def list_posts(
        db: Session,
        viewer: User,
        params: PageParams,
        mine: bool = False,
        status_param: Optional[str] = None,
    ) -> Tuple[List[Post], int]:
        """
        List posts for the viewer.

        Args:
            db: Database session
            viewer: Requesting user
            params: Page parameters
            mine: Only the viewer's own posts, any status unless filtered
            status_param: None, "all", a status or a comma separated list

        Returns:
            Tuple of (posts, total)
        """
        if mine:
            statuses = (
                None
                if status_param in (None, "", STATUS_ALL)
                else VisibilityResolver.parse_status_filter(status_param)
            )
            query = VisibilityResolver.own_posts(db, viewer, statuses)
        else:
            statuses = VisibilityResolver.parse_status_filter(status_param)
            if VisibilityResolver.is_admin(viewer) or statuses == [
                PostStatus.APPROVED.value
            ]:
                query = VisibilityResolver.visible_posts(db, viewer, statuses)
            else:
                # Non-admins only ever see unapproved posts they wrote
                query = VisibilityResolver.own_posts(db, viewer, statuses)

        total = query.count()
        items = (
            query.options(joinedload(Post.author))
            .offset(params.offset)
            .limit(params.limit)
            .all()
        )
        return items, total

    @staticmethod
    def to_responses(db: Session, posts: List[Post]) -> List[PostResponse]:
        likes, comments = InteractionService.counts(
            db, TargetType.POST, [post.id for post in posts]
        )
        items = []
        for post in posts:
            item = PostResponse.model_validate(post)
            item.likes_count = likes.get(post.id, 0)
            item.comments_count = comments.get(post.id, 0)
            items.append(item)
        return items

    @staticmethod
    def update_status(
        db: Session, actor: User, post_id: str, data: PostStatusUpdate
    ) -> Post:
        return ModerationService.transition(
            db,
            actor,
            post_id,
            data.status.value,
            reason=data.reason,
            group_ids=data.group_ids,
        )

    @staticmethod
    def bulk_update_status(
        db: Session, actor: User, data: BulkPostStatusUpdate
    ) -> BulkResultResponse:
        results = ModerationService.bulk_transition(
            db,
            actor,
            data.ids,
            data.action,
            reason=data.reason,
            group_ids=data.group_ids,
        )
        succeeded = sum(1 for r in results if r.success)
        return BulkResultResponse(
            succeeded=succeeded, failed=len(results) - succeeded, results=results
        )

    @staticmethod
    def delete_post(db: Session, actor: User, post_id: str) -> None:
        """
        Permanently delete a post with its group links, likes and comments.

        Allowed for admins and for the post's author.
        """
        post = PostService.get_post(db, actor, post_id)
        if post.author_id != actor.id and not VisibilityResolver.is_admin(actor):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You can only delete your own posts",
            )

        InteractionService.purge_targets(db, TargetType.POST, [post.id])
        db.delete(post)
        db.commit()

        logger.info(f"Post {post_id} deleted by {actor.id}")


# Singleton instance
post_service = PostService()
