# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Moderation state machine for posts
"""
import logging
from datetime import datetime
from typing import FrozenSet, List, Optional, Tuple

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from portal.models.post import Post, PostStatus
from portal.models.user import User
from portal.schemas.post import BulkAction, BulkItemResult
from portal.services.group_service import GroupService
from portal.services.visibility import VisibilityResolver

logger = logging.getLogger(__name__)

PENDING = PostStatus.PENDING.value
APPROVED = PostStatus.APPROVED.value
REJECTED = PostStatus.REJECTED.value

DELETED_BY_ADMIN_REASON = "Deleted by admin"

# (from, to) pairs an admin may apply. Same-state pairs are accepted:
# pending->pending is a no-op, approved->approved re-applies groups and
# rejected->rejected replaces the reason.
ALLOWED_TRANSITIONS: FrozenSet[Tuple[str, str]] = frozenset(
    {
        (PENDING, APPROVED),
        (REJECTED, APPROVED),
        (PENDING, REJECTED),
        (APPROVED, PENDING),
        (REJECTED, PENDING),
        (PENDING, PENDING),
        (APPROVED, APPROVED),
        (REJECTED, REJECTED),
    }
)

_BULK_TARGETS = {
    BulkAction.APPROVE: APPROVED,
    BulkAction.REJECT: REJECTED,
    BulkAction.DISAPPROVE: PENDING,
    BulkAction.RESTORE: PENDING,
    BulkAction.DELETE: REJECTED,
}


class ModerationService:
    """Applies moderation transitions to posts"""

    @staticmethod
    def check_transition(current: str, target: str, reason: Optional[str] = None) -> None:
        """
        Validate a transition without touching any state.

        Raises:
            HTTPException: 400 if the pair is not allowed or a rejection has no reason
        """
        if (current, target) not in ALLOWED_TRANSITIONS:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Cannot change post status from {current} to {target}",
            )
        if target == REJECTED and not (reason and reason.strip()):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Rejection reason is required",
            )

    @staticmethod
    def _lock_post(db: Session, post_id: str) -> Post:
        post = db.query(Post).filter(Post.id == post_id).with_for_update().first()
        if not post:
            raise HTTPException(status_code=404, detail="Post not found")
        return post

    @staticmethod
    def transition(
        db: Session,
        actor: User,
        post_id: str,
        target: str,
        reason: Optional[str] = None,
        group_ids: Optional[List[str]] = None,
    ) -> Post:
        """
        Move a post to ``target``.

        Args:
            db: Database session
            actor: Admin performing the change
            post_id: Post ID
            target: Target status
            reason: Rejection reason, required when target is rejected
            group_ids: Group set applied on approval; None keeps the current set

        Returns:
            Updated post

        Raises:
            HTTPException: 403 for non-admins, 404 for unknown post or group,
                400 for invalid transitions. Nothing is written on failure.
        """
        try:
            target = PostStatus(target).value
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid post status: {target}",
            )
        if not VisibilityResolver.is_admin(actor):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Permission denied. Admin access required.",
            )

        post = ModerationService._lock_post(db, post_id)
        current = post.status
        ModerationService.check_transition(current, target, reason)

        if current == PENDING and target == PENDING:
            db.rollback()
            return post

        # Resolve groups before any attribute changes so a bad id leaves the post as-is
        groups = None
        if target == APPROVED and group_ids is not None:
            groups = GroupService.resolve_groups(db, group_ids)

        post.status = target
        post.reviewed_by = actor.id
        post.reviewed_at = datetime.now()

        if target == REJECTED:
            post.rejection_reason = reason.strip()
        else:
            post.rejection_reason = None

        if groups is not None:
            post.groups = groups
            if not groups:
                logger.warning(
                    f"Post {post.id} approved with an empty group set, "
                    "only admins and the author will see it"
                )

        db.commit()
        db.refresh(post)

        logger.info(
            f"Post {post.id} moved {current} -> {target} by {actor.id}"
            + (f" with groups {sorted(post.group_ids)}" if groups is not None else "")
        )
        return post

    @staticmethod
    def approve(
        db: Session, actor: User, post_id: str, group_ids: Optional[List[str]] = None
    ) -> Post:
        return ModerationService.transition(
            db, actor, post_id, APPROVED, group_ids=group_ids
        )

    @staticmethod
    def reject(db: Session, actor: User, post_id: str, reason: Optional[str]) -> Post:
        return ModerationService.transition(db, actor, post_id, REJECTED, reason=reason)

    @staticmethod
    def disapprove(db: Session, actor: User, post_id: str) -> Post:
        """Send an approved post back to pending; its groups are kept"""
        return ModerationService.transition(db, actor, post_id, PENDING)

    @staticmethod
    def restore(db: Session, actor: User, post_id: str) -> Post:
        """Send a rejected post back to pending"""
        return ModerationService.transition(db, actor, post_id, PENDING)

    @staticmethod
    def soft_delete(db: Session, actor: User, post_id: str) -> Post:
        """Moderation-screen delete: a rejection with a fixed reason"""
        return ModerationService.transition(
            db, actor, post_id, REJECTED, reason=DELETED_BY_ADMIN_REASON
        )

    @staticmethod
    def bulk_transition(
        db: Session,
        actor: User,
        post_ids: List[str],
        action: BulkAction,
        reason: Optional[str] = None,
        group_ids: Optional[List[str]] = None,
    ) -> List[BulkItemResult]:
        """
        Apply one action to many posts.

        Each post is handled in its own transaction; a failing item is rolled
        back and reported without affecting the others.
        """
        if not VisibilityResolver.is_admin(actor):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Permission denied. Admin access required.",
            )

        target = _BULK_TARGETS[action]
        if action == BulkAction.DELETE:
            reason = DELETED_BY_ADMIN_REASON

        results = []
        # dict.fromkeys keeps first-seen order while dropping repeats
        for post_id in dict.fromkeys(post_ids):
            try:
                ModerationService.transition(
                    db, actor, post_id, target, reason=reason, group_ids=group_ids
                )
                results.append(BulkItemResult(id=post_id, success=True))
            except HTTPException as e:
                db.rollback()
                results.append(BulkItemResult(id=post_id, success=False, error=e.detail))

        failed = sum(1 for r in results if not r.success)
        logger.info(
            f"Bulk {action.value} by {actor.id}: "
            f"{len(results) - failed} succeeded, {failed} failed"
        )
        return results
