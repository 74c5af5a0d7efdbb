# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Unit tests for the post moderation state machine
"""
import pytest
from fastapi import HTTPException

from portal.models.post import PostStatus
from portal.schemas.post import BulkAction
from portal.services.moderation import (
    ALLOWED_TRANSITIONS,
    DELETED_BY_ADMIN_REASON,
    ModerationService,
)

PENDING = PostStatus.PENDING.value
APPROVED = PostStatus.APPROVED.value
REJECTED = PostStatus.REJECTED.value


class TestCheckTransition:
    """Test the transition table without touching the database"""

    @pytest.mark.parametrize("current,target", sorted(ALLOWED_TRANSITIONS))
    def test_allowed_pairs_pass(self, current, target):
        """Every listed pair is accepted (with a reason for rejections)"""
        ModerationService.check_transition(current, target, reason="spam")

    def test_approved_to_rejected_is_invalid(self):
        """An approved post has to be disapproved before it can be rejected"""
        with pytest.raises(HTTPException) as exc_info:
            ModerationService.check_transition(APPROVED, REJECTED, reason="late")
        assert exc_info.value.status_code == 400

    @pytest.mark.parametrize("reason", [None, "", "   "])
    def test_rejection_requires_reason(self, reason):
        with pytest.raises(HTTPException) as exc_info:
            ModerationService.check_transition(PENDING, REJECTED, reason=reason)
        assert exc_info.value.status_code == 400
        assert "reason" in exc_info.value.detail.lower()


class TestTransition:
    """Test transitions applied to stored posts"""

    @pytest.fixture
    def author(self, make_user):
        return make_user(name="author")

    def test_approve_sets_groups_and_reviewer(self, db, admin, author, make_group, make_post):
        """Approval replaces the group set and records reviewer and time"""
        g1, g2 = make_group(), make_group()
        post = make_post(author, groups=[g1])

        post = ModerationService.approve(db, admin, post.id, [g2.id])

        assert post.status == APPROVED
        assert post.group_ids == frozenset({g2.id})
        assert post.reviewed_by == admin.id
        assert post.reviewed_at is not None

    def test_approve_without_group_ids_keeps_groups(self, db, admin, author, make_group, make_post):
        g1 = make_group()
        post = make_post(author, groups=[g1])

        post = ModerationService.approve(db, admin, post.id, None)

        assert post.group_ids == frozenset({g1.id})

    def test_approve_with_empty_list_clears_groups(self, db, admin, author, make_group, make_post, caplog):
        post = make_post(author, groups=[make_group()])

        post = ModerationService.approve(db, admin, post.id, [])

        assert post.status == APPROVED
        assert post.group_ids == frozenset()
        assert "empty group set" in caplog.text

    def test_unknown_target_status_is_400(self, db, admin, author, make_post):
        post = make_post(author)

        with pytest.raises(HTTPException) as exc_info:
            ModerationService.transition(db, admin, post.id, "published")

        assert exc_info.value.status_code == 400
        db.refresh(post)
        assert post.status == PENDING

    def test_approve_with_unknown_group_leaves_post_unchanged(self, db, admin, author, make_group, make_post):
        g1 = make_group()
        post = make_post(author, groups=[g1])

        with pytest.raises(HTTPException) as exc_info:
            ModerationService.approve(db, admin, post.id, [g1.id, "missing"])

        assert exc_info.value.status_code == 404
        db.refresh(post)
        assert post.status == PENDING
        assert post.group_ids == frozenset({g1.id})

    def test_reject_records_reason(self, db, admin, author, make_post):
        post = make_post(author)

        post = ModerationService.reject(db, admin, post.id, "  off topic  ")

        assert post.status == REJECTED
        assert post.rejection_reason == "off topic"

    def test_reject_without_reason_changes_nothing(self, db, admin, author, make_post):
        post = make_post(author)

        with pytest.raises(HTTPException):
            ModerationService.reject(db, admin, post.id, "")

        db.refresh(post)
        assert post.status == PENDING
        assert post.reviewed_by is None

    def test_reject_approved_post_fails(self, db, admin, author, make_post):
        post = make_post(author, status=APPROVED)

        with pytest.raises(HTTPException) as exc_info:
            ModerationService.reject(db, admin, post.id, "spam")

        assert exc_info.value.status_code == 400
        db.refresh(post)
        assert post.status == APPROVED

    def test_disapprove_keeps_groups(self, db, admin, author, make_group, make_post):
        g1 = make_group()
        post = make_post(author, status=APPROVED, groups=[g1])

        post = ModerationService.disapprove(db, admin, post.id)

        assert post.status == PENDING
        assert post.group_ids == frozenset({g1.id})

    def test_disapprove_is_idempotent(self, db, admin, author, make_post):
        post = make_post(author)

        post = ModerationService.disapprove(db, admin, post.id)

        assert post.status == PENDING
        assert post.reviewed_by is None

    def test_restore_clears_rejection_reason(self, db, admin, author, make_post):
        post = make_post(author)
        ModerationService.reject(db, admin, post.id, "typo")

        post = ModerationService.restore(db, admin, post.id)

        assert post.status == PENDING
        assert post.rejection_reason is None

    def test_rejected_post_can_be_approved(self, db, admin, author, make_group, make_post):
        g1 = make_group()
        post = make_post(author, status=REJECTED)

        post = ModerationService.approve(db, admin, post.id, [g1.id])

        assert post.status == APPROVED
        assert post.group_ids == frozenset({g1.id})

    def test_soft_delete_is_rejection_with_fixed_reason(self, db, admin, author, make_post):
        post = make_post(author)

        post = ModerationService.soft_delete(db, admin, post.id)

        assert post.status == REJECTED
        assert post.rejection_reason == DELETED_BY_ADMIN_REASON

    def test_non_admin_is_forbidden(self, db, author, make_user, make_post):
        post = make_post(author)
        other = make_user()

        with pytest.raises(HTTPException) as exc_info:
            ModerationService.approve(db, other, post.id, [])

        assert exc_info.value.status_code == 403
        db.refresh(post)
        assert post.status == PENDING

    def test_unknown_post_is_not_found(self, db, admin):
        with pytest.raises(HTTPException) as exc_info:
            ModerationService.approve(db, admin, "does-not-exist", [])
        assert exc_info.value.status_code == 404


class TestBulkTransition:
    """Test bulk moderation with per-item outcomes"""

    def test_partial_failure_does_not_abort_others(self, db, admin, make_user, make_post):
        author = make_user()
        pending = make_post(author)
        approved = make_post(author, status=APPROVED)

        results = ModerationService.bulk_transition(
            db, admin, [pending.id, approved.id, "missing"], BulkAction.REJECT, reason="spam"
        )

        outcome = {r.id: r for r in results}
        assert outcome[pending.id].success is True
        assert outcome[approved.id].success is False
        assert outcome["missing"].success is False
        assert outcome["missing"].error == "Post not found"

        db.refresh(pending)
        db.refresh(approved)
        assert pending.status == REJECTED
        assert approved.status == APPROVED

    def test_bulk_delete_uses_fixed_reason(self, db, admin, make_user, make_post):
        author = make_user()
        posts = [make_post(author) for _ in range(3)]

        results = ModerationService.bulk_transition(
            db, admin, [p.id for p in posts], BulkAction.DELETE
        )

        assert all(r.success for r in results)
        for post in posts:
            db.refresh(post)
            assert post.status == REJECTED
            assert post.rejection_reason == DELETED_BY_ADMIN_REASON

    def test_duplicate_ids_are_processed_once(self, db, admin, make_user, make_post):
        post = make_post(make_user())

        results = ModerationService.bulk_transition(
            db, admin, [post.id, post.id], BulkAction.APPROVE, group_ids=[]
        )

        assert len(results) == 1

    def test_non_admin_is_forbidden(self, db, make_user, make_post):
        user = make_user()
        post = make_post(user)

        with pytest.raises(HTTPException) as exc_info:
            ModerationService.bulk_transition(db, user, [post.id], BulkAction.APPROVE)
        assert exc_info.value.status_code == 403
