# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Unit tests for group-scoped visibility
"""
import itertools

import pytest
from fastapi import HTTPException

from portal.models.post import PostStatus
from portal.services.visibility import VisibilityResolver, post_visible_to

PENDING = PostStatus.PENDING.value
APPROVED = PostStatus.APPROVED.value
REJECTED = PostStatus.REJECTED.value


class TestPostVisiblePredicate:
    """Test the single-post listing predicate"""

    def test_admin_sees_everything(self):
        assert post_visible_to(
            viewer_id="a",
            viewer_is_admin=True,
            viewer_groups=frozenset(),
            author_id="b",
            post_status=PENDING,
            post_groups=frozenset(),
        )

    def test_shared_group_makes_approved_post_visible(self):
        assert post_visible_to(
            viewer_id="u",
            viewer_is_admin=False,
            viewer_groups=frozenset({"g1", "g2"}),
            author_id="x",
            post_status=APPROVED,
            post_groups=frozenset({"g2"}),
        )

    def test_disjoint_groups_hide_post(self):
        assert not post_visible_to(
            viewer_id="u",
            viewer_is_admin=False,
            viewer_groups=frozenset({"g1"}),
            author_id="x",
            post_status=APPROVED,
            post_groups=frozenset({"g2"}),
        )

    def test_unapproved_post_is_hidden_from_members(self):
        assert not post_visible_to(
            viewer_id="u",
            viewer_is_admin=False,
            viewer_groups=frozenset({"g1"}),
            author_id="x",
            post_status=PENDING,
            post_groups=frozenset({"g1"}),
        )

    def test_author_sees_own_approved_post_without_groups(self):
        assert post_visible_to(
            viewer_id="u",
            viewer_is_admin=False,
            viewer_groups=frozenset(),
            author_id="u",
            post_status=APPROVED,
            post_groups=frozenset(),
        )


class TestParseStatusFilter:
    """Test parsing of the status query parameter"""

    def test_default_is_approved(self):
        assert VisibilityResolver.parse_status_filter(None) == [APPROVED]

    def test_all_means_no_filter(self):
        assert VisibilityResolver.parse_status_filter("all") is None

    def test_comma_list(self):
        assert VisibilityResolver.parse_status_filter("pending, rejected") == [
            PENDING,
            REJECTED,
        ]

    def test_unknown_status_is_rejected(self):
        with pytest.raises(HTTPException) as exc_info:
            VisibilityResolver.parse_status_filter("published")
        assert exc_info.value.status_code == 400


class TestVisiblePostsQuery:
    """Test the listing query against stored data"""

    def test_member_sees_only_shared_approved_posts(self, db, make_user, make_group, make_post):
        author = make_user()
        g1, g2 = make_group(), make_group()
        viewer = make_user(groups=[g1])
        shared = make_post(author, status=APPROVED, groups=[g1])
        make_post(author, status=APPROVED, groups=[g2])
        make_post(author, status=PENDING, groups=[g1])

        visible = VisibilityResolver.visible_posts(db, viewer).all()

        assert [p.id for p in visible] == [shared.id]

    def test_admin_default_filter_is_approved(self, db, admin, make_user, make_post):
        author = make_user()
        approved = make_post(author, status=APPROVED)
        make_post(author, status=PENDING)

        statuses = VisibilityResolver.parse_status_filter(None)
        visible = VisibilityResolver.visible_posts(db, admin, statuses).all()

        assert [p.id for p in visible] == [approved.id]

    def test_admin_all_returns_every_status(self, db, admin, make_user, make_post):
        author = make_user()
        posts = [make_post(author, status=s) for s in (PENDING, APPROVED, REJECTED)]

        visible = VisibilityResolver.visible_posts(db, admin, None).all()

        assert {p.id for p in visible} == {p.id for p in posts}

    def test_newest_first(self, db, make_user, make_group, make_post):
        g1 = make_group()
        viewer = make_user(groups=[g1])
        author = make_user()
        older = make_post(author, status=APPROVED, groups=[g1])
        newer = make_post(author, status=APPROVED, groups=[g1])

        visible = VisibilityResolver.visible_posts(db, viewer).all()

        assert [p.id for p in visible] == [newer.id, older.id]

    def test_own_posts_include_every_status(self, db, make_user, make_post):
        author = make_user()
        posts = [make_post(author, status=s) for s in (PENDING, APPROVED, REJECTED)]
        make_post(make_user())

        own = VisibilityResolver.own_posts(db, author).all()

        assert {p.id for p in own} == {p.id for p in posts}

    def test_query_matches_predicate(self, db, make_user, make_group, make_post):
        """
        Every combination of status, author and group overlap gives the same
        answer from the SQL query as from the in-memory predicate.
        """
        g1, g2 = make_group(), make_group()
        viewer = make_user(groups=[g1])
        other = make_user()
        group_sets = [(), (g1,), (g2,), (g1, g2)]

        posts = []
        for status, author, groups in itertools.product(
            (PENDING, APPROVED, REJECTED), (viewer, other), group_sets
        ):
            posts.append(make_post(author, status=status, groups=groups))

        listed = {p.id for p in VisibilityResolver.visible_posts(db, viewer).all()}
        viewer_groups = VisibilityResolver.viewer_group_ids(db, viewer)
        expected = {
            p.id
            for p in posts
            if post_visible_to(
                viewer_id=viewer.id,
                viewer_is_admin=False,
                viewer_groups=viewer_groups,
                author_id=p.author_id,
                post_status=p.status,
                post_groups=p.group_ids,
            )
        }

        assert listed == expected
        # approved x (viewer-authored: 4 group sets + other: 2 overlapping sets)
        assert len(listed) == 6


class TestSingleItemAccess:
    """Test detail-level checks"""

    def test_author_can_view_own_pending_post(self, db, make_user, make_post):
        author = make_user()
        post = make_post(author, status=PENDING)

        assert VisibilityResolver.can_view_post(db, author, post)

    def test_member_cannot_view_pending_post(self, db, make_user, make_group, make_post):
        g1 = make_group()
        member = make_user(groups=[g1])
        post = make_post(make_user(), status=PENDING, groups=[g1])

        assert not VisibilityResolver.can_view_post(db, member, post)

    def test_album_requires_group_overlap(self, db, admin, make_user, make_group, make_album):
        g1, g2 = make_group(), make_group()
        member = make_user(groups=[g1])
        album = make_album(admin, groups=[g2])

        assert not VisibilityResolver.can_view_album(db, member, album)
        assert VisibilityResolver.can_view_album(db, admin, album)

    def test_visible_events_filters_by_group(self, db, admin, make_user, make_group, make_event):
        g1, g2 = make_group(), make_group()
        member = make_user(groups=[g1])
        shown = make_event(admin, groups=[g1, g2])
        make_event(admin, groups=[g2])
        make_event(admin)

        events = VisibilityResolver.visible_events(db, member).all()

        assert [e.id for e in events] == [shown.id]
        assert len(VisibilityResolver.visible_events(db, admin).all()) == 3

    def test_album_visible_while_its_event_is_not(
        self, db, admin, make_user, make_group, make_event, make_album
    ):
        """Album groups are checked on their own, not through the event"""
        g1, g2 = make_group(), make_group()
        viewer = make_user(groups=[g2])
        event = make_event(admin, groups=[g1])
        album = make_album(admin, event=event, groups=[g2])

        assert not VisibilityResolver.can_view_event(db, viewer, event)
        assert VisibilityResolver.can_view_album(db, viewer, album)
        albums = VisibilityResolver.visible_albums(db, viewer, event_id=event.id).all()
        assert [a.id for a in albums] == [album.id]
        assert [a.id for a in VisibilityResolver.visible_albums(db, viewer).all()] == [
            album.id
        ]
