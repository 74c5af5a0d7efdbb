# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Unit tests for portal request schemas
"""
import json

import pytest
from pydantic import ValidationError

from portal.schemas.common import Page, PageParams
from portal.schemas.event import AlbumCreate, EventCreate
from portal.schemas.post import BulkAction, BulkPostStatusUpdate, PostCreate, PostStatusUpdate


class TestPostCreate:
    """Test PostCreate schema"""

    def test_block_list_is_stored_as_json_text(self):
        """Test editor blocks are kept opaque as serialized JSON"""
        blocks = [{"type": "paragraph", "children": [{"text": "hi"}]}]

        post = PostCreate(content=blocks, groupIds=["g1"])

        assert json.loads(post.content) == blocks
        assert post.group_ids == ["g1"]

    def test_plain_text_content_is_kept(self):
        assert PostCreate(content="hello").content == "hello"

    def test_blank_content_is_rejected(self):
        with pytest.raises(ValidationError):
            PostCreate(content="   ")

    def test_missing_content_is_rejected(self):
        with pytest.raises(ValidationError):
            PostCreate(content=None)


class TestModerationRequests:
    """Test status update request schemas"""

    def test_group_ids_absent_means_keep(self):
        """Test omitted groupIds stays None, distinct from an empty list"""
        assert PostStatusUpdate(status="approved").group_ids is None
        assert PostStatusUpdate(status="approved", groupIds=[]).group_ids == []

    def test_unknown_status_is_rejected(self):
        with pytest.raises(ValidationError):
            PostStatusUpdate(status="published")

    def test_bulk_requires_ids(self):
        with pytest.raises(ValidationError):
            BulkPostStatusUpdate(ids=[], action="approve")

    def test_bulk_action_values(self):
        update = BulkPostStatusUpdate(ids=["p1"], action="delete")
        assert update.action == BulkAction.DELETE


class TestEventCreate:
    """Test EventCreate schema"""

    @pytest.mark.parametrize("value", ["09:30", "00:00", "23:59"])
    def test_valid_times(self, value):
        event = EventCreate(name="e", date="2025-01-01", startTime=value)
        assert event.start_time == value

    @pytest.mark.parametrize("value", ["24:00", "9:30", "12:60", "noon"])
    def test_invalid_times(self, value):
        with pytest.raises(ValidationError):
            EventCreate(name="e", date="2025-01-01", endTime=value)

    def test_empty_time_becomes_none(self):
        assert EventCreate(name="e", date="2025-01-01", startTime="").start_time is None

    def test_album_without_group_ids_inherits(self):
        """Test omitted groupIds is None so the event's groups are copied"""
        assert AlbumCreate(name="a").group_ids is None


class TestPage:
    """Test pagination helpers"""

    def test_clamp_bounds(self):
        assert PageParams.clamp(None, None) == PageParams(page=1, limit=20)
        assert PageParams.clamp(0, 0) == PageParams(page=1, limit=1)
        assert PageParams.clamp(3, 1000) == PageParams(page=3, limit=100)

    def test_offset(self):
        assert PageParams(page=3, limit=10).offset == 20

    def test_total_pages(self):
        page = Page[int].build([1, 2], total=45, params=PageParams(page=1, limit=20))
        assert page.total_pages == 3
        assert page.limit == 20
