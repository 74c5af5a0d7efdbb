# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Unit tests for group selection and album inheritance
"""
from unittest.mock import MagicMock

from portal.services.selection import (
    GroupSelection,
    clear_all,
    initial_groups_for_album,
    select_all,
)


def _event_with_groups(*ids):
    event = MagicMock()
    event.groups = [MagicMock(id=group_id) for group_id in ids]
    return event


class TestInitialGroupsForAlbum:
    """Test the copy of an event's groups for a new album"""

    def test_copies_event_groups(self):
        assert initial_groups_for_album(_event_with_groups("g1", "g2")) == frozenset(
            {"g1", "g2"}
        )

    def test_event_without_groups(self):
        assert initial_groups_for_album(_event_with_groups()) == frozenset()

    def test_result_is_detached_from_event(self):
        """Later changes to the event's groups do not reach the copy"""
        event = _event_with_groups("g1")
        copied = initial_groups_for_album(event)

        event.groups.append(MagicMock(id="g2"))

        assert copied == frozenset({"g1"})


class TestSelectAll:
    """Test bulk selection helpers"""

    def test_union_with_existing_selection(self):
        assert select_all({"a", "b"}, {"c"}) == frozenset({"a", "b", "c"})

    def test_idempotent(self):
        once = select_all({"a", "b"}, set())
        assert select_all({"a", "b"}, once) == once

    def test_clear_all(self):
        assert clear_all({"a", "b"}) == frozenset()


class TestGroupSelection:
    """Test the immutable per-screen selection value"""

    def test_toggle_adds_then_removes(self):
        selection = GroupSelection()

        added = selection.toggle("g1")
        removed = added.toggle("g1")

        assert "g1" in added
        assert "g1" not in removed
        assert len(selection) == 0

    def test_select_all_then_clear(self):
        selection = GroupSelection.of(["g1"]).select_all(["g2", "g3"])

        assert list(selection) == ["g1", "g2", "g3"]
        assert len(selection.clear()) == 0

    def test_operations_do_not_mutate(self):
        original = GroupSelection.of(["g1"])

        original.toggle("g2")
        original.select_all(["g3"])
        original.clear()

        assert original.ids == frozenset({"g1"})
