# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Group selection and inheritance rules shared by the post, album and event flows
"""
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable

from portal.models.event import Event


def initial_groups_for_album(event: Event) -> FrozenSet[str]:
    """
    Group ids a new album under ``event`` starts with.

    The result is a value copy of the event's current groups: later changes to
    either side are not propagated to the other.
    """
    return frozenset(group.id for group in event.groups)


def select_all(candidates: Iterable[str], selected: Iterable[str]) -> FrozenSet[str]:
    """Union every candidate into the selection; applying it twice is a no-op"""
    return frozenset(selected) | frozenset(candidates)


def clear_all(selection: Iterable[str]) -> FrozenSet[str]:
    return frozenset()


@dataclass(frozen=True)
class GroupSelection:
    """
    Immutable selection of ids owned by a single screen or request.

    Every operation returns a new selection, so there is no shared mutable
    selection state between callers.
    """

    ids: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def of(cls, ids: Iterable[str]) -> "GroupSelection":
        return cls(frozenset(ids))

    def toggle(self, item_id: str) -> "GroupSelection":
        if item_id in self.ids:
            return GroupSelection(self.ids - {item_id})
        return GroupSelection(self.ids | {item_id})

    def select_all(self, candidates: Iterable[str]) -> "GroupSelection":
        return GroupSelection(select_all(candidates, self.ids))

    def clear(self) -> "GroupSelection":
        return GroupSelection(clear_all(self.ids))

    def __contains__(self, item_id: str) -> bool:
        return item_id in self.ids

    def __len__(self) -> int:
        return len(self.ids)

    def __iter__(self):
        return iter(sorted(self.ids))
