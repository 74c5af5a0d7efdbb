# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Service layer for GroupType, Group and GroupMember management
"""
import logging
from typing import Dict, Iterable, List, Optional, Tuple

from fastapi import HTTPException, status
from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload

from portal.models.album import AlbumGroup
from portal.models.event import EventGroup
from portal.models.group import Group, GroupMember, GroupType
from portal.models.post import PostGroup
from portal.models.user import User, UserStatus
from portal.schemas.common import PageParams
from portal.schemas.group import (
    GroupCreate,
    GroupResponse,
    GroupTypeCreate,
    GroupTypeUpdate,
    GroupUpdate,
)
from portal.services.selection import select_all
from portal.services.visibility import VisibilityResolver

logger = logging.getLogger(__name__)


class GroupService:
    """Service for managing groups, group types and memberships"""

    # ---- Group types ----

    @staticmethod
    def list_group_types(db: Session) -> List[GroupType]:
        return db.query(GroupType).order_by(GroupType.label.asc()).all()

    @staticmethod
    def get_group_type(db: Session, group_type_id: str) -> GroupType:
        group_type = db.get(GroupType, group_type_id)
        if not group_type:
            raise HTTPException(status_code=404, detail="Group type not found")
        return group_type

    @staticmethod
    def create_group_type(db: Session, data: GroupTypeCreate) -> GroupType:
        existing = db.query(GroupType).filter(GroupType.label == data.label).first()
        if existing:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Group type label already exists",
            )

        group_type = GroupType(label=data.label, description=data.description)
        db.add(group_type)
        db.commit()
        db.refresh(group_type)
        return group_type

    @staticmethod
    def update_group_type(
        db: Session, group_type_id: str, data: GroupTypeUpdate
    ) -> GroupType:
        group_type = GroupService.get_group_type(db, group_type_id)

        if data.label is not None and data.label != group_type.label:
            clash = db.query(GroupType).filter(GroupType.label == data.label).first()
            if clash:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail="Group type label already exists",
                )
            group_type.label = data.label
        if data.description is not None:
            group_type.description = data.description

        db.commit()
        db.refresh(group_type)
        return group_type

    @staticmethod
    def delete_group_type(db: Session, group_type_id: str) -> None:
        """Delete a group type; refused while any group still uses it"""
        group_type = GroupService.get_group_type(db, group_type_id)

        in_use = db.query(Group).filter(Group.group_type_id == group_type_id).count()
        if in_use:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Cannot delete: {in_use} groups are using this type",
            )

        db.delete(group_type)
        db.commit()

    # ---- Groups ----

    @staticmethod
    def get_group(db: Session, group_id: str) -> Group:
        group = db.get(Group, group_id)
        if not group:
            raise HTTPException(status_code=404, detail="Group not found")
        return group

    @staticmethod
    def resolve_groups(db: Session, group_ids: Iterable[str]) -> List[Group]:
        """
        Load the groups for a set of ids.

        Duplicated ids collapse into one entry. Every id must exist, otherwise
        nothing is returned and a not-found error is raised, so callers can
        validate a whole assignment before touching any row.
        """
        wanted = set(group_ids)
        if not wanted:
            return []

        groups = db.query(Group).filter(Group.id.in_(wanted)).all()
        missing = wanted - {group.id for group in groups}
        if missing:
            raise HTTPException(
                status_code=404,
                detail=f"Group not found: {', '.join(sorted(missing))}",
            )
        return sorted(groups, key=lambda g: g.name)

    @staticmethod
    def create_group(db: Session, data: GroupCreate, creator: User) -> Group:
        """Create a new group"""
        existing = db.query(Group).filter(Group.name == data.name).first()
        if existing:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT, detail="Group name already exists"
            )
        if data.group_type_id:
            GroupService.get_group_type(db, data.group_type_id)

        group = Group(
            name=data.name,
            description=data.description,
            group_type_id=data.group_type_id,
            created_by=creator.id,
        )
        db.add(group)
        db.commit()
        db.refresh(group)

        logger.info(f"Group {group.id} ({group.name}) created by {creator.id}")
        return group

    @staticmethod
    def update_group(db: Session, group_id: str, data: GroupUpdate) -> Group:
        group = GroupService.get_group(db, group_id)

        if data.name is not None and data.name != group.name:
            clash = db.query(Group).filter(Group.name == data.name).first()
            if clash:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail="Group name already exists",
                )
            group.name = data.name
        if data.description is not None:
            group.description = data.description
        if data.group_type_id is not None:
            GroupService.get_group_type(db, data.group_type_id)
            group.group_type_id = data.group_type_id

        db.commit()
        db.refresh(group)
        return group

    @staticmethod
    def delete_group(db: Session, group_id: str) -> None:
        """
        Delete a group.

        Memberships and the group's associations to posts, albums and events
        are removed with it; the content itself is kept and simply loses this
        group from its set.
        """
        group = GroupService.get_group(db, group_id)

        removed_posts = (
            db.query(PostGroup)
            .filter(PostGroup.group_id == group_id)
            .delete(synchronize_session=False)
        )
        removed_albums = (
            db.query(AlbumGroup)
            .filter(AlbumGroup.group_id == group_id)
            .delete(synchronize_session=False)
        )
        removed_events = (
            db.query(EventGroup)
            .filter(EventGroup.group_id == group_id)
            .delete(synchronize_session=False)
        )
        db.delete(group)
        db.commit()

        logger.info(
            f"Group {group_id} deleted: detached from {removed_posts} posts, "
            f"{removed_albums} albums, {removed_events} events"
        )

    @staticmethod
    def _member_counts(db: Session, group_ids: List[str]) -> Dict[str, int]:
        if not group_ids:
            return {}
        rows = (
            db.query(GroupMember.group_id, func.count(GroupMember.id))
            .filter(GroupMember.group_id.in_(group_ids))
            .group_by(GroupMember.group_id)
            .all()
        )
        return {group_id: count for group_id, count in rows}

    @staticmethod
    def to_responses(db: Session, groups: List[Group]) -> List[GroupResponse]:
        counts = GroupService._member_counts(db, [g.id for g in groups])
        items = []
        for group in groups:
            item = GroupResponse.model_validate(group)
            item.member_count = counts.get(group.id, 0)
            items.append(item)
        return items

    @staticmethod
    def _group_query(db: Session, viewer: User, search: Optional[str]):
        query = db.query(Group).options(joinedload(Group.group_type))
        if not VisibilityResolver.is_admin(viewer):
            query = query.join(GroupMember, GroupMember.group_id == Group.id).filter(
                GroupMember.user_id == viewer.id
            )
        if search and search.strip():
            query = query.filter(Group.name.ilike(f"%{search.strip()}%"))
        return query.order_by(Group.name.asc(), Group.id.asc())

    @staticmethod
    def list_groups(
        db: Session, viewer: User, params: PageParams, search: Optional[str] = None
    ) -> Tuple[List[Group], int]:
        """One page of groups: every group for admins, own groups otherwise"""
        query = GroupService._group_query(db, viewer, search)
        total = query.count()
        items = query.offset(params.offset).limit(params.limit).all()
        return items, total

    @staticmethod
    def list_all_groups(
        db: Session, viewer: User, search: Optional[str] = None
    ) -> List[Group]:
        """Complete filtered result set, used by "Add All" controls"""
        return GroupService._group_query(db, viewer, search).all()

    @staticmethod
    def get_user_groups(db: Session, user_id: str) -> List[Group]:
        if not db.get(User, user_id):
            raise HTTPException(status_code=404, detail="User not found")
        return (
            db.query(Group)
            .join(GroupMember, GroupMember.group_id == Group.id)
            .filter(GroupMember.user_id == user_id)
            .order_by(Group.name.asc())
            .all()
        )

    # ---- Members ----

    @staticmethod
    def get_group_members(
        db: Session, group_id: str, search: Optional[str] = None
    ) -> List[User]:
        """Get all members of a group"""
        GroupService.get_group(db, group_id)
        query = (
            db.query(User)
            .join(GroupMember, GroupMember.user_id == User.id)
            .filter(GroupMember.group_id == group_id)
        )
        if search and search.strip():
            pattern = f"%{search.strip()}%"
            query = query.filter(
                or_(User.name.ilike(pattern), User.mobile_number.ilike(pattern))
            )
        return query.order_by(User.name.asc(), User.id.asc()).all()

    @staticmethod
    def _member_ids(db: Session, group_id: str) -> set:
        rows = (
            db.query(GroupMember.user_id).filter(GroupMember.group_id == group_id).all()
        )
        return {row.user_id for row in rows}

    @staticmethod
    def _insert_members(db: Session, group_id: str, user_ids: Iterable[str]) -> int:
        added = 0
        for user_id in sorted(user_ids):
            db.add(GroupMember(group_id=group_id, user_id=user_id))
            added += 1
        try:
            db.commit()
        except Exception:
            db.rollback()
            raise
        return added

    @staticmethod
    def add_members(db: Session, group_id: str, user_ids: List[str]) -> Tuple[int, int]:
        """
        Add users to a group.

        All ids are validated before anything is written, and the new rows are
        committed together, so either every user ends up a member or none of
        the rows are added. Existing members are skipped, which makes a retry
        of the same call harmless.

        Returns:
            Tuple of (added, total_members)
        """
        GroupService.get_group(db, group_id)
        if not user_ids:
            raise HTTPException(status_code=400, detail="User IDs array is required")

        wanted = set(user_ids)
        found = {row.id for row in db.query(User.id).filter(User.id.in_(wanted)).all()}
        missing = wanted - found
        if missing:
            raise HTTPException(
                status_code=404,
                detail=f"User not found: {', '.join(sorted(missing))}",
            )

        existing = GroupService._member_ids(db, group_id)
        added = GroupService._insert_members(db, group_id, wanted - existing)

        logger.info(f"Added {added} members to group {group_id}")
        return added, len(existing) + added

    @staticmethod
    def add_all_members(
        db: Session, group_id: str, search: Optional[str] = None
    ) -> Tuple[int, int]:
        """
        Add every approved user matching ``search`` to the group.

        Works on the complete filtered user set rather than on one page of it.
        """
        GroupService.get_group(db, group_id)

        query = db.query(User.id).filter(User.status == UserStatus.APPROVED.value)
        if search and search.strip():
            pattern = f"%{search.strip()}%"
            query = query.filter(
                or_(User.name.ilike(pattern), User.mobile_number.ilike(pattern))
            )
        candidates = {row.id for row in query.all()}

        existing = GroupService._member_ids(db, group_id)
        selection = select_all(candidates, existing)
        added = GroupService._insert_members(db, group_id, selection - existing)

        logger.info(f"Added {added} members to group {group_id} via add-all")
        return added, len(selection)

    @staticmethod
    def remove_member(db: Session, group_id: str, user_id: str) -> None:
        """Remove a member from a group"""
        GroupService.get_group(db, group_id)
        member = (
            db.query(GroupMember)
            .filter(GroupMember.group_id == group_id, GroupMember.user_id == user_id)
            .first()
        )
        if not member:
            raise HTTPException(
                status_code=404, detail="User is not a member of this group"
            )

        db.delete(member)
        db.commit()


# Singleton instance
group_service = GroupService()
