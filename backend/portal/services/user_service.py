# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
User accounts: self signup, admin management and dashboard statistics
"""
import logging
from typing import List, Optional, Tuple

from fastapi import HTTPException, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from portal.models.album import Album
from portal.models.event import Event
from portal.models.group import Group, GroupMember
from portal.models.interaction import Comment, Like
from portal.models.post import Post, PostStatus
from portal.models.user import Role, RoleName, User, UserStatus
from portal.schemas.common import PageParams
from portal.schemas.user import (
    AdminUserCreate,
    AdminUserUpdate,
    DashboardStats,
    UserSignup,
    UserUpdate,
)
from portal.services.group_service import GroupService

logger = logging.getLogger(__name__)

ROLE_DESCRIPTIONS = {
    RoleName.ADMIN.value: "Portal administrator",
    RoleName.USER.value: "Portal member",
}


class UserService:
    """Service for user accounts"""

    @staticmethod
    def ensure_roles(db: Session) -> None:
        """Create the admin and user roles when missing"""
        existing = {role.name for role in db.query(Role).all()}
        for name, description in ROLE_DESCRIPTIONS.items():
            if name not in existing:
                db.add(Role(name=name, description=description))
        db.commit()

    @staticmethod
    def _get_role(db: Session, role_name: str) -> Role:
        role = db.query(Role).filter(Role.name == role_name).first()
        if not role:
            UserService.ensure_roles(db)
            role = db.query(Role).filter(Role.name == role_name).first()
        return role

    @staticmethod
    def get_user(db: Session, user_id: str) -> User:
        user = db.get(User, user_id)
        if not user:
            raise HTTPException(status_code=404, detail="User not found")
        return user

    @staticmethod
    def get_by_mobile(db: Session, mobile_number: str) -> Optional[User]:
        return db.query(User).filter(User.mobile_number == mobile_number).first()

    @staticmethod
    def _check_mobile_free(db: Session, mobile_number: str) -> None:
        if UserService.get_by_mobile(db, mobile_number):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="User with this mobile number already exists",
            )

    @staticmethod
    def signup(db: Session, data: UserSignup) -> User:
        """Self registration; the account waits for admin approval"""
        UserService._check_mobile_free(db, data.mobile_number)

        user = User(
            name=data.name,
            mobile_number=data.mobile_number,
            email=data.email,
            status=UserStatus.PENDING.value,
        )
        user.roles = [UserService._get_role(db, RoleName.USER.value)]
        db.add(user)
        db.commit()
        db.refresh(user)

        logger.info(f"User {user.id} signed up, pending approval")
        return user

    @staticmethod
    def create_user(db: Session, admin: User, data: AdminUserCreate) -> User:
        """Admin-created account, approved immediately and optionally placed in groups"""
        UserService._check_mobile_free(db, data.mobile_number)
        groups = GroupService.resolve_groups(db, data.group_ids)

        user = User(
            name=data.name,
            mobile_number=data.mobile_number,
            email=data.email,
            status=UserStatus.APPROVED.value,
            created_by_admin=True,
        )
        user.roles = [UserService._get_role(db, data.role.value)]
        user.memberships = [GroupMember(group_id=group.id) for group in groups]
        db.add(user)
        db.commit()
        db.refresh(user)

        logger.info(
            f"User {user.id} created by admin {admin.id} in {len(groups)} groups"
        )
        return user

    @staticmethod
    def update_me(db: Session, user: User, data: UserUpdate) -> User:
        if data.name:
            user.name = data.name
        if data.email:
            user.email = data.email
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def update_user(db: Session, user_id: str, data: AdminUserUpdate) -> User:
        user = UserService.get_user(db, user_id)

        if data.name:
            user.name = data.name
        if data.email is not None:
            user.email = data.email or None
        if data.mobile_number and data.mobile_number != user.mobile_number:
            UserService._check_mobile_free(db, data.mobile_number)
            user.mobile_number = data.mobile_number
        if data.role is not None:
            user.roles = [UserService._get_role(db, data.role.value)]

        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def update_status(
        db: Session, admin: User, user_id: str, new_status: UserStatus
    ) -> User:
        user = UserService.get_user(db, user_id)
        if user.id == admin.id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="You cannot change your own account status",
            )
        previous = user.status
        user.status = new_status.value
        db.commit()
        db.refresh(user)

        logger.info(f"User {user.id} status {previous} -> {user.status} by {admin.id}")
        return user

    @staticmethod
    def delete_user(db: Session, admin: User, user_id: str) -> None:
        """
        Delete a user account.

        Refused while the user still authors posts, events or albums. Their
        memberships, likes and comments are removed; groups they created and
        posts they reviewed keep existing without the reference.
        """
        user = UserService.get_user(db, user_id)
        if user.id == admin.id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="You cannot delete your own account",
            )

        authored = (
            db.query(Post).filter(Post.author_id == user.id).count()
            + db.query(Event).filter(Event.created_by == user.id).count()
            + db.query(Album).filter(Album.created_by == user.id).count()
        )
        if authored:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Cannot delete: user still authors {authored} posts, events or albums",
            )

        db.query(Group).filter(Group.created_by == user.id).update(
            {Group.created_by: None}, synchronize_session=False
        )
        db.query(Post).filter(Post.reviewed_by == user.id).update(
            {Post.reviewed_by: None}, synchronize_session=False
        )
        db.query(Like).filter(Like.user_id == user.id).delete(synchronize_session=False)
        db.query(Comment).filter(Comment.user_id == user.id).delete(
            synchronize_session=False
        )
        db.delete(user)
        db.commit()

        logger.info(f"User {user_id} deleted by {admin.id}")

    @staticmethod
    def list_users(
        db: Session,
        params: PageParams,
        status_param: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Tuple[List[User], int]:
        """
        Page through users for the admin screens.

        Args:
            status_param: None or "all" for every status, a status or a comma list
            search: Matched against name, mobile number and email
        """
        query = db.query(User)

        if status_param and status_param != "all":
            statuses = [s.strip() for s in status_param.split(",") if s.strip()]
            valid = {s.value for s in UserStatus}
            if not statuses or any(s not in valid for s in statuses):
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"Invalid status filter: {status_param}",
                )
            query = query.filter(User.status.in_(statuses))

        if search and search.strip():
            pattern = f"%{search.strip()}%"
            query = query.filter(
                or_(
                    User.name.ilike(pattern),
                    User.mobile_number.ilike(pattern),
                    User.email.ilike(pattern),
                )
            )

        total = query.count()
        items = (
            query.order_by(User.created_at.desc(), User.id.desc())
            .offset(params.offset)
            .limit(params.limit)
            .all()
        )
        return items, total

    @staticmethod
    def get_stats(db: Session) -> DashboardStats:
        return DashboardStats(
            total_users=db.query(User).count(),
            pending_users=db.query(User)
            .filter(User.status == UserStatus.PENDING.value)
            .count(),
            total_groups=db.query(Group).count(),
            total_events=db.query(Event).count(),
            pending_posts=db.query(Post)
            .filter(Post.status == PostStatus.PENDING.value)
            .count(),
            approved_posts=db.query(Post)
            .filter(Post.status == PostStatus.APPROVED.value)
            .count(),
        )


# Singleton instance
user_service = UserService()
