# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Model registry; importing this package registers every table on Base.metadata
"""
from portal.models.album import Album, AlbumGroup, AlbumMedia, MediaType
from portal.models.event import Event, EventGroup
from portal.models.group import Group, GroupMember, GroupType
from portal.models.interaction import Comment, Like, TargetType
from portal.models.otp import OtpVerification
from portal.models.post import Post, PostGroup, PostStatus
from portal.models.user import Role, RoleName, User, UserRole, UserStatus

__all__ = [
    "Album",
    "AlbumGroup",
    "AlbumMedia",
    "Comment",
    "Event",
    "EventGroup",
    "Group",
    "GroupMember",
    "GroupType",
    "Like",
    "MediaType",
    "OtpVerification",
    "Post",
    "PostGroup",
    "PostStatus",
    "Role",
    "RoleName",
    "TargetType",
    "User",
    "UserRole",
    "UserStatus",
]
