# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from fastapi import APIRouter

from portal.api.endpoints import (
    admin,
    albums,
    auth,
    events,
    feed,
    groups,
    interactions,
    posts,
    users,
)

api_router = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
api_router.include_router(groups.router, prefix="/groups", tags=["groups"])
api_router.include_router(posts.router, prefix="/posts", tags=["posts"])
api_router.include_router(events.router, prefix="/events", tags=["events"])
api_router.include_router(albums.router, prefix="/albums", tags=["albums"])
api_router.include_router(feed.router, prefix="/feed", tags=["feed"])
# Mounted last: its /{target}/{id}/... paths span the content prefixes above
api_router.include_router(interactions.router, tags=["interactions"])
