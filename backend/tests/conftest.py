# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Shared fixtures: an in-memory database per test, an API client bound to it
and small factories for users, groups and content.
"""
import datetime as dt
import itertools

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from portal.api.dependencies import get_db
from portal.core.security import create_user_token
from portal.db.base import Base
from portal.db.session import build_engine
from portal.main import app
from portal.models.album import Album
from portal.models.event import Event
from portal.models.group import Group, GroupMember
from portal.models.post import Post, PostStatus
from portal.models.user import Role, RoleName, User, UserStatus
from portal.services.user_service import UserService

import portal.models  # noqa: F401

_counter = itertools.count(1)


@pytest.fixture
def engine():
    """SQLite in-memory engine shared by every connection of one test"""
    engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    UserService.ensure_roles(session)
    yield session
    session.close()


@pytest.fixture
def client(db):
    """TestClient whose requests use the test session"""

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    def _make_user(name=None, admin=False, status=UserStatus.APPROVED.value, groups=()):
        n = next(_counter)
        role_name = RoleName.ADMIN.value if admin else RoleName.USER.value
        user = User(
            name=name or f"user{n}",
            mobile_number=f"90000{n:05d}",
            status=status,
        )
        user.roles = [db.query(Role).filter(Role.name == role_name).one()]
        user.memberships = [GroupMember(group_id=g.id) for g in groups]
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_group(db):
    def _make_group(name=None, members=()):
        group = Group(name=name or f"group{next(_counter)}")
        db.add(group)
        db.flush()
        for user in members:
            db.add(GroupMember(group_id=group.id, user_id=user.id))
        db.commit()
        db.refresh(group)
        return group

    return _make_group


@pytest.fixture
def make_post(db):
    def _make_post(author, status=PostStatus.PENDING.value, groups=(), title=None):
        n = next(_counter)
        post = Post(
            title=title or f"post{n}",
            content='[{"type": "paragraph", "data": {"text": "hello"}}]',
            author_id=author.id,
            status=status,
            # Distinct timestamps keep newest-first ordering deterministic
            created_at=dt.datetime(2025, 1, 1) + dt.timedelta(minutes=n),
        )
        post.groups = list(groups)
        db.add(post)
        db.commit()
        db.refresh(post)
        return post

    return _make_post


@pytest.fixture
def make_event(db):
    def _make_event(creator, groups=(), name=None):
        event = Event(
            name=name or f"event{next(_counter)}",
            date=dt.date(2025, 3, 1),
            created_by=creator.id,
        )
        event.groups = list(groups)
        db.add(event)
        db.commit()
        db.refresh(event)
        return event

    return _make_event


@pytest.fixture
def make_album(db):
    def _make_album(creator, event=None, groups=()):
        album = Album(
            name=f"album{next(_counter)}",
            event_id=event.id if event else None,
            created_by=creator.id,
        )
        album.groups = list(groups)
        db.add(album)
        db.commit()
        db.refresh(album)
        return album

    return _make_album


@pytest.fixture
def admin(make_user):
    return make_user(name="admin", admin=True)


def auth_headers(user):
    return {"Authorization": f"Bearer {create_user_token(user)}"}


@pytest.fixture
def headers():
    return auth_headers
