# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
API tests for the unified event/album feed
"""
import datetime as dt

API = "/api"


def _add_media(client, headers, admin, album_id, count):
    for i in range(count):
        client.post(
            f"{API}/albums/{album_id}/media",
            headers=headers(admin),
            json={"mediaUrl": f"/uploads/{album_id}-{i}.jpg"},
        )


class TestFeed:
    """Test GET /feed"""

    def test_events_latest_date_first_with_visible_albums(
        self, client, headers, admin, make_user, make_group, make_event, make_album, db
    ):
        g1, g2 = make_group(), make_group()
        viewer = make_user(groups=[g1])
        older = make_event(admin, groups=[g1])
        newer = make_event(admin, groups=[g1])
        newer.date = dt.date(2025, 9, 1)
        db.commit()
        make_event(admin, groups=[g2])
        shown = make_album(admin, event=newer, groups=[g1])
        make_album(admin, event=newer, groups=[g2])

        body = client.get(f"{API}/feed", headers=headers(viewer)).json()

        assert [e["id"] for e in body["items"]] == [newer.id, older.id]
        assert body["total"] == 2
        card = body["items"][0]
        assert [a["id"] for a in card["albums"]] == [shown.id]
        assert card["album_count"] == 1

    def test_album_preview_is_capped(self, client, headers, admin, make_event, make_album):
        event = make_event(admin)
        album = make_album(admin, event=event)
        _add_media(client, headers, admin, album.id, 6)

        body = client.get(f"{API}/feed", headers=headers(admin)).json()

        preview = body["items"][0]["albums"][0]
        assert preview["photo_count"] == 6
        assert len(preview["photos"]) == 4
        assert preview["photos"][0]["media_url"] == f"/uploads/{album.id}-0.jpg"

    def test_counts_and_liked_flag_are_per_viewer(
        self, client, headers, admin, make_user, make_group, make_event
    ):
        group = make_group()
        fan = make_user(groups=[group])
        other = make_user(groups=[group])
        event = make_event(admin, groups=[group])
        client.post(f"{API}/events/{event.id}/like", headers=headers(fan))
        client.post(
            f"{API}/events/{event.id}/comments",
            headers=headers(other),
            json={"content": "see you there"},
        )

        fan_card = client.get(f"{API}/feed", headers=headers(fan)).json()["items"][0]
        other_card = client.get(f"{API}/feed", headers=headers(other)).json()["items"][0]

        assert fan_card["likes_count"] == 1
        assert fan_card["comments_count"] == 1
        assert fan_card["liked"] is True
        assert other_card["liked"] is False

    def test_viewer_without_groups_gets_empty_feed(self, client, headers, admin, make_user, make_event):
        make_event(admin)

        body = client.get(f"{API}/feed", headers=headers(make_user())).json()

        assert body["items"] == []
        assert body["total"] == 0

    def test_requires_authentication(self, client):
        assert client.get(f"{API}/feed").status_code == 401


class TestFeedDetails:
    """Test the album listing and single-card endpoints"""

    def test_albums_listed_across_events_by_album_groups(
        self, client, headers, admin, make_user, make_group, make_event, make_album
    ):
        g1, g2 = make_group(), make_group()
        viewer = make_user(groups=[g2])
        event = make_event(admin, groups=[g1])
        shared = make_album(admin, event=event, groups=[g2])
        standalone = make_album(admin, groups=[g2])
        make_album(admin, event=event, groups=[g1])

        body = client.get(f"{API}/feed/albums", headers=headers(viewer)).json()

        assert {a["id"] for a in body["items"]} == {shared.id, standalone.id}
        assert client.get(
            f"{API}/feed/event/{event.id}", headers=headers(viewer)
        ).status_code == 404

    def test_event_card(self, client, headers, admin, make_group, make_user, make_event, make_album):
        group = make_group()
        viewer = make_user(groups=[group])
        event = make_event(admin, groups=[group])
        make_album(admin, event=event, groups=[group])

        card = client.get(f"{API}/feed/event/{event.id}", headers=headers(viewer)).json()

        assert card["id"] == event.id
        assert card["album_count"] == 1
        assert card["creator"]["id"] == admin.id

    def test_album_detail_with_media_stats(
        self, client, headers, admin, make_user, make_group, make_event, make_album
    ):
        g1, g2 = make_group(), make_group()
        viewer = make_user(groups=[g2])
        event = make_event(admin, groups=[g1])
        album = make_album(admin, event=event, groups=[g2])
        _add_media(client, headers, admin, album.id, 2)
        detail = client.get(f"{API}/albums/{album.id}", headers=headers(admin)).json()
        first_media = detail["media"][0]["id"]
        client.post(f"{API}/media/{first_media}/like", headers=headers(viewer))
        client.post(f"{API}/albums/{album.id}/like", headers=headers(viewer))

        body = client.get(f"{API}/feed/album/{album.id}", headers=headers(viewer)).json()

        assert body["liked"] is True
        assert body["likes_count"] == 1
        assert [m["likes_count"] for m in body["media"]] == [1, 0]
        assert [m["liked"] for m in body["media"]] == [True, False]
        # The parent event is not shared with this viewer
        assert body["event"] is None

        body = client.get(f"{API}/feed/album/{album.id}", headers=headers(admin)).json()
        assert body["event"]["id"] == event.id
        assert body["liked"] is False

    def test_invisible_album_is_404(self, client, headers, admin, make_user, make_group, make_album):
        album = make_album(admin, groups=[make_group()])

        response = client.get(f"{API}/feed/album/{album.id}", headers=headers(make_user()))

        assert response.status_code == 404
