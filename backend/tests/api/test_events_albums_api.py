# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
API tests for events, albums and media
"""
API = "/api"


def _group_ids(body):
    return {group["id"] for group in body["groups"]}


class TestAlbumInheritance:
    """Test album group inheritance from the parent event"""

    def test_inherited_groups_are_a_snapshot(self, client, headers, admin, make_group):
        g1, g2, g3 = make_group(), make_group(), make_group()
        event = client.post(
            f"{API}/events",
            headers=headers(admin),
            json={"name": "Reunion", "date": "2025-05-01", "groupIds": [g1.id, g2.id]},
        ).json()

        album = client.post(
            f"{API}/events/{event['id']}/albums",
            headers=headers(admin),
            json={"name": "Photos"},
        ).json()
        assert _group_ids(album) == {g1.id, g2.id}

        # Later event change is not propagated
        response = client.patch(
            f"{API}/events/{event['id']}",
            headers=headers(admin),
            json={"groupIds": [g1.id, g2.id, g3.id]},
        )
        assert _group_ids(response.json()) == {g1.id, g2.id, g3.id}

        album = client.get(f"{API}/albums/{album['id']}", headers=headers(admin)).json()
        assert _group_ids(album) == {g1.id, g2.id}

    def test_explicit_groups_override_inheritance(self, client, headers, admin, make_group):
        g1, g2 = make_group(), make_group()
        event = client.post(
            f"{API}/events",
            headers=headers(admin),
            json={"name": "Fest", "date": "2025-06-01", "groupIds": [g1.id]},
        ).json()

        album = client.post(
            f"{API}/events/{event['id']}/albums",
            headers=headers(admin),
            json={"name": "Stage", "groupIds": [g2.id]},
        ).json()

        assert _group_ids(album) == {g2.id}

    def test_explicit_empty_list_means_no_groups(self, client, headers, admin, make_group):
        g1 = make_group()
        event = client.post(
            f"{API}/events",
            headers=headers(admin),
            json={"name": "Meetup", "date": "2025-07-01", "groupIds": [g1.id]},
        ).json()

        album = client.post(
            f"{API}/events/{event['id']}/albums",
            headers=headers(admin),
            json={"name": "Private", "groupIds": []},
        ).json()

        assert album["groups"] == []


class TestGroupReplacement:
    """Test full-replacement semantics of groupIds on PATCH"""

    def test_album_patch_replaces_groups(self, client, headers, admin, make_group, make_album):
        g1, g2 = make_group(), make_group()
        album = make_album(admin, groups=[g1])

        response = client.patch(
            f"{API}/albums/{album.id}",
            headers=headers(admin),
            json={"groupIds": [g2.id]},
        )

        assert response.status_code == 200
        assert _group_ids(response.json()) == {g2.id}

    def test_unknown_group_keeps_previous_set(self, client, headers, admin, make_group, make_album):
        g1 = make_group()
        album = make_album(admin, groups=[g1])

        response = client.patch(
            f"{API}/albums/{album.id}",
            headers=headers(admin),
            json={"groupIds": ["missing"]},
        )

        assert response.status_code == 404
        album = client.get(f"{API}/albums/{album.id}", headers=headers(admin)).json()
        assert _group_ids(album) == {g1.id}


class TestEventVisibility:
    """Test group-scoped access to events and albums"""

    def test_member_sees_only_shared_events(self, client, headers, admin, make_user, make_group, make_event):
        g1, g2 = make_group(), make_group()
        member = make_user(groups=[g1])
        shown = make_event(admin, groups=[g1])
        hidden = make_event(admin, groups=[g2])

        body = client.get(f"{API}/events", headers=headers(member)).json()

        assert [e["id"] for e in body["items"]] == [shown.id]
        response = client.get(f"{API}/events/{hidden.id}", headers=headers(member))
        assert response.status_code == 404

    def test_event_albums_are_filtered(self, client, headers, admin, make_user, make_group, make_event, make_album):
        g1, g2 = make_group(), make_group()
        member = make_user(groups=[g1])
        event = make_event(admin, groups=[g1])
        shown = make_album(admin, event=event, groups=[g1])
        make_album(admin, event=event, groups=[g2])

        body = client.get(f"{API}/events/{event.id}/albums", headers=headers(member)).json()

        assert [a["id"] for a in body["items"]] == [shown.id]

    def test_album_listed_when_only_the_album_is_shared(
        self, client, headers, admin, make_user, make_group, make_event, make_album
    ):
        g1, g2 = make_group(), make_group()
        viewer = make_user(groups=[g2])
        event = make_event(admin, groups=[g1])
        album = make_album(admin, event=event, groups=[g2])
        make_album(admin, event=event, groups=[g1])

        assert client.get(f"{API}/events/{event.id}", headers=headers(viewer)).status_code == 404
        assert client.get(f"{API}/albums/{album.id}", headers=headers(viewer)).status_code == 200
        body = client.get(f"{API}/events/{event.id}/albums", headers=headers(viewer)).json()

        assert [a["id"] for a in body["items"]] == [album.id]

    def test_albums_of_unknown_event_is_404(self, client, headers, admin):
        response = client.get(f"{API}/events/missing/albums", headers=headers(admin))
        assert response.status_code == 404

    def test_non_admin_cannot_create_event(self, client, headers, make_user):
        response = client.post(
            f"{API}/events",
            headers=headers(make_user()),
            json={"name": "x", "date": "2025-01-01"},
        )
        assert response.status_code == 403

    def test_invalid_time_is_rejected(self, client, headers, admin):
        response = client.post(
            f"{API}/events",
            headers=headers(admin),
            json={"name": "x", "date": "2025-01-01", "startTime": "25:00"},
        )
        assert response.status_code == 422


class TestCascade:
    """Test cascade completeness through the API"""

    def test_deleting_event_removes_album_and_media(self, client, headers, admin, make_event):
        event = make_event(admin)
        album = client.post(
            f"{API}/events/{event.id}/albums",
            headers=headers(admin),
            json={"name": "A"},
        ).json()
        media = client.post(
            f"{API}/albums/{album['id']}/media",
            headers=headers(admin),
            json={"mediaUrl": "/uploads/a.jpg", "caption": "first"},
        )
        assert media.status_code == 201

        response = client.delete(f"{API}/events/{event.id}", headers=headers(admin))
        assert response.status_code == 200

        assert client.get(f"{API}/albums/{album['id']}", headers=headers(admin)).status_code == 404
        response = client.delete(
            f"{API}/albums/{album['id']}/media/{media.json()['id']}",
            headers=headers(admin),
        )
        assert response.status_code == 404

    def test_album_detail_lists_media_in_order(self, client, headers, admin, make_album):
        album = make_album(admin)
        for url in ("/a.jpg", "/b.mp4", "/c.png"):
            client.post(
                f"{API}/albums/{album.id}/media",
                headers=headers(admin),
                json={"mediaUrl": url},
            )

        body = client.get(f"{API}/albums/{album.id}", headers=headers(admin)).json()

        assert [m["media_url"] for m in body["media"]] == ["/a.jpg", "/b.mp4", "/c.png"]
        assert [m["media_type"] for m in body["media"]] == ["image", "video", "image"]
        assert body["media_count"] == 3
        assert body["cover_image"] == "/a.jpg"
