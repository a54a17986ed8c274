# tests/v1/test_channels.py
"""Tests for channel endpoints."""

from fastapi import status


def test_list_channels(client, channel, make_channel) -> None:
    make_channel(slug="photos", name="Photos", sort_order=9)

    response = client.get("/api/v1/channels/")

    assert response.status_code == status.HTTP_200_OK
    assert [item["slug"] for item in response.json()] == ["general", "photos"]


def test_get_channel_by_slug(client, channel) -> None:
    response = client.get("/api/v1/channels/general")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["id"] == channel.id

    assert client.get("/api/v1/channels/unknown").status_code == status.HTTP_404_NOT_FOUND


def test_membership_lifecycle(client, auth_token, channel) -> None:
    joined = client.post(f"/api/v1/channels/{channel.id}/membership", headers=auth_token)
    assert joined.status_code == status.HTTP_201_CREATED
    assert joined.json() == {"status": "joined"}

    again = client.post(f"/api/v1/channels/{channel.id}/membership", headers=auth_token)
    assert again.status_code == status.HTTP_200_OK
    assert again.json() == {"status": "already a member"}

    memberships = client.get("/api/v1/channels/memberships", headers=auth_token)
    assert memberships.json() == [channel.id]

    left = client.delete(f"/api/v1/channels/{channel.id}/membership", headers=auth_token)
    assert left.json() == {"status": "left"}
    left_again = client.delete(f"/api/v1/channels/{channel.id}/membership", headers=auth_token)
    assert left_again.json() == {"status": "not a member"}


def test_membership_requires_auth(client, channel) -> None:
    response = client.post(f"/api/v1/channels/{channel.id}/membership")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_channel_stats(client, auth_token, channel, make_post) -> None:
    make_post("Counted")
    make_post("Not counted", is_draft=True)
    client.post(f"/api/v1/channels/{channel.id}/membership", headers=auth_token)

    stats = client.get("/api/v1/channels/stats").json()

    assert stats == [
        {"channel_id": channel.id, "slug": "general", "post_count": 1, "member_count": 1}
    ]


def test_community_stats(client, channel, make_post, other_user) -> None:
    make_post("Published")
    make_post("Draft", is_draft=True)

    response = client.get("/api/v1/channels/community-stats")

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"total_members": 2, "total_posts": 1, "total_channels": 1}
