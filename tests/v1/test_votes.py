# tests/v1/test_votes.py
"""Tests for vote endpoints."""

from fastapi import status


def test_cast_upvote(client, other_auth_token, test_post) -> None:
    """Test casting an upvote on a post."""
    response = client.post(
        "/api/v1/votes/",
        json={"target_id": test_post.id, "value": 1},
        headers=other_auth_token,
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data == {
        "target_id": test_post.id,
        "target_type": "post",
        "value": 1,
        "score": 1,
        "changed": True,
    }


def test_flip_and_retract(client, other_auth_token, test_post) -> None:
    """Flipping then retracting reports the net score each time."""
    client.post(
        "/api/v1/votes/", json={"target_id": test_post.id, "value": 1}, headers=other_auth_token
    )
    flipped = client.post(
        "/api/v1/votes/", json={"target_id": test_post.id, "value": -1}, headers=other_auth_token
    )
    retracted = client.post(
        "/api/v1/votes/", json={"target_id": test_post.id, "value": 0}, headers=other_auth_token
    )

    assert flipped.json()["score"] == -1
    assert retracted.json()["score"] == 0
    assert retracted.json()["value"] == 0


def test_vote_requires_authentication(client, test_post) -> None:
    """Anonymous callers get 401 and no vote is stored."""
    response = client.post("/api/v1/votes/", json={"target_id": test_post.id, "value": 1})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.headers["WWW-Authenticate"] == "Bearer"

    post = client.get(f"/api/v1/posts/{test_post.id}").json()
    assert post["score"] == 0


def test_vote_with_bad_token(client, test_post) -> None:
    response = client.post(
        "/api/v1/votes/",
        json={"target_id": test_post.id, "value": 1},
        headers={"Authorization": "Bearer not-a-token"},
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_vote_invalid_value(client, other_auth_token, test_post) -> None:
    """Test voting with an out of range value."""
    response = client.post(
        "/api/v1/votes/",
        json={"target_id": test_post.id, "value": 2},
        headers=other_auth_token,
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_vote_nonexistent_post(client, other_auth_token) -> None:
    """Test voting on a non-existent post."""
    response = client.post(
        "/api/v1/votes/",
        json={"target_id": 99999, "value": 1},
        headers=other_auth_token,
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_vote_on_comment(client, auth_token, other_auth_token, test_post) -> None:
    comment = client.post(
        f"/api/v1/posts/{test_post.id}/comments",
        json={"body": "Looks healthy"},
        headers=auth_token,
    ).json()

    response = client.post(
        "/api/v1/votes/",
        json={"target_id": comment["id"], "target_type": "comment", "value": -1},
        headers=other_auth_token,
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["score"] == -1
    post = client.get(f"/api/v1/posts/{test_post.id}").json()
    assert post["score"] == 0
