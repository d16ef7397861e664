"""Integration tests for comments and replies."""

from __future__ import annotations

from typing import Any

import pytest


@pytest.fixture()
def post(client, alice_headers) -> dict[str, Any]:
    resp = client.post(
        "/api/v1/posts",
        json={"title": "Commentable", "content": "Say something.", "published": True},
        headers=alice_headers,
    )
    return resp.get_json()["data"]


def comment(client: Any, post_id: int, headers: dict[str, str], content: str = "Nice post", **extra: Any):
    return client.post(f"/api/v1/posts/{post_id}/comments", json={"content": content, **extra}, headers=headers)


def test_create_and_list_comments(client, post, bob_headers) -> None:
    resp = comment(client, post["id"], bob_headers)

    assert resp.status_code == 201
    created = resp.get_json()["data"]
    assert created["author"]["username"] == "bob"
    assert created["replies"] == []

    body = client.get(f"/api/v1/posts/{post['id']}/comments").get_json()
    assert [c["content"] for c in body["data"]] == ["Nice post"]
    assert body["meta"]["total"] == 1


def test_comment_requires_auth_and_content(client, post, bob_headers) -> None:
    assert client.post(f"/api/v1/posts/{post['id']}/comments", json={"content": "hi"}).status_code == 401
    assert comment(client, post["id"], bob_headers, content="").status_code == 400


def test_comment_on_missing_post(client, bob_headers) -> None:
    assert comment(client, 999, bob_headers).status_code == 404
    assert client.get("/api/v1/posts/999/comments").status_code == 404


def test_replies_are_nested_one_level(client, post, alice_headers, bob_headers) -> None:
    top = comment(client, post["id"], bob_headers, content="top").get_json()["data"]
    reply = comment(client, post["id"], alice_headers, content="reply", parent_id=top["id"]).get_json()["data"]
    deeper = comment(client, post["id"], bob_headers, content="deeper", parent_id=reply["id"]).get_json()["data"]

    assert reply["parent_id"] == top["id"]
    # a reply to a reply joins the top-level thread
    assert deeper["parent_id"] == top["id"]

    body = client.get(f"/api/v1/posts/{post['id']}/comments").get_json()
    assert len(body["data"]) == 1
    assert [r["content"] for r in body["data"][0]["replies"]] == ["reply", "deeper"]
    assert body["meta"]["total"] == 3


def test_reply_parent_must_belong_to_post(client, post, alice_headers, bob_headers) -> None:
    other = client.post(
        "/api/v1/posts",
        json={"title": "Other", "content": "Elsewhere.", "published": True},
        headers=alice_headers,
    ).get_json()["data"]
    foreign = comment(client, other["id"], bob_headers).get_json()["data"]

    resp = comment(client, post["id"], bob_headers, parent_id=foreign["id"])

    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Parent comment not found on this post"


def test_update_comment_owner_only(client, post, alice_headers, bob_headers) -> None:
    created = comment(client, post["id"], bob_headers).get_json()["data"]
    url = f"/api/v1/comments/{created['id']}"

    assert client.put(url, json={"content": "hijack"}, headers=alice_headers).status_code == 403
    resp = client.put(url, json={"content": "Edited"}, headers=bob_headers)

    assert resp.status_code == 200
    assert resp.get_json()["data"]["content"] == "Edited"


def test_delete_comment_removes_replies(client, post, alice_headers, bob_headers) -> None:
    top = comment(client, post["id"], bob_headers, content="top").get_json()["data"]
    comment(client, post["id"], alice_headers, content="reply", parent_id=top["id"])
    url = f"/api/v1/comments/{top['id']}"

    assert client.delete(url, headers=alice_headers).status_code == 403
    resp = client.delete(url, headers=bob_headers)

    assert resp.status_code == 200
    body = client.get(f"/api/v1/posts/{post['id']}/comments").get_json()
    assert body["data"] == []
    assert body["meta"]["total"] == 0
    assert client.delete(url, headers=bob_headers).status_code == 404


def test_user_commented_posts(client, post, bob_headers) -> None:
    comment(client, post["id"], bob_headers)
    comment(client, post["id"], bob_headers, content="again")

    body = client.get("/api/v1/user/comments", headers=bob_headers).get_json()

    assert [p["id"] for p in body["data"]] == [post["id"]]
    assert body["meta"]["total"] == 1


def test_user_responses_excludes_own_comments(client, post, alice_headers, bob_headers) -> None:
    comment(client, post["id"], bob_headers, content="from bob")
    comment(client, post["id"], alice_headers, content="from alice")

    body = client.get("/api/v1/user/responses", headers=alice_headers).get_json()

    assert [c["content"] for c in body["data"]] == ["from bob"]
    assert client.get("/api/v1/user/responses", headers=bob_headers).get_json()["data"] == []


def test_draft_comments_hidden_from_others(client, alice_headers, bob_headers) -> None:
    draft = client.post(
        "/api/v1/posts",
        json={"title": "Work in progress", "content": "Not yet.", "published": False},
        headers=alice_headers,
    ).get_json()["data"]
    url = f"/api/v1/posts/{draft['id']}/comments"

    assert client.get(url).status_code == 404
    assert comment(client, draft["id"], bob_headers).status_code == 404
    assert comment(client, draft["id"], alice_headers, content="note to self").status_code == 201


def test_user_comments_drop_posts_turned_draft(client, post, alice_headers, bob_headers) -> None:
    comment(client, post["id"], bob_headers)
    client.put(f"/api/v1/posts/{post['id']}", json={"published": False}, headers=alice_headers)

    body = client.get("/api/v1/user/comments", headers=bob_headers).get_json()

    assert body["data"] == []
    assert body["meta"]["total"] == 0
