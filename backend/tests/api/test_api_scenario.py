"""End-to-end walk through the public API with two fresh accounts."""

from __future__ import annotations

from tests.helpers.utils import bearer


def _register(client, api, username):
    resp = client.post(
        api("/auth/register"),
        json={"username": username, "email": f"{username}@example.com", "password": "demoPass123!"},
    )
    assert resp.status_code == 201, resp.get_json()
    data = resp.get_json()["data"]
    return data["user"], bearer(data["tokens"]["access_token"])


def test_alice_and_bob(client, api):
    alice, alice_h = _register(client, api, "alice")
    bob, bob_h = _register(client, api, "bob")

    post = client.post(api("/posts"), json={"content": "Hello from Alice"}, headers=alice_h).get_json()["data"]

    # bob sees it on the timeline and likes it
    timeline = client.get(api("/posts"), headers=bob_h).get_json()
    assert [p["id"] for p in timeline["data"]] == [post["id"]]
    assert client.post(api(f"/posts/{post['id']}/like"), headers=bob_h).status_code == 201

    # bob replies, then follows alice
    reply = client.post(
        api("/posts"),
        json={"content": "Nice one", "reply_to_post_id": post["id"]},
        headers=bob_h,
    ).get_json()["data"]
    follow = client.post(api(f"/users/{alice['id']}/follow"), headers=bob_h).get_json()["data"]
    assert follow["is_accepted"] is True

    # alice got one notification per action, newest first
    notes = client.get(api("/notifications"), headers=alice_h).get_json()["data"]
    assert [n["type"] for n in notes] == ["follow", "reply", "like"]
    assert {n["actor"]["username"] for n in notes} == {"bob"}
    assert notes[1]["post_id"] == reply["id"]
    assert notes[1]["parent_post_content"] == "Hello from Alice"

    # the post carries the derived counts
    seen = client.get(api(f"/posts/{post['id']}"), headers=bob_h).get_json()["data"]
    assert (seen["like_count"], seen["reply_count"], seen["has_liked"]) == (1, 1, True)

    profile = client.get(api("/users/alice")).get_json()["data"]
    assert (profile["follower_count"], profile["following_count"]) == (1, 0)

    # bob's own actions never notify bob
    assert client.get(api("/notifications/unread-count"), headers=bob_h).get_json()["data"]["unread"] == 0
