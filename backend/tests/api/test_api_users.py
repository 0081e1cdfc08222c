"""Profile, listing and follow endpoints."""

from __future__ import annotations

from tests.factories.follow import FollowFactory
from tests.factories.post import PostFactory
from tests.factories.user import UserFactory


def test_profile_hides_email(client, api, session):
    user = UserFactory(bio="hello")
    FollowFactory(followed=user)
    session.commit()

    resp = client.get(api(f"/users/{user.username}"))

    data = resp.get_json()["data"]
    assert resp.status_code == 200
    assert data["bio"] == "hello"
    assert data["follower_count"] == 1
    assert "email" not in data


def test_unknown_profile(client, api):
    assert client.get(api("/users/ghost-user")).status_code == 404


def test_update_profile_and_avatar(client, api, auth_headers):
    _, headers = auth_headers()

    updated = client.patch(api("/users/me"), json={"bio": "new", "is_private": True}, headers=headers)
    assert updated.status_code == 200
    assert updated.get_json()["data"]["bio"] == "new"
    assert updated.get_json()["data"]["is_private"] is True

    avatar = client.put(
        api("/users/me/avatar"), json={"avatar_url": "https://cdn.example.com/a.png"}, headers=headers
    )
    assert avatar.get_json()["data"]["avatar_url"] == "https://cdn.example.com/a.png"

    assert client.patch(api("/users/me"), json={"bio": 7}, headers=headers).status_code == 422


def test_user_post_listings(client, api, session):
    author = UserFactory()
    PostFactory(author=author)
    PostFactory(author=author, reply_to=PostFactory())
    session.commit()

    posts = client.get(api(f"/users/{author.username}/posts")).get_json()
    replies = client.get(api(f"/users/{author.username}/replies")).get_json()
    likes = client.get(api(f"/users/{author.username}/likes")).get_json()

    assert posts["meta"]["total"] == 1
    assert replies["meta"]["total"] == 1
    assert likes["meta"]["total"] == 0


def test_bookmarks_require_auth(client, api, auth_headers):
    assert client.get(api("/users/me/bookmarks")).status_code == 401
    _, headers = auth_headers()
    assert client.get(api("/users/me/bookmarks"), headers=headers).get_json()["data"] == []


def test_follow_private_account_and_accept(client, api, auth_headers):
    follower, follower_headers = auth_headers()
    carol, carol_headers = auth_headers(is_private=True)

    followed = client.post(api(f"/users/{carol.id}/follow"), headers=follower_headers)
    assert followed.status_code == 201
    assert followed.get_json()["data"]["is_accepted"] is False

    status = client.get(api(f"/users/{carol.id}/follow-status"), headers=follower_headers)
    assert status.get_json()["data"] == {"is_following": True, "is_accepted": False}

    requests = client.get(api("/users/me/follow-requests"), headers=carol_headers).get_json()
    assert [r["id"] for r in requests["data"]] == [str(follower.id)]

    accepted = client.post(api(f"/users/me/follow-requests/{follower.id}/accept"), headers=carol_headers)
    assert accepted.get_json()["data"]["is_accepted"] is True

    followers = client.get(api(f"/users/{carol.id}/followers")).get_json()
    assert [f["username"] for f in followers["data"]] == [follower.username]

    assert client.delete(api(f"/users/{carol.id}/follow"), headers=follower_headers).status_code == 204
    assert client.delete(api(f"/users/{carol.id}/follow"), headers=follower_headers).status_code == 404


def test_self_follow_is_bad_request(client, api, auth_headers):
    user, headers = auth_headers()

    resp = client.post(api(f"/users/{user.id}/follow"), headers=headers)

    assert resp.status_code == 400
    assert resp.get_json()["code"] == "invalid_argument"


def test_follow_status_for_anonymous(client, api, session):
    user = UserFactory()
    session.commit()

    resp = client.get(api(f"/users/{user.id}/follow-status"))

    assert resp.get_json()["data"] == {"is_following": False, "is_accepted": False}
