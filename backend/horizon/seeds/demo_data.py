"""Idempotent demo data for local development environments.

Users are written directly; posts, likes and follows go through the service
layer so counters, follow states and notifications match what the API
would have produced.
"""

from __future__ import annotations

import logging

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import select

from horizon.models.user import User
from horizon.services.follows import FollowIn, FollowService
from horizon.services.posts import InteractionService, PostCommandService, PostCreateIn

LOGGER = logging.getLogger(__name__)

USER_FIXTURES: list[dict[str, object]] = [
    {
        "username": "alice",
        "email": "alice@example.com",
        "display_name": "Alice Martin",
        "password": "demoPass123!",
        "is_private": False,
    },
    {
        "username": "bob",
        "email": "bob@example.com",
        "display_name": "Bob Okafor",
        "password": "demoPass123!",
        "is_private": False,
    },
    {
        "username": "carol",
        "email": "carol@example.com",
        "display_name": "Carol Nguyen",
        "password": "demoPass123!",
        "is_private": True,
    },
]

POST_FIXTURES: list[tuple[str, str]] = [
    ("alice", "First light over the ridge this morning."),
    ("alice", "Anyone else trying the new trail map?"),
    ("bob", "Shipping a small side project today."),
    ("carol", "Quiet week, lots of reading."),
]

REPLY_FIXTURES: list[tuple[str, int, str]] = [
    ("bob", 0, "Stunning. Which peak was that?"),
    ("alice", 2, "Congrats on the launch!"),
]

LIKE_FIXTURES: list[tuple[str, int]] = [("bob", 0), ("carol", 0), ("alice", 2)]

FOLLOW_FIXTURES: list[tuple[str, str]] = [
    ("bob", "alice"),
    ("alice", "bob"),
    ("alice", "carol"),
]


def _seed_users(database: SQLAlchemy, summary: dict[str, dict[str, int]]) -> dict[str, User]:
    session = database.session
    users: dict[str, User] = {}
    counters = summary.setdefault("users", {"created": 0, "existing": 0})
    for fixture in USER_FIXTURES:
        username = str(fixture["username"])
        user = session.execute(select(User).filter_by(username=username)).scalar_one_or_none()
        if user is None:
            user = User(
                username=username,
                email=str(fixture["email"]),
                password=str(fixture["password"]),
                display_name=str(fixture["display_name"]),
                is_private=bool(fixture["is_private"]),
            )
            session.add(user)
            counters["created"] += 1
            LOGGER.debug("Seed user created", extra={"username": username})
        else:
            counters["existing"] += 1
        users[username] = user
    session.commit()
    return users


def run_all(database: SQLAlchemy, *, verbose: bool = False) -> dict[str, dict[str, int]]:
    """Seed users, then posts, replies, likes and follows on a fresh database.

    Content is only written when none of the demo users has posted yet, so
    running the command twice does not duplicate timelines.
    """
    summary: dict[str, dict[str, int]] = {}
    users = _seed_users(database, summary)
    ids = {name: user.id for name, user in users.items()}

    already_seeded = summary["users"]["created"] == 0
    if already_seeded:
        LOGGER.info("Demo content already present; skipping posts and interactions")
        return summary

    posts = PostCommandService()
    interactions = InteractionService()
    follows = FollowService()

    created = []
    for author, content in POST_FIXTURES:
        created.append(posts.create(PostCreateIn(author_id=ids[author], content=content)))
    for author, parent_index, content in REPLY_FIXTURES:
        posts.create(
            PostCreateIn(
                author_id=ids[author],
                content=content,
                reply_to_post_id=created[parent_index].id,
            )
        )
    summary["posts"] = {"created": len(POST_FIXTURES) + len(REPLY_FIXTURES), "existing": 0}

    for liker, post_index in LIKE_FIXTURES:
        interactions.like(created[post_index].id, ids[liker])
    summary["likes"] = {"created": len(LIKE_FIXTURES), "existing": 0}

    for follower, followed in FOLLOW_FIXTURES:
        follows.follow(FollowIn(follower_id=ids[follower], followed_id=ids[followed]))
    summary["follows"] = {"created": len(FOLLOW_FIXTURES), "existing": 0}

    if verbose:
        LOGGER.info("Demo content seeded", extra={"summary": summary})
    return summary
