"""Factory Boy definition for :class:`horizon.models.post.Post`."""

from __future__ import annotations

import factory
from horizon.models.post import Post

from tests.factories import BaseFactory
from tests.factories.user import UserFactory


class PostFactory(BaseFactory):
    """Top-level public post by a fresh author.

    Pass ``reply_to=<Post>`` to build a reply instead.
    """

    class Meta:
        model = Post
        exclude = ("reply_to",)

    author = factory.SubFactory(UserFactory)
    user_id = factory.SelfAttribute("author.id")
    content = factory.Faker("sentence", nb_words=8)
    is_private = False
    allow_replies = True
    media_urls = factory.LazyFunction(list)
    like_count = 0
    repost_count = 0
    reply_to = None
    reply_to_post_id = factory.LazyAttribute(lambda o: o.reply_to.id if o.reply_to else None)
