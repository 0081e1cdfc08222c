"""Factory Boy definition for :class:`horizon.models.follow.Follow`."""

from __future__ import annotations

import factory
from horizon.models.follow import Follow

from tests.factories import BaseFactory
from tests.factories.user import UserFactory


class FollowFactory(BaseFactory):
    """Accepted edge ``follower -> followed`` unless ``is_accepted=False``."""

    class Meta:
        model = Follow
        exclude = ("follower", "followed")

    follower = factory.SubFactory(UserFactory)
    followed = factory.SubFactory(UserFactory)
    follower_id = factory.SelfAttribute("follower.id")
    followed_id = factory.SelfAttribute("followed.id")
    is_accepted = True
