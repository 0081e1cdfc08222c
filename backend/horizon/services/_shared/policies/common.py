def is_owner(*, actor_id, owner_id) -> bool:
    """Return True if the actor owns the resource."""
    return actor_id is not None and str(actor_id) == str(owner_id)


def can_view_post(*, viewer_id, author_id, is_private: bool) -> bool:
    """Private posts are visible to their author only."""
    return not is_private or is_owner(actor_id=viewer_id, owner_id=author_id)
