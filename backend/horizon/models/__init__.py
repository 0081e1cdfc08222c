from horizon.models.follow import Follow
from horizon.models.interaction import Bookmark, Like
from horizon.models.notification import Notification, NotificationType
from horizon.models.post import Post
from horizon.models.user import User

__all__ = [
    "Bookmark",
    "Follow",
    "Like",
    "Notification",
    "NotificationType",
    "Post",
    "User",
]
