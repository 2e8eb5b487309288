from chirp.models.follow import Follow
from chirp.models.revoked_token import RevokedToken
from chirp.models.tweet import Tweet
from chirp.models.user import Role, User

__all__ = [
    "Follow",
    "RevokedToken",
    "Role",
    "Tweet",
    "User",
]
