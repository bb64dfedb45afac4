"""
Authentication against the credential table.

Both ways of presenting credentials (headers and query parameters, see bucketstore.api.auth)
end up in authenticate, so they always reach the same decision for the same input.
"""

import hmac

from bucketstore.config import get_settings
from bucketstore.models import User


def get_user(username: str) -> User | None:
    """Look up a user record in the credential table, without checking any key"""
    data = get_settings().users.get(username)
    if data is None:
        return None
    return User(username=username, key=data.key, folder=data.folder)


def authenticate(username: str, secret: str) -> User | None:
    """
    Return the user record if the user exists and the secret is exactly its key, None otherwise.
    An unknown user and a wrong key are indistinguishable for the caller.
    """
    user = get_user(username)
    if user is None:
        return None
    if not hmac.compare_digest(secret.encode("utf-8"), user.key.encode("utf-8")):
        return None
    return user
