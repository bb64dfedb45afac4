"""
FastAPI dependencies for the two ways of presenting credentials:

- as `username` and `auth` headers (uploads and DELETE requests)
- as `username` and `auth` query parameters (link-style deletes). If the username is omitted,
  the configured default user is assumed.

Both are checked by bucketstore.auth.authenticate.
"""

import logging
from typing import Annotated

from fastapi import Header, Query

from bucketstore.auth import authenticate
from bucketstore.config import get_settings
from bucketstore.models import User
from bucketstore.storage import Unauthorized


def _authenticated(username: str, secret: str) -> User:
    user = authenticate(username, secret)
    if user is None:
        logging.warning(f"Authentication failed for user {username!r}")
        raise Unauthorized("Forbidden")
    return user


def header_user(
    username: Annotated[str | None, Header(description="Username from the credential table")] = None,
    auth: Annotated[str | None, Header(description="Secret key of the user")] = None,
) -> User:
    """Authenticates the user based on the username and auth headers."""
    if username is None or auth is None:
        raise Unauthorized("Forbidden")
    return _authenticated(username, auth)


def query_user(
    auth: Annotated[str, Query(description="Secret key of the user")],
    username: Annotated[str | None, Query(description="Username, the default user if omitted")] = None,
) -> User:
    """Authenticates the user based on the username and auth query parameters."""
    if username is None:
        username = get_settings().default_user
    return _authenticated(username, auth)
