"""
Bucketstore Configuration

We read configuration from 2 sources, in order of precedence (higher is more priority)
- Environment variables
- A .env file, either in the current working directory or in a location specified
  by the BUCKETSTORE_ENV_FILE environment variable

The credential table is given as JSON, e.g.
  BUCKETSTORE_USERS='{"user1": {"key": "mysecret", "folder": "user1"}}'
"""

import functools
from pathlib import Path
from typing import Annotated

from dotenv import load_dotenv
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from bucketstore.models import UserData

ENV_PREFIX = "bucketstore_"
# The first path segment of GET /delete/<bucket>/<file> can not also be a username
RESERVED_USERNAMES = {"delete"}


class Settings(BaseSettings):
    env_file: Annotated[
        Path,
        Field(
            description="Location of a .env file (if used) relative to working directory",
        ),
    ] = Path(".env")
    host: Annotated[str, Field(description="Host (interface) to bind the server to")] = "localhost"
    port: Annotated[int, Field(description="Port to bind the server to")] = 8080

    storage_folder: Annotated[
        Path,
        Field(
            description="Storage root. Files are stored as <storage_folder>/<user folder>/<bucket>/<file>",
        ),
    ] = Path("store")

    users: Annotated[
        dict[str, UserData],
        Field(
            description="Credential table as JSON, mapping username to its key and home folder",
        ),
    ] = {}

    default_user: Annotated[
        str,
        Field(
            description="User to authenticate as for link-style deletes that do not give a username",
        ),
    ] = "default_user"

    io_workers: Annotated[
        int,
        Field(
            gt=0,
            description="Number of worker threads for blocking filesystem operations",
        ),
    ] = 8

    @model_validator(mode="after")
    def check_reserved_usernames(self) -> "Settings":
        reserved = RESERVED_USERNAMES & set(self.users)
        if reserved:
            raise ValueError(f"Username(s) {sorted(reserved)} are reserved for API routes")
        return self

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX)


@functools.lru_cache()
def get_settings() -> Settings:
    # Read once to find out where the .env file lives, then load it without overriding the environment
    temp = Settings()
    load_dotenv(temp.env_file, override=False)
    return Settings()


def validate_settings():
    settings = get_settings()
    if not settings.users:
        return "No users are configured, so nobody can upload or delete files. Run `python -m bucketstore create-env`."
    if settings.default_user not in settings.users:
        return (
            f"The default user {settings.default_user!r} is not configured,"
            " link-style deletes without a username will always be refused"
        )


if __name__ == "__main__":
    # Echo the settings
    for k, v in get_settings().model_dump().items():
        if k == "users":
            v = {name: dict(data, key="***") for name, data in v.items()}
        print(f"{ENV_PREFIX.upper()}{k.upper()}={v}")
