from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

# A single path segment below the storage root: no separators, no leading dot (so no "." or "..")
FolderName = Annotated[str, Field(pattern=r"^[A-Za-z0-9_\-][A-Za-z0-9_.\-]*$", title="Home folder name")]


class UserData(BaseModel):
    """An entry in the credential table, as configured."""

    key: str = Field(min_length=1, description="Secret key of this user")
    folder: FolderName = Field(description="Name of the home folder of this user below the storage root")


class User(BaseModel):
    """For internal use only. Represents a user record from the credential table."""

    model_config = ConfigDict(frozen=True)

    username: str
    key: str
    folder: FolderName
