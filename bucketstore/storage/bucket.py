import logging
import re
import secrets
import string
from pathlib import Path

from bucketstore.storage.blocking import run_blocking
from bucketstore.storage.errors import InternalError, InvalidName, NotFound
from bucketstore.storage.fs import open_dir, remove_if_empty
from bucketstore.storage.userdir import UserDir

BUCKET_NAME_PATTERN = r"^[A-Za-z0-9]+$"
BUCKET_NAME_ALPHABET = string.ascii_letters + string.digits
GENERATED_NAME_LENGTH = 16
# a generated bucket never reuses an existing directory; give up after this many taken names
GENERATED_NAME_ATTEMPTS = 8


def is_valid_bucket_name(name: str) -> bool:
    return re.fullmatch(BUCKET_NAME_PATTERN, name) is not None


def generate_bucket_name(length: int = GENERATED_NAME_LENGTH) -> str:
    return "".join(secrets.choice(BUCKET_NAME_ALPHABET) for _ in range(length))


class Bucket:
    """
    A directory of files inside a user directory: <user_dir>/<name>.

    If no name is given, a random one is generated. Generated buckets are meant to be fresh, so when the
    directory is created for them it must not exist yet; if it does, another name is drawn.
    Like UserDir, the directory only exists on disk while it contains files.
    """

    def __init__(self, user_dir: UserDir, name: str | None = None):
        if name is None:
            name = generate_bucket_name()
            self.generated = True
        elif not is_valid_bucket_name(name):
            raise InvalidName(f"Invalid bucket name {name!r}, bucket names can only contain letters and digits")
        else:
            self.generated = False
        self.user_dir = user_dir
        self.name = name
        self._claimed = False

    @property
    def path(self) -> Path:
        return self.user_dir.path / self.name

    def _claim(self) -> None:
        for _ in range(GENERATED_NAME_ATTEMPTS):
            try:
                self.path.mkdir()
            except FileExistsError:
                logging.warning(f"Generated bucket name {self.name} is already taken, generating a new one")
                self.name = generate_bucket_name()
                continue
            except OSError as e:
                # leave it to open_dir to find out the directory is not there
                logging.warning(f"Could not create bucket directory {self.path}: {e}")
                return
            self._claimed = True
            return
        raise InternalError("Could not generate an unused bucket name")

    def _open(self, create: bool) -> Path | None:
        if self.user_dir._open(create) is None:
            return None
        if create and self.generated and not self._claimed:
            self._claim()
        return open_dir(self.path, create)

    def _try_delete(self) -> None:
        if self._open(create=False) is None:
            raise NotFound("Can't find bucket")
        if remove_if_empty(self.path, "bucket"):
            self.user_dir._try_delete()

    async def open(self, create: bool = False) -> Path | None:
        """
        Return the path of the bucket directory if it exists, or None if it (or the user directory) doesn't.
        With create=True, the user directory and bucket directory are created first.
        """
        return await run_blocking(self._open, create)

    async def try_delete(self) -> None:
        """
        Remove the bucket directory if it is empty, and then the user directory if that is empty as well.
        Raises NotFound if the bucket does not exist, InternalError if a directory could not be removed.
        """
        await run_blocking(self._try_delete)

    def __repr__(self):
        return f"Bucket({self.path})"
