from pathlib import Path

from bucketstore.models import User
from bucketstore.storage.blocking import run_blocking
from bucketstore.storage.errors import NotFound
from bucketstore.storage.fs import open_dir, remove_if_empty


class UserDir:
    """
    The home directory of a user: <storage_root>/<user.folder>.

    This is a cheap value, recomputed per request. The directory only exists on disk while it
    contains buckets: it is created when the first file is written and removed (by try_delete)
    when its last bucket disappears.
    """

    def __init__(self, storage_root: str | Path, user: User):
        self.storage_root = Path(storage_root)
        self.user = user

    @property
    def path(self) -> Path:
        return self.storage_root / self.user.folder

    def _open(self, create: bool) -> Path | None:
        return open_dir(self.path, create)

    def _try_delete(self) -> None:
        if self._open(create=False) is None:
            raise NotFound("Can't find user directory")
        remove_if_empty(self.path, "user directory")

    async def open(self, create: bool = False) -> Path | None:
        """Return the path of the user directory if it exists (after creating it if create is True)"""
        return await run_blocking(self._open, create)

    async def try_delete(self) -> None:
        """Remove the user directory if it is empty. Raises NotFound if it doesn't exist."""
        await run_blocking(self._try_delete)

    def __repr__(self):
        return f"UserDir({self.path})"
