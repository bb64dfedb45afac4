import logging
import unicodedata
from pathlib import Path
from typing import BinaryIO, Iterable

import pathvalidate
from fastapi.responses import FileResponse

from bucketstore.storage.blocking import run_blocking
from bucketstore.storage.bucket import Bucket
from bucketstore.storage.errors import Conflict, InternalError, InvalidName, NotFound, StorageError

# Chunk size for copying uploads to disk
CHUNK_SIZE = 256 * 1024

Source = BinaryIO | bytes | Iterable[bytes]


def sanitize_filename(name: str) -> str:
    """Strip separators, traversal and characters that are illegal on disk, so the name is a single plain path segment"""
    name = unicodedata.normalize("NFC", name)
    for sep in ("/", "\\"):
        name = name.replace(sep, " ")
    name = "_".join(name.split()).strip("._")
    if not name:
        return ""
    # dropping illegal characters can expose a leading dot again
    return pathvalidate.sanitize_filename(name, platform="universal").lstrip(".")


def _chunks(source: Source) -> Iterable[bytes]:
    if isinstance(source, (bytes, bytearray)):
        yield bytes(source)
    elif hasattr(source, "read"):
        while chunk := source.read(CHUNK_SIZE):
            yield chunk
    else:
        yield from source


class StorageFile:
    """
    A file inside a bucket: <bucket>/<sanitized name>.

    The requested name is sanitized when the object is created; only the sanitized name is used afterwards.
    Deleting the file also removes its bucket and user directory if they are left empty.
    """

    def __init__(self, bucket: Bucket, name: str):
        sanitized = sanitize_filename(name)
        if not sanitized:
            raise InvalidName(f"Invalid file name {name!r}")
        self.bucket = bucket
        self.name = sanitized

    def _resolve(self, create: bool) -> Path | None:
        bucket_path = self.bucket._open(create)
        if bucket_path is None:
            return None
        return bucket_path / self.name

    def _open(self, create: bool) -> BinaryIO | None:
        path = self._resolve(create)
        if path is None:
            return None
        try:
            # exclusive creation: an existing file is never overwritten
            return open(path, "xb" if create else "rb")
        except (FileExistsError, FileNotFoundError):
            return None
        except OSError as e:
            logging.warning(f"Could not open {path}: {e}")
            return None

    def _open_path(self, create: bool) -> Path | None:
        path = self._resolve(create)
        if path is None or not path.is_file():
            return None
        return path

    def _discard(self, path: Path) -> None:
        """Remove a partially written file and the directories it leaves empty"""
        try:
            path.unlink(missing_ok=True)
            self.bucket._try_delete()
        except (OSError, StorageError) as e:
            logging.warning(f"Could not clean up after failed write to {path}: {e}")

    def _write(self, source: Source) -> int:
        path = self._resolve(create=True)
        if path is None:
            raise InternalError(f"Can't create bucket {self.bucket.name}")
        try:
            file = open(path, "xb")
        except FileExistsError as e:
            raise Conflict(f"File {self.name} already exists in bucket {self.bucket.name}") from e
        except OSError as e:
            self._discard(path)
            raise InternalError(f"Can't create file {self.name}") from e
        size = 0
        try:
            with file:
                for chunk in _chunks(source):
                    file.write(chunk)
                    size += len(chunk)
        except OSError as e:
            self._discard(path)
            raise InternalError(f"Can't write to file {self.name}") from e
        return size

    def _delete(self) -> None:
        path = self._open_path(create=False)
        if path is None:
            raise NotFound("File not found")
        try:
            path.unlink()
        except FileNotFoundError as e:
            raise NotFound("File not found") from e
        except OSError as e:
            raise InternalError("File can not be deleted") from e
        try:
            self.bucket._try_delete()
        except NotFound:
            # A concurrent delete already cleaned up the bucket
            logging.info(f"Bucket {self.bucket.name} was already removed")

    async def open(self, create: bool = False) -> BinaryIO | None:
        """
        Open the file for reading, or with create=True create it for writing.
        Returns None if the file does not exist (create=False) or already exists (create=True).
        The caller is responsible for closing the returned file.
        """
        return await run_blocking(self._open, create)

    async def open_path(self, create: bool = False) -> Path | None:
        """Return the path of the file if it exists, without opening it"""
        return await run_blocking(self._open_path, create)

    async def write(self, source: Source) -> int:
        """
        Create the file and copy the source (a binary file, bytes, or an iterable of byte chunks) into it,
        in order. Returns the number of bytes written. Raises Conflict if the file already exists.
        """
        return await run_blocking(self._write, source)

    async def delete(self) -> None:
        """
        Delete the file, and then the bucket and user directory if they are left empty.
        Raises NotFound if the file does not exist. If cleaning up a directory fails, InternalError is raised
        but the file stays deleted.
        """
        await run_blocking(self._delete)

    async def serve(self) -> FileResponse:
        path = await self.open_path()
        if path is None:
            raise NotFound("File not found")
        return FileResponse(path, filename=self.name, content_disposition_type="inline")

    def __repr__(self):
        return f"StorageFile({self.bucket.path / self.name})"
