"""Synchronous directory helpers shared by UserDir and Bucket. Only call these from the I/O pool."""

import logging
import os
from pathlib import Path

from bucketstore.storage.errors import InternalError, NotFound


def open_dir(path: Path, create: bool) -> Path | None:
    """
    Optionally create the directory (one level, an existing directory is fine),
    then return the path if the directory exists, or None if it doesn't.
    """
    if create:
        try:
            path.mkdir()
        except FileExistsError:
            pass
        except OSError as e:
            logging.warning(f"Could not create directory {path}: {e}")
    return path if path.is_dir() else None


def remove_if_empty(path: Path, what: str) -> bool:
    """
    Remove the directory if it has no entries. Returns True if it was removed, False if it is still in use.
    Raises NotFound if the directory does not exist, InternalError if it could not be removed.
    """
    try:
        with os.scandir(path) as entries:
            if next(entries, None) is not None:
                return False
        path.rmdir()
    except (FileNotFoundError, NotADirectoryError) as e:
        raise NotFound(f"Can't find {what}") from e
    except OSError as e:
        raise InternalError(f"Can't delete {what}") from e
    return True
